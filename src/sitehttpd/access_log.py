"""
=============================================================================
ACCESS LOGGING
=============================================================================

One log record per handled connection, on the "sitehttpd.access" logger.

    127.0.0.1 - - [19/Oct/2026:10:24:01 +0000] "GET /about" 200 5120 0.84ms [a1b2c3d4]

or, with log_format="json":

    {"connection_id": "a1b2c3d4", "client_ip": "127.0.0.1", "method": "GET",
     "path": "/about", "status_code": 200, "bytes_sent": 5120, ...}

The logger is namespaced so it can be routed separately:

    logging.getLogger("sitehttpd.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import time
from dataclasses import asdict, dataclass

logger = logging.getLogger("sitehttpd.access")


@dataclass
class RequestLog:
    """
    Structured log entry for one connection.

    method and path are "-" when the request line could not be read.
    """

    connection_id: str
    client_ip: str
    method: str
    path: str
    status_code: int
    bytes_sent: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        """Apache-like line, readable by the usual log tools."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.bytes_sent} {self.duration_ms:.2f}ms [{self.connection_id}]'
        )


class AccessLog:
    """
    Emits RequestLog entries.

    Args:
        log_format: "text" or "json".
        log_level: Level the entries are logged at.
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        self.log_format = log_format
        self.log_level = log_level

    def record(
        self,
        connection_id: str,
        client_ip: str,
        method: str,
        path: str,
        status_code: int,
        bytes_sent: int,
        started_at: float,
    ) -> RequestLog:
        """Build the entry for a finished connection and log it."""
        entry = RequestLog(
            connection_id=connection_id,
            client_ip=client_ip,
            method=method,
            path=path,
            status_code=status_code,
            bytes_sent=bytes_sent,
            duration_ms=(time.time() - started_at) * 1000,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())

        return entry
