"""
Unit tests for resource classification.
"""

import pytest

from sitehttpd.http.content_types import ResourceKind


class TestResourceKind:
    """Tests for ResourceKind.from_path."""

    @pytest.mark.parametrize("path, kind", [
        ("/", ResourceKind.HTML),
        ("/about", ResourceKind.HTML),
        ("/notes.txt", ResourceKind.HTML),
        ("/css/site.css", ResourceKind.CSS),
        ("/img/logo.png", ResourceKind.PNG),
        ("/favicon.ico", ResourceKind.ICO),
    ])
    def test_classification(self, path: str, kind: ResourceKind):
        assert ResourceKind.from_path(path) is kind

    def test_css_checked_first(self):
        """Substring match in fixed order: .css wins over .png."""
        assert ResourceKind.from_path("/a.css/b.png") is ResourceKind.CSS

    def test_png_before_ico(self):
        assert ResourceKind.from_path("/x.ico.png") is ResourceKind.PNG

    def test_marker_anywhere_in_path(self):
        """Matching is by substring, not suffix."""
        assert ResourceKind.from_path("/old.css.bak") is ResourceKind.CSS

    def test_content_types(self):
        assert ResourceKind.HTML.content_type == "text/html"
        assert ResourceKind.CSS.content_type == "text/css"
        assert ResourceKind.PNG.content_type == "image/png"
        assert ResourceKind.ICO.content_type == "image/vnd.microsoft.icon"

    def test_only_images_are_binary(self):
        assert ResourceKind.PNG.is_binary
        assert ResourceKind.ICO.is_binary
        assert not ResourceKind.HTML.is_binary
        assert not ResourceKind.CSS.is_binary

    def test_only_html_appends_extension(self):
        assert ResourceKind.HTML.appends_extension
        assert not ResourceKind.CSS.appends_extension
        assert not ResourceKind.PNG.appends_extension
        assert not ResourceKind.ICO.appends_extension
