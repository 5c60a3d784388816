"""
Unit tests for the image pass.
"""

import pytest
from starmark.extractor.images import extract_images, image_format
from starmark.protocols import RawImage


class TestImageFormat:
    """Extension parsing from image URLs."""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://cdn.example.com/a/b/cover.JPG", "jpg"),
            ("https://cdn.example.com/page.webp?w=800&h=600", "webp"),
            ("https://cdn.example.com/archive.tar.gz", "gz"),
            ("https://cdn.example.com/image", "unknown"),
            ("https://cdn.example.com/image.", "unknown"),
            ("https://cdn.example.com/", "unknown"),
        ],
    )
    def test_image_format(self, url, expected):
        assert image_format(url) == expected

    def test_host_dots_are_not_an_extension(self):
        """A dotted host with an extensionless path is unknown."""
        assert image_format("https://images.example.com/render?id=7") == "unknown"


class TestExtractImages:
    """Candidate filtering and per-URL dedup."""

    def test_src_then_data_src_in_document_order(self):
        images = [
            RawImage(src="https://x.com/1.png", data_src="https://x.com/1-full.png"),
            RawImage(src="https://x.com/2.gif"),
        ]

        result = extract_images(images)

        assert [img.url for img in result] == [
            "https://x.com/1.png",
            "https://x.com/1-full.png",
            "https://x.com/2.gif",
        ]
        assert [img.format for img in result] == ["png", "png", "gif"]

    def test_placeholder_src_is_skipped_and_lazy_source_used(self):
        images = [RawImage(src="https://x.com/img/loading.gif", data_src="https://x.com/real.jpg")]

        result = extract_images(images)

        assert [img.url for img in result] == ["https://x.com/real.jpg"]

    def test_relative_and_data_urls_rejected(self):
        images = [
            RawImage(src="data:image/png;base64,AAAA"),
            RawImage(src=None, data_src="/relative/pic.png"),
            RawImage(src="", data_src=""),
        ]

        assert extract_images(images) == []

    def test_duplicate_urls_emitted_once(self):
        images = [
            RawImage(src="https://x.com/a.png"),
            RawImage(src="https://x.com/b.png", data_src="https://x.com/a.png"),
            RawImage(src="https://x.com/a.png"),
        ]

        result = extract_images(images)

        assert [img.url for img in result] == ["https://x.com/a.png", "https://x.com/b.png"]

    def test_records_are_tagged_as_images(self):
        (image,) = extract_images([RawImage(src="https://x.com/a.png")])
        assert image.type == "IMAGE"
