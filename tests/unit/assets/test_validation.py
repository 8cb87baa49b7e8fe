"""Unit tests for upload type validation."""

import pytest

from media_assets.assets.models import IncomingFile
from media_assets.assets.validation import (
    REJECTION_MESSAGE,
    extension_accepted,
    is_accepted,
    mime_accepted,
    validate_batch,
)
from media_assets.exceptions import ValidationError


def _file(name: str, mime: str) -> IncomingFile:
    return IncomingFile(filename=name, content_type=mime, data=b"x")


class TestMime:
    @pytest.mark.parametrize(
        "mime",
        [
            "image/jpeg",
            "image/png",
            "image/gif",
            "image/tiff",
            "image/bmp",
            "image/x-icon",
            "image/vnd.microsoft.icon",
            "application/pdf",
            "IMAGE/PNG",
        ],
    )
    def test_accepted(self, mime):
        assert mime_accepted(mime)

    @pytest.mark.parametrize("mime", ["text/plain", "application/zip", "video/mp4", "", None])
    def test_rejected(self, mime):
        assert not mime_accepted(mime)


class TestExtension:
    @pytest.mark.parametrize(
        "name", ["a.jpeg", "a.jpg", "a.png", "a.gif", "a.tiff", "a.tif", "a.bmp", "a.pdf", "a.ico", "A.JPG"]
    )
    def test_accepted(self, name):
        assert extension_accepted(name)

    @pytest.mark.parametrize("name", ["doc.txt", "pdf", "jpg-notes.txt", "archive.tar.gz", ""])
    def test_rejected(self, name):
        assert not extension_accepted(name)


class TestBatch:
    def test_either_mime_or_extension_is_enough(self):
        assert is_accepted(_file("scan-a-b", "application/pdf"))
        assert is_accepted(_file("photo-a-b.jpg", "application/octet-stream"))

    def test_both_failing_rejects(self):
        assert not is_accepted(_file("doc.txt", "text/plain"))

    def test_one_bad_file_rejects_whole_batch(self):
        batch = [_file("photo-a-b.jpg", "image/jpeg"), _file("doc.txt", "text/plain")]

        with pytest.raises(ValidationError) as exc_info:
            validate_batch(batch)

        assert str(exc_info.value) == REJECTION_MESSAGE
        assert REJECTION_MESSAGE.startswith("Only image files")
        assert REJECTION_MESSAGE.endswith("are allowed!")

    def test_all_good(self):
        validate_batch([_file("photo-a-b.jpg", "image/jpeg"), _file("scan-a-b.pdf", "application/pdf")])
