from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Iterable

from media_assets.exceptions import ValidationError

from .models import IncomingFile

ACCEPTED_TYPES = ("jpeg", "jpg", "png", "gif", "tiff", "tif", "bmp", "pdf", "ico")
REJECTION_MESSAGE = f"Only image files ({', '.join(ACCEPTED_TYPES)}) are allowed!"

_MIME_PATTERN = re.compile("|".join(ACCEPTED_TYPES))


def mime_accepted(content_type: str | None) -> bool:
    # substring match so image/x-icon, image/vnd.microsoft.icon and image/tiff all pass
    return bool(content_type) and _MIME_PATTERN.search(content_type.lower()) is not None


def extension_accepted(filename: str) -> bool:
    return PurePosixPath(filename.lower()).suffix.lstrip(".") in ACCEPTED_TYPES


def is_accepted(file: IncomingFile) -> bool:
    return mime_accepted(file.content_type) or extension_accepted(file.filename)


def validate_batch(files: Iterable[IncomingFile]) -> None:
    """Reject the whole batch if any file is outside the accepted types."""
    for file in files:
        if not is_accepted(file):
            raise ValidationError(REJECTION_MESSAGE)
