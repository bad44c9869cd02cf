from __future__ import annotations

from datetime import datetime

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def _is_kept(char: str) -> bool:
    if char.isascii():
        return char.isalnum()
    return char.isalpha()


def sanitize_title(title: str) -> str:
    """Replace every character outside ASCII letters/digits and non-Latin letters with ``_``."""

    return "".join(char if _is_kept(char) else "_" for char in title)


def build_file_name(title: str, extension: str, moment: datetime) -> str:
    extension = extension if extension.startswith(".") else f".{extension}"
    return f"{sanitize_title(title)}_{moment.strftime(TIMESTAMP_FORMAT)}{extension}"
