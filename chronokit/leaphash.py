"""Integrity hash of an official leap-seconds.list document."""

from __future__ import annotations

import hashlib

_BLANKS = str.maketrans("", "", " \t")
_SPECIAL_PREFIXES = ("#$", "#@")
_GROUP_SIZE = 8
_GROUP_COUNT = 5


def _hashed_part(line: str) -> str:
    """Return the portion of one line that takes part in the hash."""
    if line.startswith(_SPECIAL_PREFIXES):
        # "#$" carries the last modification time, "#@" the expiration time.
        return line[2:]
    if line.startswith("#"):
        return ""
    comment_pos = line.find("#")
    if comment_pos != -1:
        # The character right before the comment marker is dropped as well.
        line = line[: comment_pos - 1]
    return line


def compute(data: str) -> str:
    """Return the grouped SHA-1 of the hashed content of a leap-seconds.list text.

    Comments and blank characters are ignored, except for the "#$" and "#@"
    lines whose values are included.  The digest is returned as five groups
    of eight hex digits separated by spaces, as written in the "#h" line.
    """
    filtered = "".join(
        _hashed_part(line).translate(_BLANKS) for line in data.split("\n")
    )
    digest = hashlib.sha1(filtered.encode("utf-8")).hexdigest()
    return " ".join(
        digest[i * _GROUP_SIZE : (i + 1) * _GROUP_SIZE] for i in range(_GROUP_COUNT)
    )