"""Checksums used to detect edits to already-applied migrations."""

from __future__ import annotations

import hashlib
from typing import Sequence


def compute_checksum(statement: str, args: Sequence[object] = ()) -> str:
    """Return the 32 character hex digest of a statement and its bound arguments."""

    parts = [statement]
    parts.extend(str(arg) for arg in args)
    payload = "".join(parts).encode("utf-8")
    return hashlib.md5(payload, usedforsecurity=False).hexdigest()


__all__ = ["compute_checksum"]
