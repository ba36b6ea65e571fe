"""Coded warnings for non-fatal conditions during assembly."""

from __future__ import annotations

import warnings

KNOWN_CODES: frozenset[str] = frozenset({"W01"})


class BaryquadWarning(UserWarning):
    """Warning with a machine-readable code."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        super().__init__(f"[{code}] {message}")


def emit_warning(code: str, message: str) -> None:
    """Issue a ``BaryquadWarning`` via ``warnings.warn``.

    Raises ``ValueError`` for codes outside ``KNOWN_CODES``.
    """
    if code not in KNOWN_CODES:
        raise ValueError(f"Unknown warning code: {code!r} (known: {sorted(KNOWN_CODES)})")
    warnings.warn(BaryquadWarning(code, message), stacklevel=3)
