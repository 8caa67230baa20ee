# packages/opushdr/src/opushdr/errors.py
from __future__ import annotations

import enum

__all__ = [
    "ErrorKind",
    "HeaderError",
    "IoFailure", "Truncated", "BadMagic",
    "UnsupportedVersion", "InvalidField", "InvalidEncoding",
]


class ErrorKind(enum.Enum):
    """Catégories d'échec du décodage (une par sous-classe de HeaderError)."""
    IO_FAILURE = "io_failure"
    TRUNCATED = "truncated"
    BAD_MAGIC = "bad_magic"
    UNSUPPORTED_VERSION = "unsupported_version"
    INVALID_FIELD = "invalid_field"
    INVALID_ENCODING = "invalid_encoding"


class HeaderError(ValueError):
    """Base des erreurs de décodage. `kind` identifie la catégorie."""
    kind: ErrorKind


class IoFailure(HeaderError):
    # l'OSError d'origine est chaînée via __cause__
    kind = ErrorKind.IO_FAILURE


class Truncated(HeaderError):
    kind = ErrorKind.TRUNCATED

    def __init__(self, message: str, *, expected: int = 0, got: int = 0) -> None:
        super().__init__(message)
        self.expected = expected
        self.got = got


class BadMagic(HeaderError):
    kind = ErrorKind.BAD_MAGIC


class UnsupportedVersion(HeaderError):
    kind = ErrorKind.UNSUPPORTED_VERSION


class InvalidField(HeaderError):
    kind = ErrorKind.INVALID_FIELD


class InvalidEncoding(HeaderError):
    kind = ErrorKind.INVALID_ENCODING
