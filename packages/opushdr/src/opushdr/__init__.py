# packages/opushdr/src/opushdr/__init__.py
from __future__ import annotations

"""opushdr - en-têtes Ogg Opus (RFC 7845 §5), surface publique.

Points d'entrée sans exception (`decode_*` → valeur ou DecodeFailure),
config publique et taxonomie d'erreurs.
"""

__version__ = "0.1.0"

from .config import DecoderConfig
from .errors import (
    ErrorKind,
    HeaderError,
    IoFailure, Truncated, BadMagic,
    UnsupportedVersion, InvalidField, InvalidEncoding,
)
from .bitstream import (
    ChannelMappingTable,
    IdentificationHeader,
    CommentHeader,
    OpusHeaders,
    PrimitiveReader,
)
from .codec import (
    DecodeFailure,
    decode_identification_header,
    decode_comment_header,
    decode_headers,
)

__all__ = [
    "__version__",
    "DecoderConfig",
    "ErrorKind", "HeaderError",
    "IoFailure", "Truncated", "BadMagic",
    "UnsupportedVersion", "InvalidField", "InvalidEncoding",
    "ChannelMappingTable", "IdentificationHeader", "CommentHeader", "OpusHeaders",
    "PrimitiveReader",
    "DecodeFailure",
    "decode_identification_header", "decode_comment_header", "decode_headers",
]
