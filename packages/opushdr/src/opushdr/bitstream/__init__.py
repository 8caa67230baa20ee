# packages/opushdr/src/opushdr/bitstream/__init__.py
from __future__ import annotations

# Source abstraite + lecteur typé
from .source import ByteSource, as_source
from .reader import PrimitiveReader

# Valeurs décodées
from .records import (
    SILENT_CHANNEL,
    ChannelMappingTable, IdentificationHeader, CommentHeader, OpusHeaders,
)

# Décodeurs de paquets (lèvent HeaderError)
from .identification import read_identification_header
from .comments import read_comment_header, split_comment

# Conteneur Ogg (extraction des deux paquets d'en-tête)
from .ogg import OggPage, read_page, iter_packets
from .stream import read_headers
from .io import read_headers_from_path

__all__ = [
    "ByteSource", "as_source",
    "PrimitiveReader",
    "SILENT_CHANNEL",
    "ChannelMappingTable", "IdentificationHeader", "CommentHeader", "OpusHeaders",
    "read_identification_header",
    "read_comment_header", "split_comment",
    "OggPage", "read_page", "iter_packets",
    "read_headers",
    "read_headers_from_path",
]
