# packages/opushdr/src/opushdr/bitstream/stream.py
from __future__ import annotations
from contextlib import closing
from typing import Any, Optional

from ..config import DecoderConfig
from ..errors import Truncated
from .comments import read_comment_header
from .identification import read_identification_header
from .ogg import iter_packets
from .reader import PrimitiveReader
from .records import OpusHeaders


def read_headers(source: Any, cfg: Optional[DecoderConfig] = None) -> OpusHeaders:
    """
    Décode `OpusHead` + `OpusTags` depuis un flux Ogg complet.

    Le 1er paquet du flux logique est l'en-tête d'identification, le 2e
    l'en-tête de commentaires (RFC 7845 §3). Chaque paquet est décodé par un
    lecteur dédié : les octets en trop dans `OpusTags` sont ignorés.
    """
    with closing(iter_packets(source, cfg)) as packets:
        first = next(packets, None)
        if first is None:
            raise Truncated("Ogg stream ended before the OpusHead packet")
        ident = read_identification_header(PrimitiveReader(first, cfg))
        second = next(packets, None)
        if second is None:
            raise Truncated("Ogg stream ended before the OpusTags packet")
        comments = read_comment_header(PrimitiveReader(second, cfg), cfg)
    return OpusHeaders(identification=ident, comments=comments)
