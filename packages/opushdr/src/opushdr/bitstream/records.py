from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

__all__ = [
    "SILENT_CHANNEL",
    "ChannelMappingTable", "IdentificationHeader", "CommentHeader", "OpusHeaders",
]

#: Entrée de mapping réservée par la RFC 7845 : canal muet.
SILENT_CHANNEL = 255


@dataclass(frozen=True, slots=True)
class ChannelMappingTable:
    """Table de mapping (présente ssi channel_mapping_family != 0)."""
    stream_count: int
    coupled_count: int
    channel_mapping: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.stream_count < 1:
            raise ValueError("stream_count must be >= 1")
        if not 0 <= self.coupled_count <= self.stream_count:
            raise ValueError("coupled_count must be in [0, stream_count]")
        limit = self.stream_count + self.coupled_count
        bad = [x for x in self.channel_mapping if not (0 <= x < limit or x == SILENT_CHANNEL)]
        if bad:
            raise ValueError(f"channel_mapping entries out of range (< {limit} or {SILENT_CHANNEL}): {bad}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stream_count": int(self.stream_count),
            "coupled_count": int(self.coupled_count),
            "channel_mapping": list(self.channel_mapping),
        }


@dataclass(frozen=True, slots=True)
class IdentificationHeader:
    """Paquet `OpusHead` décodé. `output_gain` reste en Q7.8 brut."""
    version: int
    channel_count: int
    pre_skip: int
    input_sample_rate: int
    output_gain: int
    channel_mapping_family: int
    channel_mapping_table: Optional[ChannelMappingTable] = None

    def __post_init__(self) -> None:
        has_table = self.channel_mapping_table is not None
        if has_table != (self.channel_mapping_family != 0):
            raise ValueError("channel_mapping_table must be present iff channel_mapping_family != 0")
        if has_table and len(self.channel_mapping_table.channel_mapping) != self.channel_count:
            raise ValueError("channel_mapping must hold exactly channel_count entries")

    @property
    def output_gain_db(self) -> float:
        return self.output_gain / 256.0

    def to_dict(self) -> Dict[str, Any]:
        table = self.channel_mapping_table
        return {
            "version": int(self.version),
            "channel_count": int(self.channel_count),
            "pre_skip": int(self.pre_skip),
            "input_sample_rate": int(self.input_sample_rate),
            "output_gain": int(self.output_gain),
            "channel_mapping_family": int(self.channel_mapping_family),
            "channel_mapping_table": table.to_dict() if table is not None else None,
        }


@dataclass(frozen=True, slots=True)
class CommentHeader:
    """
    Paquet `OpusTags` décodé.

    `user_comments` garde l'ordre du flux ; un même tag peut apparaître
    plusieurs fois (ex: plusieurs ARTIST).
    """
    vendor_string: str
    user_comments: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def get_all(self, tag: str) -> List[str]:
        # noms de champs Vorbis comment : insensibles à la casse
        key = tag.casefold()
        return [v for t, v in self.user_comments if t.casefold() == key]

    def get(self, tag: str, default: Optional[str] = None) -> Optional[str]:
        values = self.get_all(tag)
        return values[0] if values else default

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendor_string": self.vendor_string,
            "user_comments": [[t, v] for t, v in self.user_comments],
        }


@dataclass(frozen=True, slots=True)
class OpusHeaders:
    """Les deux paquets d'en-tête d'un flux Ogg Opus."""
    identification: IdentificationHeader
    comments: CommentHeader

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identification": self.identification.to_dict(),
            "comments": self.comments.to_dict(),
        }
