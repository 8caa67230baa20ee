# packages/opushdr/src/opushdr/bitstream/identification.py
from __future__ import annotations
import logging

import numpy as np

from ..errors import InvalidField, UnsupportedVersion
from .reader import PrimitiveReader
from .records import SILENT_CHANNEL, ChannelMappingTable, IdentificationHeader

__all__ = ["MAGIC", "VERSION", "FIXED_SIZE", "read_identification_header"]

log = logging.getLogger(__name__)

MAGIC = b"OpusHead"
VERSION = 1

# magic(8) version(1) channels(1) pre_skip(2) rate(4) gain(2) family(1)
FIXED_SIZE = 19


def read_identification_header(reader: PrimitiveReader) -> IdentificationHeader:
    """
    Décode un paquet `OpusHead` (RFC 7845 §5.1) depuis la position courante.

    Ordre des contrôles (le premier échec interrompt) :
      magic → version == 1 → channel_count >= 1 → champs fixes → famille.
    Famille 0 : aucune table, exactement FIXED_SIZE octets consommés.
    Sinon : stream_count >= 1, coupled_count <= stream_count, puis
    `channel_count` entrées < stream_count + coupled_count (ou 255).

    Exceptions
    ----------
    BadMagic, UnsupportedVersion, InvalidField, Truncated, IoFailure.
    """
    reader.read_magic(MAGIC, "OpusHead magic")
    version = reader.read_u8("version")
    if version != VERSION:
        raise UnsupportedVersion(f"OpusHead: unsupported version {version} (expected {VERSION})")
    channel_count = reader.read_u8("channel_count")
    if channel_count == 0:
        raise InvalidField("OpusHead: channel_count must be >= 1")
    pre_skip = reader.read_u16_le("pre_skip")
    input_sample_rate = reader.read_u32_le("input_sample_rate")
    output_gain = reader.read_i16_le("output_gain")
    family = reader.read_u8("channel_mapping_family")

    table = None
    if family != 0:
        table = _read_mapping_table(reader, channel_count)

    log.debug("OpusHead: v%d, %d ch, pre_skip=%d, rate=%d, gain=%d, family=%d",
              version, channel_count, pre_skip, input_sample_rate, output_gain, family)
    return IdentificationHeader(
        version=version,
        channel_count=channel_count,
        pre_skip=pre_skip,
        input_sample_rate=input_sample_rate,
        output_gain=output_gain,
        channel_mapping_family=family,
        channel_mapping_table=table,
    )


def _read_mapping_table(reader: PrimitiveReader, channel_count: int) -> ChannelMappingTable:
    stream_count = reader.read_u8("stream_count")
    if stream_count == 0:
        raise InvalidField("OpusHead: stream_count must be >= 1")
    coupled_count = reader.read_u8("coupled_count")
    if coupled_count > stream_count:
        raise InvalidField(f"OpusHead: coupled_count {coupled_count} > stream_count {stream_count}")

    raw = reader.read_exact_bytes(channel_count, "channel_mapping")
    mapping = np.frombuffer(raw, dtype=np.uint8).astype(np.uint16)
    limit = stream_count + coupled_count
    bad = np.flatnonzero((mapping >= limit) & (mapping != SILENT_CHANNEL))
    if bad.size:
        i = int(bad[0])
        raise InvalidField(
            f"OpusHead: channel_mapping[{i}]={int(mapping[i])} out of range "
            f"(stream_count+coupled_count={limit})"
        )
    return ChannelMappingTable(
        stream_count=stream_count,
        coupled_count=coupled_count,
        channel_mapping=tuple(int(x) for x in mapping),
    )
