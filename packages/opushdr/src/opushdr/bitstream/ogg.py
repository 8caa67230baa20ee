# packages/opushdr/src/opushdr/bitstream/ogg.py
# -----------------------------------------------------------------------------
# Extraction minimale des paquets d'un flux Ogg (RFC 3533), juste assez pour
# atteindre les deux paquets d'en-tête Opus. Le CRC des pages est conservé
# mais jamais vérifié, le séquencement n'est pas contrôlé.

from __future__ import annotations
import logging
import struct
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple

from ..config import DecoderConfig
from ..errors import BadMagic, Truncated
from .reader import PrimitiveReader

__all__ = ["CAPTURE_PATTERN", "OggPage", "read_page", "iter_packets"]

log = logging.getLogger(__name__)

CAPTURE_PATTERN = b"OggS"

# capture(4) version(1) header_type(1) granule(8) serial(4) seqno(4) crc(4) nseg(1)
PAGE_HEAD_FMT = "<4sBBqIIIB"
_PAGE_HEAD = struct.Struct(PAGE_HEAD_FMT)  # = 27 bytes

FLAG_CONTINUED = 0x01
FLAG_BOS = 0x02
FLAG_EOS = 0x04


@dataclass(frozen=True, slots=True)
class OggPage:
    version: int
    header_type: int
    granule_position: int
    serial: int
    sequence: int
    crc: int
    segment_table: Tuple[int, ...]
    payload: bytes

    @property
    def continued(self) -> bool:
        return bool(self.header_type & FLAG_CONTINUED)

    @property
    def bos(self) -> bool:
        return bool(self.header_type & FLAG_BOS)

    @property
    def eos(self) -> bool:
        return bool(self.header_type & FLAG_EOS)


def read_page(reader: PrimitiveReader) -> Optional[OggPage]:
    """
    Lit une page Ogg complète. Retourne None si le flux se termine
    proprement **avant** le premier octet de la page.
    """
    try:
        head = reader.read_exact_bytes(_PAGE_HEAD.size, "Ogg page header")
    except Truncated as e:
        if e.got == 0:
            return None
        raise
    capture, version, htype, granule, serial, seqno, crc, nseg = _PAGE_HEAD.unpack(head)
    if capture != CAPTURE_PATTERN:
        raise BadMagic(f"Ogg page: expected {CAPTURE_PATTERN!r}, got {capture!r}")
    table = reader.read_exact_bytes(nseg, "Ogg segment table")
    payload = reader.read_exact_bytes(sum(table), "Ogg page payload")
    return OggPage(version, htype, granule, serial, seqno, crc, tuple(table), payload)


def iter_packets(source: Any, cfg: Optional[DecoderConfig] = None) -> Iterator[bytes]:
    """
    Réassemble les paquets du flux logique de la **première** page.

    - lacing 255 → le paquet continue (segment suivant, éventuellement page suivante),
    - lacing < 255 → fin de paquet,
    - pages d'autres flux logiques (multiplexage) ignorées,
    - un paquet inachevé en fin de flux n'est pas émis.

    Les pages ne sont lues qu'à la demande : arrêter l'itération après deux
    paquets ne consomme pas la suite du fichier.
    """
    reader = source if isinstance(source, PrimitiveReader) else PrimitiveReader(source, cfg)
    serial: Optional[int] = None
    pending = bytearray()
    # vrai tant qu'on est dans la suite d'un paquet commencé avant le flux lu
    orphan = False
    while True:
        page = read_page(reader)
        if page is None:
            break
        if serial is None:
            serial = page.serial
            orphan = page.continued
        elif page.serial != serial:
            log.debug("Ogg: skipping page %d of logical stream %08x", page.sequence, page.serial)
            continue
        elif not page.continued:
            # une page non continuée commence toujours un paquet neuf
            if pending:
                log.debug("Ogg: dropping %d bytes of unterminated packet", len(pending))
                pending.clear()
            orphan = False

        off = 0
        for lace in page.segment_table:
            pending += page.payload[off:off + lace]
            off += lace
            if lace < 255:
                if orphan:
                    orphan = False
                else:
                    yield bytes(pending)
                pending.clear()
    if pending:
        log.debug("Ogg: stream ended inside a packet (%d bytes discarded)", len(pending))
