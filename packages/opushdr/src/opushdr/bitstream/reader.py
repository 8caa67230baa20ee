# packages/opushdr/src/opushdr/bitstream/reader.py
# -----------------------------------------------------------------------------
# Lecture typée little-endian au-dessus d'une ByteSource (RFC 7845 §5).
# Point unique de traduction : lecture courte → Truncated, OSError → IoFailure,
# UTF-8 invalide → InvalidEncoding.

from __future__ import annotations
import struct
from typing import Any, Optional

from ..config import DecoderConfig, DEFAULT_CONFIG
from ..errors import BadMagic, InvalidEncoding, InvalidField, IoFailure, Truncated
from .source import as_source

__all__ = ["PrimitiveReader"]

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_I16 = struct.Struct("<h")
_U32 = struct.Struct("<I")


class PrimitiveReader:
    """
    Lecteur séquentiel d'entiers/chaînes pour les en-têtes Opus.

    Paramètres
    ----------
    source : ByteSource | bytes | objet avec `read`
        Normalisé par `as_source`. Jamais fermé ni rembobiné par le lecteur.
    cfg : DecoderConfig | None
        Bornes de longueur et taille des blocs de lecture.

    Attributs
    ---------
    position : int
        Nombre d'octets consommés depuis la création du lecteur.

    Notes
    -----
    - Les lectures partielles de la source sont cumulées jusqu'à la largeur
      demandée ou la fin de flux ; une erreur I/O n'est **jamais** réessayée
      (un flux partiellement consommé perdrait son alignement).
    """

    def __init__(self, source: Any, cfg: Optional[DecoderConfig] = None) -> None:
        self._src = as_source(source)
        self._cfg = cfg or DEFAULT_CONFIG
        self.position = 0

    @property
    def config(self) -> DecoderConfig:
        return self._cfg

    # ----------------------------- bytes ----------------------------------

    def read_exact_bytes(self, n: int, what: str = "bytes") -> bytes:
        """Lit exactement `n` octets ou lève `Truncated`."""
        n = int(n)
        if n < 0:
            raise ValueError(f"{what}: negative length {n}")
        if n == 0:
            return b""
        out = bytearray()
        chunk = bytearray(min(n, self._cfg.read_chunk))
        view = memoryview(chunk)
        while len(out) < n:
            want = min(n - len(out), len(chunk))
            try:
                got = self._src.readinto(view[:want])
            except OSError as e:
                raise IoFailure(f"{what}: source I/O error: {e}") from e
            if got is None:
                raise IoFailure(f"{what}: source returned no data (non-blocking source?)")
            if got == 0:
                break
            out += view[:got]
            self.position += got
        if len(out) < n:
            raise Truncated(f"{what}: truncated (need {n} bytes, got {len(out)})",
                            expected=n, got=len(out))
        return bytes(out)

    def read_magic(self, expected: bytes, what: str = "magic") -> None:
        got = self.read_exact_bytes(len(expected), what)
        if got != expected:
            raise BadMagic(f"{what}: expected {expected!r}, got {got!r}")

    # ----------------------------- integers -------------------------------

    def read_u8(self, what: str = "u8") -> int:
        return _U8.unpack(self.read_exact_bytes(1, what))[0]

    def read_u16_le(self, what: str = "u16") -> int:
        return _U16.unpack(self.read_exact_bytes(2, what))[0]

    def read_i16_le(self, what: str = "i16") -> int:
        return _I16.unpack(self.read_exact_bytes(2, what))[0]

    def read_u32_le(self, what: str = "u32") -> int:
        return _U32.unpack(self.read_exact_bytes(4, what))[0]

    # ----------------------------- strings --------------------------------

    def read_length_prefixed_utf8(self, what: str = "string") -> str:
        """
        Lit `u32 LE longueur | octets` puis valide l'UTF-8.

        Exceptions
        ----------
        Truncated si la longueur ou les octets manquent,
        InvalidField si la longueur dépasse `cfg.max_string_length`,
        InvalidEncoding si les octets ne sont pas de l'UTF-8 valide.
        """
        n = self.read_u32_le(f"{what} length")
        limit = self._cfg.max_string_length
        if limit is not None and n > limit:
            raise InvalidField(f"{what}: declared length {n} exceeds limit {limit}")
        raw = self.read_exact_bytes(n, what)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidEncoding(f"{what}: invalid UTF-8 at byte {e.start}") from e
