# packages/opushdr/src/opushdr/codec.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar, Union

from .config import DecoderConfig
from .errors import ErrorKind, HeaderError
from .bitstream import (
    CommentHeader,
    IdentificationHeader,
    OpusHeaders,
    PrimitiveReader,
    read_comment_header,
    read_headers,
    read_identification_header,
)

__all__ = [
    "DecodeFailure",
    "decode_identification_header",
    "decode_comment_header",
    "decode_headers",
]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    """
    Résultat d'échec des points d'entrée `decode_*`.

    Champs
    ------
    kind : ErrorKind
        Catégorie (IO_FAILURE, TRUNCATED, BAD_MAGIC, ...).
    message : str
        Description lisible, préfixée par le champ fautif.
    cause : BaseException | None
        Exception d'origine (l'OSError de la source pour IO_FAILURE,
        l'UnicodeDecodeError pour INVALID_ENCODING, sinon l'erreur elle-même).
    """
    kind: ErrorKind
    message: str
    cause: Optional[BaseException] = None

    def __bool__(self) -> bool:
        return False

    @staticmethod
    def from_error(err: HeaderError) -> "DecodeFailure":
        return DecodeFailure(kind=err.kind, message=str(err), cause=err.__cause__ or err)


def _guarded(fn: Callable[[], T]) -> Union[T, DecodeFailure]:
    # frontière : aucune HeaderError ne sort des points d'entrée
    try:
        return fn()
    except HeaderError as e:
        return DecodeFailure.from_error(e)


def decode_identification_header(
    source: Any, cfg: Optional[DecoderConfig] = None
) -> Union[IdentificationHeader, DecodeFailure]:
    """
    Décode un paquet `OpusHead` brut.

    Paramètres
    ----------
    source : ByteSource | bytes | objet avec `read`
        Positionné au premier octet du paquet.
    cfg : DecoderConfig | None

    Retour
    ------
    IdentificationHeader, ou DecodeFailure (jamais d'en-tête partiel).
    """
    return _guarded(lambda: read_identification_header(PrimitiveReader(source, cfg)))


def decode_comment_header(
    source: Any, cfg: Optional[DecoderConfig] = None
) -> Union[CommentHeader, DecodeFailure]:
    """Décode un paquet `OpusTags` brut → CommentHeader | DecodeFailure."""
    return _guarded(lambda: read_comment_header(PrimitiveReader(source, cfg), cfg))


def decode_headers(
    source: Any, cfg: Optional[DecoderConfig] = None
) -> Union[OpusHeaders, DecodeFailure]:
    """Flux Ogg Opus complet → OpusHeaders | DecodeFailure."""
    return _guarded(lambda: read_headers(source, cfg))
