# packages/opushdr/src/opushdr/bitstream/comments.py
from __future__ import annotations
import logging
from typing import List, Optional, Tuple

from ..config import DecoderConfig
from ..errors import InvalidField
from .reader import PrimitiveReader
from .records import CommentHeader

__all__ = ["MAGIC", "read_comment_header", "split_comment"]

log = logging.getLogger(__name__)

MAGIC = b"OpusTags"


def split_comment(comment: str, strict: bool = False) -> Tuple[str, str]:
    """
    Sépare `TAG=VALUE` sur le **premier** `=`.

    Sans `=` : `(comment, "")` en mode lenient, `InvalidField` en mode strict.
    Le tag garde sa casse, la valeur peut être vide ou contenir d'autres `=`.
    """
    tag, sep, value = comment.partition("=")
    if not sep:
        if strict:
            raise InvalidField(f"OpusTags: comment without '=': {comment[:64]!r}")
        log.debug("OpusTags: comment without '=' kept as tag-only: %r", comment[:64])
    return tag, value


def read_comment_header(reader: PrimitiveReader, cfg: Optional[DecoderConfig] = None) -> CommentHeader:
    """
    Décode un paquet `OpusTags` (RFC 7845 §5.2) depuis la position courante.

    Les octets éventuels après le dernier commentaire ne sont pas lus : la
    taille du paquet est l'affaire de la couche Ogg, pas de ce décodeur.

    Exceptions
    ----------
    BadMagic, Truncated, InvalidEncoding, InvalidField (strict / limite), IoFailure.
    """
    cfg = cfg or reader.config
    reader.read_magic(MAGIC, "OpusTags magic")
    vendor = reader.read_length_prefixed_utf8("vendor_string")
    count = reader.read_u32_le("comment_count")

    comments: List[Tuple[str, str]] = []
    for i in range(count):
        text = reader.read_length_prefixed_utf8(f"comment[{i}]")
        comments.append(split_comment(text, strict=cfg.strict_comments))

    log.debug("OpusTags: vendor=%r, %d comments", vendor, len(comments))
    return CommentHeader(vendor_string=vendor, user_comments=tuple(comments))
