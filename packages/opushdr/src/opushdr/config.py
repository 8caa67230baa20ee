# packages/opushdr/src/opushdr/config.py
from __future__ import annotations
from dataclasses import dataclass
import os

__all__ = ["DecoderConfig", "DEFAULT_CONFIG"]

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class DecoderConfig:
    """
    Configuration **publique et stable** des décodeurs d'en-têtes Opus.

    Cette config est consommée par `opushdr.codec.decode_*` et par les lecteurs
    bas-niveau de `opushdr.bitstream`. Elle ne change jamais la disposition des
    octets lus : seulement la politique face aux champs douteux.

    Champs
    ------
    strict_comments : bool, default=False
        Politique pour un commentaire sans `=`.
        False → accepté comme `(chaîne entière, "")` (extraction complète).
        True  → `InvalidField`, le décodage de l'en-tête échoue.
    max_string_length : int | None, default=None
        Borne optionnelle sur la longueur déclarée d'une chaîne préfixée
        (vendor, commentaires). Au-delà → `InvalidField` avant toute lecture.
    read_chunk : int, default=65536
        Taille des blocs utilisés pour remplir les longues séquences d'octets.
        Une longueur déclarée énorme sur un flux court échoue en `Truncated`
        sans allocation préalable de toute la taille annoncée.

    ENV keys (cf. `from_env`)
    -------------------------
    OPUSHDR_STRICT_COMMENTS   → strict_comments ("1", "true", "yes", "on")
    OPUSHDR_MAX_STRING_LENGTH → max_string_length
    OPUSHDR_READ_CHUNK        → read_chunk

    Notes
    -----
    - La dataclass est **immuable** (`frozen=True`) : une même config peut être
      partagée entre threads et décodages concurrents.
    - Les validations lèvent une `ValueError` si les bornes sont violées.
    """

    strict_comments: bool = False
    max_string_length: int | None = None
    read_chunk: int = 65536

    def __post_init__(self) -> None:
        if self.max_string_length is not None and int(self.max_string_length) < 0:
            raise ValueError("DecoderConfig.max_string_length must be >= 0 (or None)")
        if int(self.read_chunk) <= 0:
            raise ValueError("DecoderConfig.read_chunk must be > 0")

    @staticmethod
    def from_env() -> "DecoderConfig":
        limit = os.getenv("OPUSHDR_MAX_STRING_LENGTH")
        chunk = os.getenv("OPUSHDR_READ_CHUNK")
        return DecoderConfig(
            strict_comments=os.getenv("OPUSHDR_STRICT_COMMENTS", "").strip().lower() in _TRUE,
            max_string_length=int(limit) if limit else None,
            read_chunk=int(chunk) if chunk else 65536,
        )


DEFAULT_CONFIG = DecoderConfig()
