# packages/opushdr/src/opushdr/bitstream/source.py
from __future__ import annotations

import io
from typing import Any, Protocol, runtime_checkable

__all__ = ["ByteSource", "as_source"]


@runtime_checkable
class ByteSource(Protocol):
    """
    Source séquentielle d'octets : une seule capacité, `readinto`.

    - retourne le nombre d'octets écrits dans `buffer` (0 = fin de flux),
    - lève `OSError` en cas d'échec I/O.

    Les fichiers binaires, `io.BytesIO` et `socket.makefile("rb")` la
    respectent déjà. Aucun seek n'est jamais demandé.
    """

    def readinto(self, buffer: Any, /) -> int | None: ...


class _ReadAdapter:
    """Adapte un objet qui n'expose que `read(n)`."""

    def __init__(self, raw: Any) -> None:
        self._raw = raw

    def readinto(self, buffer: Any) -> int:
        view = memoryview(buffer).cast("B")
        chunk = self._raw.read(len(view))
        if not chunk:
            return 0
        n = len(chunk)
        view[:n] = chunk
        return n


def as_source(obj: Any) -> ByteSource:
    """
    Normalise `obj` en ByteSource.

    bytes / bytearray / memoryview → `io.BytesIO` (copie indépendante),
    objet avec `readinto`          → tel quel,
    objet avec `read`              → adaptateur.
    """
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(obj))
    if hasattr(obj, "readinto"):
        return obj
    if hasattr(obj, "read"):
        return _ReadAdapter(obj)
    raise TypeError(f"as_source: unsupported source type {type(obj).__name__}")
