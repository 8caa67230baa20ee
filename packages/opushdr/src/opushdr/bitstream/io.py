from __future__ import annotations
from pathlib import Path
from typing import Optional

from ..config import DecoderConfig
from .records import OpusHeaders
from .stream import read_headers


def read_headers_from_path(path: str | Path, cfg: Optional[DecoderConfig] = None) -> OpusHeaders:
    """Open `path` and decode its two header packets; stops reading after OpusTags."""
    with Path(path).open("rb") as f:
        return read_headers(f, cfg)
