from __future__ import annotations
import io
import struct

import pytest

from opushdr import CommentHeader, DecoderConfig, PrimitiveReader
from opushdr.bitstream import read_comment_header, split_comment
from opushdr.errors import BadMagic, InvalidEncoding, InvalidField, Truncated

from builders import lp, opustags


def _decode(data: bytes, cfg: DecoderConfig | None = None) -> CommentHeader:
    return read_comment_header(PrimitiveReader(data, cfg), cfg)


def test_vendor_and_ordered_comments():
    h = _decode(opustags("test vendor", ["TITLE=Song", "ARTIST=Band"]))
    assert h.vendor_string == "test vendor"
    assert h.user_comments == (("TITLE", "Song"), ("ARTIST", "Band"))


def test_comment_without_equals_is_lenient_by_default():
    h = _decode(opustags(comments=["NOEQUALSSIGN", "TITLE=x"]))
    assert h.user_comments == (("NOEQUALSSIGN", ""), ("TITLE", "x"))


def test_comment_without_equals_strict_rejects():
    with pytest.raises(InvalidField):
        _decode(opustags(comments=["TITLE=x", "NOEQUALSSIGN"]), DecoderConfig(strict_comments=True))


@pytest.mark.parametrize("raw,expected", [
    ("KEY=a=b=c", ("KEY", "a=b=c")),
    ("EMPTY=", ("EMPTY", "")),
    ("=value", ("", "value")),
    ("lower=Case", ("lower", "Case")),
    ("TITLE=Été ☃", ("TITLE", "Été ☃")),
])
def test_split_on_first_equals(raw, expected):
    assert split_comment(raw) == expected
    assert _decode(opustags(comments=[raw])).user_comments == (expected,)


def test_no_comments():
    h = _decode(opustags("libopus 1.4", []))
    assert h.vendor_string == "libopus 1.4"
    assert h.user_comments == ()


def test_duplicate_tags_and_case_insensitive_lookup():
    h = _decode(opustags(comments=["ARTIST=A", "artist=B", "TITLE=T"]))
    assert h.get_all("Artist") == ["A", "B"]
    assert h.get("title") == "T"
    assert h.get("ALBUM") is None
    assert h.get("ALBUM", "?") == "?"


def test_trailing_bytes_are_not_consumed():
    data = opustags(comments=["A=1"])
    src = io.BytesIO(data + b"\x01padding")
    h = read_comment_header(PrimitiveReader(src))
    assert h.user_comments == (("A", "1"),)
    assert src.tell() == len(data)


def test_bad_magic():
    with pytest.raises(BadMagic):
        _decode(opustags(magic=b"OpusHead"))


def test_invalid_utf8_vendor():
    with pytest.raises(InvalidEncoding):
        _decode(opustags(vendor=b"\xff\xfe"))


def test_invalid_utf8_comment():
    with pytest.raises(InvalidEncoding):
        _decode(opustags(comments=[b"TITLE=\xc0\xaf"]))


def test_truncated_at_every_offset():
    data = opustags("v", ["TITLE=Song", "ARTIST=Band"])
    for cut in range(len(data)):
        with pytest.raises(Truncated):
            _decode(data[:cut])


def test_comment_count_larger_than_available():
    data = b"OpusTags" + lp("v") + struct.pack("<I", 3) + lp("A=1")
    with pytest.raises(Truncated):
        _decode(data)


def test_max_string_length_applies_to_comments():
    cfg = DecoderConfig(max_string_length=4)
    assert _decode(opustags("v", ["A=1"]), cfg).user_comments == (("A", "1"),)
    with pytest.raises(InvalidField):
        _decode(opustags("v", ["TITLE=too long"]), cfg)


def test_idempotent_and_immutable():
    data = opustags(comments=["TITLE=Song", "ARTIST=Band"])
    a, b = _decode(data), _decode(data)
    assert a == b
    with pytest.raises(AttributeError):
        a.vendor_string = "x"  # type: ignore[misc]


def test_to_dict():
    h = _decode(opustags("v", ["TITLE=Song"]))
    assert h.to_dict() == {"vendor_string": "v", "user_comments": [["TITLE", "Song"]]}
