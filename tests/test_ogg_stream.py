from __future__ import annotations
import io

import pytest

from opushdr import DecodeFailure, ErrorKind, OpusHeaders, decode_headers
from opushdr.bitstream import (
    PrimitiveReader,
    iter_packets,
    read_headers,
    read_headers_from_path,
    read_page,
)
from opushdr.errors import BadMagic, Truncated, UnsupportedVersion

from builders import lacing, ogg_page, ogg_stream, opushead, opustags

HEAD = opushead(channels=2, pre_skip=312, rate=48000)
TAGS = opustags("libopus 1.4", ["TITLE=tag_title", "ARTIST=artist_tag"])
AUDIO = [b"\xfc\xff\xfe", b"\xfc\xff\xfe"]


def test_read_page_fields():
    page_bytes = ogg_page([5], b"hello", serial=7, seq=3, htype=0x02, granule=-1)
    page = read_page(PrimitiveReader(page_bytes))
    assert page.serial == 7 and page.sequence == 3
    assert page.bos and not page.continued and not page.eos
    assert page.granule_position == -1
    assert page.payload == b"hello"


def test_read_page_clean_eof_and_bad_capture():
    assert read_page(PrimitiveReader(b"")) is None
    with pytest.raises(BadMagic):
        read_page(PrimitiveReader(ogg_page([1], b"x", capture=b"OggX")))
    with pytest.raises(Truncated):
        read_page(PrimitiveReader(ogg_page([4], b"abcd")[:-2]))


def test_headers_from_stream():
    h = read_headers(io.BytesIO(ogg_stream([HEAD, TAGS] + AUDIO)))
    assert isinstance(h, OpusHeaders)
    assert h.identification.channel_count == 2
    assert h.identification.pre_skip == 312
    assert h.comments.vendor_string == "libopus 1.4"
    assert h.comments.get("ARTIST") == "artist_tag"


def test_stops_reading_after_comment_packet():
    head_and_tags = ogg_stream([HEAD, TAGS])
    src = io.BytesIO(ogg_stream([HEAD, TAGS] + AUDIO))
    read_headers(src)
    assert src.tell() == len(head_and_tags)


def test_large_comment_spans_several_pages():
    lyrics = "la" * 105_000
    tags = opustags("v", ["TITLE=t", "LYRICS=" + lyrics])
    stream = ogg_stream([HEAD, tags] + AUDIO)
    h = read_headers(stream)
    assert len(h.comments.get("LYRICS")) == 210_000
    assert h.comments.user_comments[0] == ("TITLE", "t")


def test_packet_length_multiple_of_255():
    pkt = b"\x00" * 510
    assert lacing(len(pkt)) == [255, 255, 0]
    assert list(iter_packets(ogg_stream([pkt, b"z"]))) == [pkt, b"z"]


def test_other_logical_streams_are_ignored():
    stream = (
        ogg_page(lacing(len(HEAD)), HEAD, serial=1, seq=0, htype=0x02)
        + ogg_page([3], b"xyz", serial=2, seq=0, htype=0x02)
        + ogg_page(lacing(len(TAGS)), TAGS, serial=1, seq=1)
    )
    h = read_headers(stream)
    assert h.comments.get("TITLE") == "tag_title"


def test_trailing_bytes_inside_tags_packet_are_tolerated():
    h = read_headers(ogg_stream([HEAD, TAGS + b"\x01\x00\x00padding"]))
    assert len(h.comments.user_comments) == 2


def test_stream_with_only_head_is_truncated():
    with pytest.raises(Truncated):
        read_headers(ogg_stream([HEAD]))
    with pytest.raises(Truncated):
        read_headers(b"")


def test_missing_capture_pattern():
    data = bytearray(ogg_stream([HEAD, TAGS]))
    data[0:4] = b"Oggs"
    res = decode_headers(bytes(data))
    assert isinstance(res, DecodeFailure)
    assert res.kind is ErrorKind.BAD_MAGIC


def test_packet_errors_propagate_through_stream():
    res = decode_headers(ogg_stream([opushead(version=3), TAGS]))
    assert isinstance(res, DecodeFailure)
    assert res.kind is ErrorKind.UNSUPPORTED_VERSION


def test_wrong_packet_order_is_bad_magic():
    res = decode_headers(ogg_stream([TAGS, HEAD]))
    assert res.kind is ErrorKind.BAD_MAGIC


def test_read_from_path(tmp_path):
    p = tmp_path / "silence.opus"
    p.write_bytes(ogg_stream([HEAD, TAGS] + AUDIO))
    h = read_headers_from_path(p)
    assert h.identification.input_sample_rate == 48000
    assert h.to_dict()["comments"]["vendor_string"] == "libopus 1.4"


def test_leading_partial_packet_is_dropped():
    # le flux commence au milieu d'un paquet : seule sa fin est présente
    stream = (
        ogg_page([10], b"\x00" * 10, serial=1, seq=5, htype=0x01)
        + ogg_page(lacing(len(TAGS)), TAGS, serial=1, seq=6)
    )
    assert list(iter_packets(stream)) == [TAGS]


def test_unterminated_leading_packet_does_not_swallow_head():
    stream = (
        ogg_page([255], b"\x00" * 255, serial=1, seq=0, htype=0x01)
        + ogg_page(lacing(len(HEAD)), HEAD, serial=1, seq=1)
        + ogg_page(lacing(len(TAGS)), TAGS, serial=1, seq=2)
    )
    assert list(iter_packets(stream)) == [HEAD, TAGS]
    h = read_headers(stream)
    assert h.identification.channel_count == 2
    assert h.comments.vendor_string == "libopus 1.4"


def test_packet_iterator_closed_when_head_is_invalid(monkeypatch):
    import opushdr.bitstream.stream as stream_mod

    closed = []

    def tracked(source, cfg=None):
        try:
            yield from iter_packets(source, cfg)
        finally:
            closed.append(True)

    monkeypatch.setattr(stream_mod, "iter_packets", tracked)
    with pytest.raises(UnsupportedVersion):
        read_headers(ogg_stream([opushead(version=9), TAGS] + AUDIO))
    assert closed == [True]
