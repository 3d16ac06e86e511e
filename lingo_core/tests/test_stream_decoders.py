import json

import pytest

from lingo_core.domain.exceptions import ParseError
from lingo_core.streaming import EventStreamDecoder, GrowingArrayDecoder


def test_event_stream_frames_across_chunks():
    dec = EventStreamDecoder()
    assert dec.feed(b'data: {"a":') == []
    assert dec.feed(b' 1}\n') == []
    assert dec.feed(b"\n") == ['{"a": 1}']
    assert dec.feed(b"data: [DONE]\n\n") == ["[DONE]"]


def test_event_stream_multiple_frames_in_one_chunk_keep_order():
    dec = EventStreamDecoder()
    frames = dec.feed(b"data: one\n\ndata: two\n\ndata: three\n\n")
    assert frames == ["one", "two", "three"]


def test_event_stream_crlf_and_cr_line_endings():
    dec = EventStreamDecoder()
    assert dec.feed(b"data: a\r\n\r\n") == ["a"]
    assert dec.feed(b"data: b\r\rdata: c\n\n") == ["b", "c"]


def test_event_stream_crlf_split_between_chunks():
    dec = EventStreamDecoder()
    assert dec.feed(b"data: x\r") == []
    assert dec.feed(b"\n\r\n") == ["x"]


def test_event_stream_multiline_data_comments_and_other_fields():
    dec = EventStreamDecoder()
    frames = dec.feed(b": keep-alive\nevent: message\nid: 7\ndata: first\ndata:second\n\n")
    assert frames == ["first\nsecond"]


def test_event_stream_split_multibyte_character():
    payload = "data: 你好\n\n".encode("utf-8")
    # 把“你”的三个字节拆到两个 chunk 中
    cut = payload.index("你".encode("utf-8")) + 1
    dec = EventStreamDecoder()
    assert dec.feed(payload[:cut]) == []
    assert dec.feed(payload[cut:]) == ["你好"]


def test_event_stream_bom_and_close_discards_incomplete_event():
    dec = EventStreamDecoder()
    assert dec.feed("\ufeffdata: a\n\ndata: b".encode("utf-8")) == ["a"]
    assert dec.close() == []
    assert dec.finished


def test_growing_array_three_chunks():
    dec = GrowingArrayDecoder()
    first = {"candidates": [{"content": {"parts": [{"text": "Hel"}]}}]}
    second = {"candidates": [{"content": {"parts": [{"text": "lo"}]}}]}

    assert dec.feed(b"[") == []
    assert not dec.finished
    assert dec.feed(json.dumps(first).encode()) == [first]
    assert dec.feed(("," + json.dumps(second) + "]").encode()) == [second]
    assert dec.finished


def test_growing_array_waits_for_incomplete_element():
    dec = GrowingArrayDecoder()
    assert dec.feed(b'[{"text": "ab') == []
    assert dec.feed(b'c"}') == [{"text": "abc"}]
    assert dec.feed(b"\n]") == []
    assert dec.finished


def test_growing_array_whole_body_in_one_chunk():
    dec = GrowingArrayDecoder()
    assert dec.feed(b'[{"a": 1}, {"a": 2}]') == [{"a": 1}, {"a": 2}]
    assert dec.finished
    assert dec.close() == []


def test_growing_array_split_multibyte_character():
    data = '[{"text": "中"}]'.encode("utf-8")
    cut = data.index("中".encode("utf-8")) + 2
    dec = GrowingArrayDecoder()
    assert dec.feed(data[:cut]) == []
    assert dec.feed(data[cut:]) == [{"text": "中"}]


def test_growing_array_non_array_text_returned_verbatim():
    dec = GrowingArrayDecoder()
    assert dec.feed(b"not json") == ["not json"]


def test_growing_array_closed_but_invalid_fragment_raises():
    dec = GrowingArrayDecoder()
    with pytest.raises(ParseError):
        dec.feed(b'[{"a": }]')


def test_growing_array_close_with_leftover_raises():
    dec = GrowingArrayDecoder()
    dec.feed(b'[{"a": 1')
    with pytest.raises(ParseError):
        dec.close()
