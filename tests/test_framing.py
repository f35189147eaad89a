"""Tests for incremental line decoding and frame parsing."""

import pytest

from linkedool.ai.framing import LineDecoder, parse_ndjson_frame, parse_sse_frame


def test_line_decoder_holds_partial_lines_until_newline():
    decoder = LineDecoder()

    assert decoder.feed(b'{"response":"ab') == []
    assert decoder.feed(b'c"}\n{"resp') == ['{"response":"abc"}']
    assert decoder.feed(b'onse":"d"}\n') == ['{"response":"d"}']
    assert decoder.flush() == []


def test_line_decoder_keeps_multibyte_character_split_across_chunks():
    encoded = "café ☃\n".encode("utf-8")
    # Split inside the 3-byte snowman.
    cut = encoded.index("☃".encode("utf-8")) + 1
    decoder = LineDecoder()

    assert decoder.feed(encoded[:cut]) == []
    assert decoder.feed(encoded[cut:]) == ["café ☃"]


def test_line_decoder_strips_carriage_returns_and_flushes_tail():
    decoder = LineDecoder()

    assert decoder.feed(b"data: one\r\ndata: two") == ["data: one"]
    assert decoder.flush() == ["data: two"]
    assert decoder.flush() == []


def test_parse_ndjson_frame_returns_response_text():
    assert parse_ndjson_frame('{"model":"llama3","response":"Hi","done":false}') == "Hi"


@pytest.mark.parametrize(
    "line",
    [
        "",
        "   ",
        '{"done":true}',
        '{"response":""}',
        '{"response":42}',
        "[1, 2]",
    ],
)
def test_parse_ndjson_frame_without_token(line):
    assert parse_ndjson_frame(line) is None


def test_parse_ndjson_frame_raises_on_malformed_json():
    with pytest.raises(ValueError):
        parse_ndjson_frame('{"response": "unterminated')


def test_parse_sse_frame_extracts_delta_content():
    line = 'data: {"choices":[{"delta":{"content":"Hello"}}]}'
    assert parse_sse_frame(line) == "Hello"


@pytest.mark.parametrize(
    "line",
    [
        "data: [DONE]",
        ": keep-alive comment",
        "event: message",
        "",
        'data: {"choices":[{"delta":{"role":"assistant"}}]}',
        'data: {"choices":[]}',
        'data: {"choices":[{"delta":{"content":""}}]}',
        'data: {"id":"x"}',
    ],
)
def test_parse_sse_frame_without_token(line):
    assert parse_sse_frame(line) is None


def test_parse_sse_frame_requires_exact_prefix():
    assert parse_sse_frame('data:{"choices":[{"delta":{"content":"x"}}]}') is None


def test_parse_sse_frame_raises_on_malformed_json():
    with pytest.raises(ValueError):
        parse_sse_frame("data: {not json")
