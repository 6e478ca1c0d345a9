"""Tests for the streaming Ollama generate client."""

import io
import json
from typing import Generator, Iterator, List
from unittest.mock import MagicMock, patch

import pytest
import requests

from _engine.errors import GenerationError
from _engine.ollama.stream import generate, parse_line


def _record(text: str, done: bool = False) -> bytes:
    return (json.dumps({"model": "llama3", "response": text, "done": done}, ensure_ascii=False) + "\n").encode("utf-8")


def _response(status_code: int = 200, reads: List[bytes] = ()) -> requests.Response:
    """A real Response whose body arrives as the given raw reads."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    response.raw = io.BytesIO(b"")
    body = list(reads)

    def iter_content(chunk_size: int = 1, decode_unicode: bool = False) -> Iterator[bytes]:
        return iter(body)

    response.iter_content = iter_content
    return response


@pytest.fixture
def mock_post() -> Generator[MagicMock, None, None]:
    with patch("_engine.ollama.stream.requests.post") as post:
        yield post


def _collect(reads: List[bytes], mock_post: MagicMock) -> List[str]:
    mock_post.return_value = _response(reads=reads)
    updates: List[str] = []
    generate("p", "llama3", updates.append)
    return updates


def test_record_split_across_reads(mock_post: MagicMock) -> None:
    updates = _collect([b'{"response": "Hel', b'lo"}', b"\n"], mock_post)

    assert updates == ["Hello"]


def test_several_records_in_one_read(mock_post: MagicMock) -> None:
    reads = [b'{"response": "a"}\n\n{"response": "b"}\n{"respo', b'nse": "c"}\n']

    assert _collect(reads, mock_post) == ["a", "ab", "abc"]


def test_unterminated_final_record(mock_post: MagicMock) -> None:
    reads = [_record("head"), b'{"response": " tail", "done": true}']

    assert _collect(reads, mock_post) == ["head", "head tail"]


def test_multibyte_character_split_between_reads(mock_post: MagicMock) -> None:
    data = _record("héllo")
    split = data.index("é".encode("utf-8")) + 1

    assert _collect([data[:split], data[split:]], mock_post) == ["héllo"]


def test_malformed_record(mock_post: MagicMock) -> None:
    mock_post.return_value = _response(reads=[b'{"response": oops}\n'])

    with pytest.raises(GenerationError, match="Malformed JSON"):
        generate("p", "m", lambda text: None)


def test_parse_line_rejects_non_object() -> None:
    with pytest.raises(GenerationError):
        parse_line(b"[1, 2]")


def test_generate_streams_accumulated_text(mock_post: MagicMock) -> None:
    body = _record("Add ") + _record("login") + _record(" page") + _record("", done=True)
    # Re-slice into reads that ignore record boundaries
    reads = [body[i : i + 7] for i in range(0, len(body), 7)]
    mock_post.return_value = _response(reads=reads)
    updates: List[str] = []

    result = generate("prompt text", "llama3", updates.append)

    assert result == "Add login page"
    assert updates == ["Add ", "Add login", "Add login page", "Add login page"]
    assert all(len(a) <= len(b) for a, b in zip(updates, updates[1:]))


def test_generate_request_shape(mock_post: MagicMock) -> None:
    mock_post.return_value = _response(reads=[_record("ok", done=True)])

    generate("the prompt", "codellama", lambda text: None)

    args, kwargs = mock_post.call_args
    assert args[0] == "http://localhost:11434/api/generate"
    assert kwargs["json"] == {"model": "codellama", "prompt": "the prompt"}
    assert kwargs["stream"] is True
    assert kwargs["timeout"] == (30, 60)


def test_generate_stops_after_done_record(mock_post: MagicMock) -> None:
    mock_post.return_value = _response(reads=[_record("final", done=True), _record(" ignored")])
    updates: List[str] = []

    assert generate("p", "m", updates.append) == "final"
    assert updates == ["final"]


def test_generate_non_2xx_status(mock_post: MagicMock) -> None:
    mock_post.return_value = _response(status_code=404, reads=[b'{"error": "model not found"}'])
    updates: List[str] = []

    with pytest.raises(GenerationError) as excinfo:
        generate("p", "missing-model", updates.append)

    assert excinfo.value.status_code == 404
    assert updates == []


def test_generate_connection_error(mock_post: MagicMock) -> None:
    mock_post.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(GenerationError, match="Network or API request failed"):
        generate("p", "m", lambda text: None)


def test_generate_error_record(mock_post: MagicMock) -> None:
    reads = [_record("partial"), b'{"error": "model ran out of memory"}\n']
    mock_post.return_value = _response(reads=reads)
    updates: List[str] = []

    with pytest.raises(GenerationError, match="out of memory"):
        generate("p", "m", updates.append)

    assert updates == ["partial"]
