# Standard Library Imports
import json
import logging
from typing import Any, Callable, Dict

# Third-Party Library Imports
import requests
from pydantic import ValidationError

# Build-in Functions And Class Import
from _data.ollama import BASE_URL, CONNECT_TIMEOUT, READ_TIMEOUT, STREAM_CHUNK_SIZE
from _engine.errors import GenerationError
from _types.model import GenerateChunk, GenerateRequest

logger = logging.getLogger(__name__)


def parse_line(line: bytes) -> GenerateChunk:
    """Decode one newline-delimited JSON record of the generate stream."""
    try:
        record: Dict[str, Any] = json.loads(line)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Malformed JSON record in response stream: {e}") from e
    if not isinstance(record, dict):
        raise GenerationError(f"Unexpected record in response stream: {line[:200]!r}")

    try:
        chunk = GenerateChunk.model_validate(record)
    except ValidationError as e:
        raise GenerationError(f"Unexpected record in response stream: {e}") from e
    if chunk.error:
        raise GenerationError(f"Ollama reported an error: {chunk.error}")
    return chunk


def generate(
    prompt: str,
    model: str,
    on_update: Callable[[str], None],
    base_url: str = BASE_URL,
    connect_timeout: float = CONNECT_TIMEOUT,
    read_timeout: float = READ_TIMEOUT,
    chunk_size: int = STREAM_CHUNK_SIZE,
) -> str:
    """
    Stream a completion from Ollama's generate endpoint.

    After every record the whole text accumulated so far (not just the
    delta) is passed to on_update.

    Args:
        prompt (str): The prompt to send.
        model (str): Name of the Ollama model to use.
        on_update (Callable[[str], None]): Receives the accumulated text.
        base_url (str): Ollama API base URL.
        connect_timeout (float): Seconds to wait for the connection.
        read_timeout (float): Seconds to wait for each read of the stream.
        chunk_size (int): Bytes requested per read.

    Returns:
        str: The complete generated text.

    Raises:
        GenerationError: On connection failures, non-2xx status, or a
                         malformed / error record in the stream. Not retried.
    """
    payload = GenerateRequest(model=model, prompt=prompt).model_dump()
    url = f"{base_url.rstrip('/')}/generate"
    logger.debug("POST %s (model=%s, prompt=%d chars)", url, model, len(prompt))

    accumulated = ""
    try:
        with requests.post(
            url, json=payload, stream=True, timeout=(connect_timeout, read_timeout)
        ) as response:
            if not 200 <= response.status_code < 300:
                raise GenerationError(
                    f"API Error ({response.status_code}): {response.text[:500]}",
                    status_code=response.status_code,
                )

            # iter_lines buffers across reads, so records split between
            # reads or sharing one read both come out whole
            for line in response.iter_lines(chunk_size=chunk_size):
                if not line:
                    continue
                chunk = parse_line(line)
                accumulated += chunk.response
                on_update(accumulated)
                if chunk.done:
                    break
    except requests.exceptions.RequestException as e:
        raise GenerationError(f"Network or API request failed: {e}") from e

    logger.debug("Received complete response, length: %d characters", len(accumulated))
    return accumulated
