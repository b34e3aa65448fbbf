# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request body variants and their replay rules.

A body is one of:

- :class:`InMemoryBody`: bytes held in memory, replayable.
- :class:`SeekableBody`: a seekable handle, replayed by seeking back to where it started.
- :class:`OneShotBody`: a stream that can only be sent once. Retries are disabled
  for calls carrying one.

Strings, bytes and small one-shot streams become :class:`InMemoryBody`.
"""

from __future__ import annotations

import io
import itertools
from dataclasses import dataclass
from typing import IO, Any, Iterator, Optional, Union

from ..common.constants import MAX_BUFFERED_BODY_SIZE, READ_CHUNK_SIZE
from ..core._error_codes import VALIDATION_UNREADABLE_BODY
from ..core.errors import RequestConstructionError


@dataclass(frozen=True)
class InMemoryBody:
    data: bytes

    replayable = True

    def payload(self) -> bytes:
        return self.data

    def rewind(self) -> None:
        pass


@dataclass(frozen=True)
class SeekableBody:
    handle: IO[Any]
    start: int = 0

    replayable = True

    def payload(self) -> IO[Any]:
        return self.handle

    def rewind(self) -> None:
        self.handle.seek(self.start)


@dataclass(frozen=True)
class OneShotBody:
    stream: Iterator[bytes]

    replayable = False

    def payload(self) -> Iterator[bytes]:
        return self.stream

    def rewind(self) -> None:
        pass


RequestBody = Union[InMemoryBody, SeekableBody, OneShotBody]


def _to_bytes(chunk: Union[str, bytes]) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)


def _drain(source: Any) -> Iterator[bytes]:
    while True:
        chunk = source.read(READ_CHUNK_SIZE)
        if not chunk:
            return
        yield _to_bytes(chunk)


def _is_seekable(source: Any) -> bool:
    seekable = getattr(source, "seekable", None)
    if not callable(seekable):
        return False
    try:
        return bool(seekable())
    except (OSError, ValueError):
        return False


def prepare_body(source: Any, *, buffer_limit: int = MAX_BUFFERED_BODY_SIZE) -> Optional[RequestBody]:
    """
    Classify a caller-supplied body.

    :param source: ``None``, ``bytes``/``bytearray``/``memoryview``, ``str`` (sent as
        UTF-8), or any object with a ``read()`` method.
    :param buffer_limit: Largest one-shot stream that is buffered into memory.
    :type buffer_limit: int
    :return: The body variant, or ``None`` for no body.
    :raises ~azd_rest.core.errors.RequestConstructionError: If ``source`` is not a
        supported body type or cannot be read.
    """
    if source is None:
        return None
    if isinstance(source, (bytes, bytearray, memoryview)):
        return InMemoryBody(bytes(source))
    if isinstance(source, str):
        return InMemoryBody(source.encode("utf-8"))
    if not callable(getattr(source, "read", None)):
        raise RequestConstructionError(
            f"Unsupported request body type: {type(source).__name__}",
            subcode=VALIDATION_UNREADABLE_BODY,
        )

    try:
        if _is_seekable(source):
            start = source.tell()
            mode = getattr(source, "mode", "b")
            if not isinstance(source, io.TextIOBase) and (not isinstance(mode, str) or "b" in mode):
                return SeekableBody(source, start)
        prefix = _to_bytes(source.read(buffer_limit + 1) or b"")
    except (OSError, ValueError) as exc:
        raise RequestConstructionError(
            f"Failed to read request body: {exc}",
            subcode=VALIDATION_UNREADABLE_BODY,
        ) from exc

    if len(prefix) <= buffer_limit:
        return InMemoryBody(prefix)

    return OneShotBody(itertools.chain([prefix], _drain(source)))


__all__ = ["InMemoryBody", "SeekableBody", "OneShotBody", "RequestBody", "prepare_body"]
