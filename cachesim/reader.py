"""Opening trace files, transparently decompressing them by extension."""

from __future__ import annotations

import gzip
import io
import lzma
import os
from typing import IO

import zstandard

_DECODE_ERRORS = (OSError, EOFError, lzma.LZMAError, zstandard.ZstdError)


class DecoderError(OSError):
    """Raised when a compressed trace cannot be decoded."""


class _DecodedStream(io.RawIOBase):
    """Raw stream over a decompressor that reports failures as DecoderError."""

    def __init__(self, decoder: IO[bytes], source: IO[bytes], label: str) -> None:
        super().__init__()
        self._decoder = decoder
        self._source = source
        self._label = label

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        try:
            return self._decoder.readinto(buffer)
        except DecoderError:
            raise
        except _DECODE_ERRORS as exc:
            raise DecoderError(f"not valid {self._label} file: {exc}") from exc

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._decoder.close()
            self._source.close()
        finally:
            super().close()


def _checked_peek(decoder, label: str) -> None:
    try:
        decoder.peek(1)
    except _DECODE_ERRORS as exc:
        raise DecoderError(f"not valid {label} file: {exc}") from exc


def wrap_decoder(stream: IO[bytes], path: str | os.PathLike[str]) -> IO[bytes]:
    """Wrap ``stream`` in a decompressor chosen by the extension of ``path``.

    ``.gz``, ``.zst`` and ``.xz`` are decoded; anything else is returned as is.
    Closing the returned stream also closes ``stream``.
    """
    extension = os.path.splitext(os.fspath(path))[1]
    if extension == ".gz":
        decoder = gzip.GzipFile(fileobj=stream, mode="rb")
        _checked_peek(decoder, ".gzip")
        return io.BufferedReader(_DecodedStream(decoder, stream, ".gzip"))
    if extension == ".zst":
        decoder = zstandard.ZstdDecompressor().stream_reader(stream)
        return io.BufferedReader(_DecodedStream(decoder, stream, ".zst"))
    if extension == ".xz":
        decoder = lzma.LZMAFile(stream, mode="rb")
        _checked_peek(decoder, ".xz")
        return io.BufferedReader(_DecodedStream(decoder, stream, ".xz"))
    return stream


def open_trace(path: str | os.PathLike[str]) -> IO[bytes]:
    """Open the trace file at ``path`` for binary reading, decoding if needed."""
    file = open(path, "rb")
    try:
        return wrap_decoder(file, path)
    except BaseException:
        file.close()
        raise