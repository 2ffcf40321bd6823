"""Transport decoding of HTTP response bodies.

Only gzip and Brotli are decompressed here. Deflate bodies are inflated by
the HTTP client layer (see HttpFetcher.fetch) and arrive already decoded,
so a ``deflate`` tag passes through untouched, as do ``identity``, a missing
tag and any tag we do not recognise.
"""

import gzip
import io
import zlib

import brotli

from ..errors import DecodeError

PASSTHROUGH_ENCODINGS = frozenset({"", "identity", "deflate"})

GZIP_MAGIC = b"\x1f\x8b"


def _gunzip(body: bytes) -> bytes:
    if not body.startswith(GZIP_MAGIC):
        raise DecodeError("body is not gzip framed")
    try:
        with gzip.GzipFile(fileobj=io.BytesIO(body)) as f:
            return f.read()
    except (OSError, EOFError, zlib.error) as e:
        raise DecodeError(f"invalid gzip stream: {e}", cause=e) from e


def _unbrotli(body: bytes) -> bytes:
    decompressor = brotli.Decompressor()
    try:
        data = decompressor.process(body)
    except brotli.error as e:
        raise DecodeError(f"invalid brotli stream: {e}", cause=e) from e

    if not decompressor.is_finished():
        raise DecodeError("brotli stream ended before its end marker")
    return data


DECODERS = {
    "gzip": _gunzip,
    "x-gzip": _gunzip,
    "br": _unbrotli,
}


def decode(body: bytes, encoding: str | None) -> bytes:
    """Decode a response body according to its Content-Encoding tag."""
    tag = (encoding or "").strip().lower()
    if tag in PASSTHROUGH_ENCODINGS:
        return body

    decoder = DECODERS.get(tag)
    if decoder is None:
        return body
    return decoder(body)
