from __future__ import annotations

import struct
from typing import BinaryIO, Optional

# 4-byte big-endian length, then the payload
HEADER = struct.Struct(">I")
DEFAULT_MAX_FRAME = 8 * 1024


class FrameTooLargeError(ValueError):
    pass


class TruncatedFrameError(ValueError):
    pass


def _read_exact(rfile: BinaryIO, n: int) -> bytes:
    chunks = []
    remaining = n
    while remaining > 0:
        chunk = rfile.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_frame(rfile: BinaryIO, max_len: int = DEFAULT_MAX_FRAME) -> Optional[bytes]:
    """Next payload from ``rfile``, or None on a clean end of stream."""
    head = _read_exact(rfile, HEADER.size)
    if not head:
        return None
    if len(head) < HEADER.size:
        raise TruncatedFrameError("Stream ended inside a frame header")

    (length,) = HEADER.unpack(head)
    if length > max_len:
        raise FrameTooLargeError(f"Frame of {length} bytes exceeds limit {max_len}")

    payload = _read_exact(rfile, length)
    if len(payload) < length:
        raise TruncatedFrameError("Stream ended inside a frame payload")
    return payload


def write_frame(wfile: BinaryIO, payload: bytes, max_len: int = DEFAULT_MAX_FRAME) -> None:
    if len(payload) > max_len:
        raise FrameTooLargeError(f"Frame of {len(payload)} bytes exceeds limit {max_len}")
    wfile.write(HEADER.pack(len(payload)) + payload)
    wfile.flush()
