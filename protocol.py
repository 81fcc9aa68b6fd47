import socket
import struct

from config import PUBLIC_VALUE_BYTES, LENGTH_PREFIX_BYTES, MAX_FRAME_LENGTH

# Handshake: [8-byte little-endian public value] in each direction.
# Chat frames: [4-byte little-endian length][payload bytes], no magic, no tag.

_FIXED = struct.Struct('<Q')
_LENGTH = struct.Struct('<I')


class ChatConnectionError(ConnectionError):
    """Bind, connect, accept, read or write failure on a chat connection."""


class PeerClosedError(ChatConnectionError):
    """The peer closed the stream on a message boundary."""


class ProtocolError(ChatConnectionError):
    """Truncated or malformed data on the wire."""


def encode_fixed(value: int) -> bytes:
    return _FIXED.pack(value)


def decode_fixed(data: bytes) -> int:
    if len(data) != PUBLIC_VALUE_BYTES:
        raise ProtocolError(f"expected {PUBLIC_VALUE_BYTES} bytes, got {len(data)}")
    (value,) = _FIXED.unpack(data)
    return value


def encode_frame(payload: bytes) -> bytes:
    if len(payload) > MAX_FRAME_LENGTH:
        raise ProtocolError(f"payload too large for a frame: {len(payload)} bytes")
    return _LENGTH.pack(len(payload)) + payload


def decode_frame(data: bytes) -> bytes:
    """Decode a buffer holding exactly one frame."""
    if len(data) < LENGTH_PREFIX_BYTES:
        raise ProtocolError(f"truncated length prefix: {len(data)} bytes")
    (length,) = _LENGTH.unpack_from(data)
    payload = data[LENGTH_PREFIX_BYTES:]
    if len(payload) < length:
        raise ProtocolError(f"truncated frame: expected {length} bytes, got {len(payload)}")
    if len(payload) > length:
        raise ProtocolError(f"{len(payload) - length} trailing bytes after frame")
    return bytes(payload)


class FramedChannel:
    """Exact-size reads and writes over a connected stream socket."""

    def __init__(self, sock: socket.socket):
        self.sock = sock

    def send_fixed(self, value: int):
        self._send(encode_fixed(value))

    def recv_fixed(self) -> int:
        return decode_fixed(self._recv_exact(PUBLIC_VALUE_BYTES))

    def send_frame(self, payload: bytes):
        self._send(encode_frame(payload))

    def recv_frame(self) -> bytes:
        header = self._recv_exact(LENGTH_PREFIX_BYTES)
        (length,) = _LENGTH.unpack(header)
        if length == 0:
            return b""
        return self._recv_exact(length, boundary=False)

    def close(self):
        self.sock.close()

    def _send(self, data: bytes):
        try:
            self.sock.sendall(data)
        except OSError as exc:
            raise ChatConnectionError(f"send failed: {exc}") from exc

    def _recv_exact(self, n: int, boundary: bool = True) -> bytes:
        buf = bytearray()
        while len(buf) < n:
            try:
                chunk = self.sock.recv(n - len(buf))
            except OSError as exc:
                raise ChatConnectionError(f"receive failed: {exc}") from exc
            if not chunk:
                if boundary and not buf:
                    raise PeerClosedError("connection closed by peer")
                raise ProtocolError(f"stream closed after {len(buf)} of {n} bytes")
            buf.extend(chunk)
        return bytes(buf)
