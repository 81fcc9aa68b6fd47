"""
Central configuration for streamchat.
Avoids hardcoded literals spread across files.
"""

# Networking
HOST = "localhost"
PORT = 8080
LISTEN_HOST = "0.0.0.0"
BACKLOG = 1

# Security parameters (toy strength, do NOT use in production)
DH_PRIME = 0xD87FA3E29184C7F3  # 64-bit prime modulus
DH_GENERATOR = 2
PRIVATE_EXPONENT_BITS = 64

# Keystream LCG: state = state * A + C (mod 2**64), byte = bits 39..32
LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS_BITS = 64
KEYSTREAM_SHIFT = 32

# Wire format
PUBLIC_VALUE_BYTES = 8
LENGTH_PREFIX_BYTES = 4
MAX_FRAME_LENGTH = 2**32 - 1

# Encoding
TEXT_ENCODING = "utf-8"
DECODE_ERRORS = "replace"  # errors handling during decode

# Reject peer public values outside [0, p) during the handshake
STRICT_PEER_VALUE = False


class ParseError(ValueError):
    """Invalid port or address given on the command line."""


def parse_port(text: str) -> int:
    try:
        port = int(text.strip())
    except (AttributeError, ValueError):
        raise ParseError(f"invalid port: {text!r}") from None
    if not 0 <= port <= 65535:
        raise ParseError(f"port out of range: {port}")
    return port


def parse_address(text: str) -> tuple[str, int]:
    """Split ``host[:port]`` into a host and a port.

    IPv6 literals must be bracketed (``[::1]:8080``). A missing port
    falls back to ``PORT``.
    """
    text = (text or "").strip()
    if not text:
        raise ParseError("empty address")

    if text.startswith("["):
        host, sep, rest = text[1:].partition("]")
        if not sep:
            raise ParseError(f"unterminated IPv6 address: {text!r}")
        if rest and not rest.startswith(":"):
            raise ParseError(f"malformed address: {text!r}")
        port_text = rest[1:] if rest else ""
    elif text.count(":") > 1:
        raise ParseError(f"IPv6 addresses must be bracketed: {text!r}")
    else:
        host, _, port_text = text.partition(":")
        if ":" in text and not port_text:
            raise ParseError(f"missing port after ':' in {text!r}")

    if not host:
        raise ParseError(f"missing host in {text!r}")
    port = parse_port(port_text) if port_text else PORT
    return host, port
