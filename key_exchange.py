import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from config import DH_PRIME, DH_GENERATOR, PRIVATE_EXPONENT_BITS, STRICT_PEER_VALUE
from logging_util import setup_logger
from protocol import ProtocolError
from utils import mod_exp, generate_keystream

logger = setup_logger("handshake")


@dataclass(frozen=True)
class DiffieHellmanSuite:
    """The primitives a session and a chat loop rely on.

    Swapping this object is enough to change the key agreement or the
    keystream; framing and the chat loop only see these three methods.
    """
    p: int = DH_PRIME
    g: int = DH_GENERATOR

    def derive_public_value(self, private: int) -> int:
        return mod_exp(self.g, private, self.p)

    def derive_shared_secret(self, peer_public: int, private: int) -> int:
        return mod_exp(peer_public, private, self.p)

    def derive_keystream(self, secret: int, length: int) -> bytes:
        return generate_keystream(secret, length)


DEFAULT_SUITE = DiffieHellmanSuite()


class HandshakeState(Enum):
    INITIALIZED = "initialized"
    PUBLIC_VALUE_COMPUTED = "public value computed"
    ESTABLISHED = "established"


@dataclass
class HandshakeSession:
    """One ephemeral key pair and, once the peer answers, the shared secret.

    ``rng`` is anything with ``getrandbits``; pass a seeded
    ``random.Random`` for reproducible sessions.

    Peer values are not range checked unless ``strict`` is set, so any
    64-bit value is accepted by default.
    """
    suite: DiffieHellmanSuite = DEFAULT_SUITE
    rng: object = field(default_factory=secrets.SystemRandom)
    strict: bool = STRICT_PEER_VALUE
    state: HandshakeState = field(default=HandshakeState.INITIALIZED, init=False)
    private: int = field(default=0, init=False, repr=False)
    public: int = field(default=0, init=False)
    shared_secret: Optional[int] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.private = self.rng.getrandbits(PRIVATE_EXPONENT_BITS)
        self.public = self.suite.derive_public_value(self.private)
        self.state = HandshakeState.PUBLIC_VALUE_COMPUTED

    @property
    def established(self) -> bool:
        return self.state is HandshakeState.ESTABLISHED

    def complete(self, peer_public: int) -> int:
        if self.established:
            raise RuntimeError("handshake already established")
        if self.strict and not 0 <= peer_public < self.suite.p:
            raise ProtocolError(f"peer public value {peer_public:#x} outside [0, p)")
        self.shared_secret = self.suite.derive_shared_secret(peer_public, self.private)
        self.state = HandshakeState.ESTABLISHED
        return self.shared_secret

    def exchange(self, channel) -> int:
        """Send our public value, read the peer's, derive the secret."""
        logger.debug(f"p = {self.suite.p:#018x}, g = {self.suite.g}")
        logger.debug(f"private = {self.private:016x}, public = {self.public:016x}")
        channel.send_fixed(self.public)
        peer_public = channel.recv_fixed()
        logger.debug(f"peer public = {peer_public:016x}")
        secret = self.complete(peer_public)
        logger.debug(f"shared secret = {secret:016x}")
        return secret
