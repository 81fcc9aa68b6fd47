"""
Lockstep chat over an established channel.

Each turn sends one frame and then blocks for exactly one frame from the
peer. There are no sequence numbers, so the two directions must never be
decoupled.
"""
import sys

from config import DECODE_ERRORS, TEXT_ENCODING
from key_exchange import DEFAULT_SUITE, HandshakeSession
from logging_util import setup_logger
from protocol import FramedChannel, PeerClosedError
from utils import hex_preview, xor_transform

SERVER_LABEL = "[SERVER]"
CLIENT_LABEL = "[CLIENT]"

logger = setup_logger("chat")


class ChatLoop:
    def __init__(self, channel, shared_secret: int, peer_label: str,
                 suite=DEFAULT_SUITE, read_line=input, output=None):
        self.channel = channel
        self.shared_secret = shared_secret
        self.peer_label = peer_label
        self.suite = suite
        self.read_line = read_line
        self.output = output or sys.stdout

    def encrypt(self, message: str) -> bytes:
        plain = message.encode(TEXT_ENCODING)
        keystream = self.suite.derive_keystream(self.shared_secret, len(plain))
        cipher = xor_transform(plain, keystream)
        logger.debug(f"[ENCRYPT] plain={message!r} key={hex_preview(keystream)} cipher={cipher.hex()}")
        return cipher

    def decrypt(self, cipher: bytes) -> str:
        keystream = self.suite.derive_keystream(self.shared_secret, len(cipher))
        plain = xor_transform(cipher, keystream)
        logger.debug(f"[DECRYPT] cipher={hex_preview(cipher)} key={hex_preview(keystream)}")
        return plain.decode(TEXT_ENCODING, errors=DECODE_ERRORS)

    def turn(self, message: str) -> str | None:
        """Send ``message`` and wait for the reply; None if nothing was sent."""
        message = message.strip()
        if not message:
            return None

        cipher = self.encrypt(message)
        self.channel.send_frame(cipher)
        logger.debug(f"[NETWORK] sent {len(cipher)} bytes")

        reply = self.channel.recv_frame()
        logger.debug(f"[NETWORK] received {len(reply)} bytes")
        text = self.decrypt(reply)
        self.display(text)
        return text

    def display(self, text: str):
        print(f"{self.peer_label} {text}", file=self.output, flush=True)

    def run(self):
        """Loop until console EOF or the peer hangs up; I/O errors propagate."""
        while True:
            try:
                line = self.read_line()
            except EOFError:
                logger.info("Console input closed")
                return
            try:
                self.turn(line)
            except PeerClosedError:
                logger.info("Peer closed the connection")
                return


def run_session(sock, is_server: bool, rng=None, strict=None,
                read_line=input, output=None, suite=DEFAULT_SUITE):
    """Handshake on a connected socket, then chat until the session ends."""
    channel = FramedChannel(sock)
    options = {"suite": suite}
    if rng is not None:
        options["rng"] = rng
    if strict is not None:
        options["strict"] = strict
    session = HandshakeSession(**options)

    label = SERVER_LABEL if is_server else CLIENT_LABEL
    logger.info(f"{label} Starting key exchange...")
    secret = session.exchange(channel)
    logger.info(f"{label} Secure channel established")

    peer_label = CLIENT_LABEL if is_server else SERVER_LABEL
    loop = ChatLoop(channel, secret, peer_label, suite=suite,
                    read_line=read_line, output=output)
    loop.run()
    return session
