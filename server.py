import socket
import argparse
from config import LISTEN_HOST, PORT, BACKLOG, STRICT_PEER_VALUE, ParseError, parse_port
from chat import run_session
from protocol import ChatConnectionError
from logging_util import setup_logger


class Server:
    """Accepts one connection at a time and chats on it until it ends."""

    def __init__(self, host=LISTEN_HOST, port=PORT, strict=STRICT_PEER_VALUE,
                 read_line=input, output=None, rng=None):
        self.host = host
        self.port = port
        self.strict = strict
        self.read_line = read_line
        self.output = output
        self.rng = rng
        self.logger = setup_logger("server")
        self.server_socket = None

    def bind(self):
        self.server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            self.server_socket.bind((self.host, self.port))
            self.server_socket.listen(BACKLOG)
        except OSError as e:
            self.server_socket.close()
            self.server_socket = None
            raise ChatConnectionError(f"Cannot listen on {self.host}:{self.port}: {e}") from e
        self.port = self.server_socket.getsockname()[1]
        self.logger.info(f"Listening on {self.host}:{self.port}")

    def handle_client(self, client_socket, client_address):
        self.logger.info(f"New connection from {client_address}")
        try:
            run_session(client_socket, is_server=True, rng=self.rng, strict=self.strict,
                        read_line=self.read_line, output=self.output)
        except ChatConnectionError as e:
            self.logger.error(f"Connection with {client_address} failed: {e}")
        finally:
            self.logger.info(f"Disconnected: {client_address}")
            client_socket.close()

    def accept_one(self):
        try:
            client_socket, client_address = self.server_socket.accept()
        except OSError as e:
            raise ChatConnectionError(f"accept failed: {e}") from e
        self.handle_client(client_socket, client_address)

    def start(self, max_connections=None):
        if self.server_socket is None:
            self.bind()
        self.logger.info("Waiting for client...")
        served = 0
        try:
            while max_connections is None or served < max_connections:
                try:
                    self.accept_one()
                except ChatConnectionError as e:
                    self.logger.error(str(e))
                served += 1
        finally:
            self.close()

    def close(self):
        if self.server_socket is not None:
            self.server_socket.close()
            self.server_socket = None


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Stream cipher chat server")
    parser.add_argument("--host", default=LISTEN_HOST, help="Host to bind")
    parser.add_argument("--port", default=str(PORT), help="Port to listen on")
    parser.add_argument("--strict", action="store_true", help="Reject peer public values outside [0, p)")
    args = parser.parse_args(argv)
    try:
        args.port = parse_port(args.port)
    except ParseError as e:
        parser.error(str(e))
    return args


if __name__ == '__main__':
    args = parse_args()
    server = Server(host=args.host, port=args.port, strict=args.strict)
    server.start()
