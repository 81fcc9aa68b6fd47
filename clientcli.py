import socket
import argparse
from config import HOST, PORT, STRICT_PEER_VALUE, ParseError, parse_address
from chat import run_session
from protocol import ChatConnectionError
from logging_util import setup_logger


class Client:
    def __init__(self, host=HOST, port=PORT, strict=STRICT_PEER_VALUE,
                 read_line=input, output=None, rng=None):
        self.host = host
        self.port = port
        self.strict = strict
        self.read_line = read_line
        self.output = output
        self.rng = rng
        self.logger = setup_logger("client")
        self.client_socket = None

    def connect_to_server(self):
        self.logger.info(f"Connecting to {self.host}:{self.port}...")
        try:
            self.client_socket = socket.create_connection((self.host, self.port))
        except OSError as e:
            raise ChatConnectionError(f"Cannot connect to {self.host}:{self.port}: {e}") from e
        self.logger.info(f"Connected to server at {self.host}:{self.port}")

    def start(self):
        self.connect_to_server()
        try:
            return run_session(self.client_socket, is_server=False, rng=self.rng, strict=self.strict,
                               read_line=self.read_line, output=self.output)
        finally:
            self.logger.info("Disconnected from server")
            self.client_socket.close()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Stream cipher chat client")
    parser.add_argument("address", nargs="?", default=f"{HOST}:{PORT}", help="Server HOST:PORT")
    parser.add_argument("--strict", action="store_true", help="Reject peer public values outside [0, p)")
    args = parser.parse_args(argv)
    try:
        args.host, args.port = parse_address(args.address)
    except ParseError as e:
        parser.error(str(e))
    return args


if __name__ == '__main__':
    args = parse_args()
    client = Client(host=args.host, port=args.port, strict=args.strict)
    client.start()
