"""
Stream cipher chat with Diffie-Hellman key generation.

    streamchat server [PORT]
    streamchat client [HOST:PORT]
"""
import argparse
import logging
import sys

from config import HOST, PORT, LISTEN_HOST, ParseError, parse_address, parse_port
from logging_util import setup_logger, set_level
from protocol import ChatConnectionError
from server import Server
from clientcli import Client

logger = setup_logger("streamchat")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="streamchat", description=__doc__.strip().splitlines()[0])
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Log handshake and cipher details")
    common.add_argument("--strict", action="store_true", help="Reject peer public values outside [0, p)")

    roles = parser.add_subparsers(dest="role", required=True)
    server = roles.add_parser("server", parents=[common], help="Start server")
    server.add_argument("port", nargs="?", default=str(PORT), help=f"Port to listen on (default {PORT})")
    client = roles.add_parser("client", parents=[common], help="Connect to server")
    client.add_argument("address", nargs="?", default=f"{HOST}:{PORT}",
                        help=f"Server HOST:PORT (default {HOST}:{PORT})")
    return parser


def parse_args(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.role == "server":
            args.host, args.port = LISTEN_HOST, parse_port(args.port)
        else:
            args.host, args.port = parse_address(args.address)
    except ParseError as e:
        parser.error(str(e))
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.verbose:
        set_level(logging.DEBUG)

    if args.role == "server":
        peer = Server(host=args.host, port=args.port, strict=args.strict)
    else:
        peer = Client(host=args.host, port=args.port, strict=args.strict)

    try:
        peer.start()
    except ChatConnectionError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == '__main__':
    sys.exit(main())
