import pytest

from config import PORT, ParseError, parse_address, parse_port
import streamchat


def test_parse_port():
    assert parse_port("8080") == 8080
    assert parse_port(" 0 ") == 0
    for bad in ("", "http", "-1", "65536", "80.5"):
        with pytest.raises(ParseError):
            parse_port(bad)


def test_parse_address():
    assert parse_address("localhost:8080") == ("localhost", 8080)
    assert parse_address("example.org") == ("example.org", PORT)
    assert parse_address("[::1]:9000") == ("::1", 9000)
    assert parse_address("[::1]") == ("::1", PORT)


def test_parse_address_errors():
    for bad in ("", ":8080", "host:", "host:abc", "host:70000", "::1:80", "[::1", "[::1]x"):
        with pytest.raises(ParseError):
            parse_address(bad)


def test_cli_defaults():
    args = streamchat.parse_args(["server"])
    assert (args.role, args.port, args.verbose, args.strict) == ("server", 8080, False, False)

    args = streamchat.parse_args(["client", "-v", "--strict"])
    assert (args.host, args.port, args.verbose, args.strict) == ("localhost", 8080, True, True)


def test_cli_rejects_bad_config():
    with pytest.raises(SystemExit) as exc:
        streamchat.parse_args(["server", "notaport"])
    assert exc.value.code == 2
    with pytest.raises(SystemExit):
        streamchat.parse_args(["client", "host:99999"])


def test_cli_connection_failure_exit_code():
    # Port 1 on loopback is not expected to accept connections.
    assert streamchat.main(["client", "127.0.0.1:1"]) == 1
