#!/usr/bin/env python3
"""
Round-trip tests for the arithmetic, keystream, XOR cipher and DH key exchange.
Run: pytest test_roundtrip.py   (or python test_roundtrip.py)
"""
import random

import pytest

from config import DH_PRIME, DH_GENERATOR
from key_exchange import DiffieHellmanSuite, HandshakeSession, HandshakeState
from protocol import ProtocolError
from utils import mod_exp, generate_keystream, xor_transform


class FixedRandom:
    def __init__(self, value):
        self.value = value

    def getrandbits(self, k):
        return self.value


def test_mod_exp_matches_pow():
    rng = random.Random(1234)
    for _ in range(200):
        base = rng.getrandbits(64)
        exponent = rng.getrandbits(64)
        assert mod_exp(base, exponent, DH_PRIME) == pow(base, exponent, DH_PRIME)
    assert mod_exp(2**64 - 1, 2**64 - 1, DH_PRIME) == pow(2**64 - 1, 2**64 - 1, DH_PRIME)
    assert mod_exp(DH_GENERATOR, 0, DH_PRIME) == 1
    print("[PASS] mod_exp agrees with pow")


def test_dh_symmetry():
    rng = random.Random(99)
    for _ in range(20):
        a = rng.getrandbits(64)
        b = rng.getrandbits(64)
        left = mod_exp(mod_exp(DH_GENERATOR, a, DH_PRIME), b, DH_PRIME)
        right = mod_exp(mod_exp(DH_GENERATOR, b, DH_PRIME), a, DH_PRIME)
        assert left == right
    print("[PASS] g^ab == g^ba")


def test_keystream_length_and_prefix():
    for seed in (0, 2, 0xDEADBEEF, 2**64 - 1):
        for n in (0, 1, 7, 64):
            ks = generate_keystream(seed, n)
            assert len(ks) == n
            assert generate_keystream(seed, n + 13)[:n] == ks
    print("[PASS] keystream length and prefix property")


def test_keystream_known_bytes():
    # seed 0: state 12345 -> byte 0, then 13622895711870 -> byte 99
    assert generate_keystream(0, 2) == bytes([0, 99])


def test_keystream_restarts_from_seed():
    assert generate_keystream(2, 16) == generate_keystream(2, 16)


def test_xor_roundtrip():
    plaintext = "Hello, secure world!"
    ks = generate_keystream(0x1234, len(plaintext) + 5)
    encrypted = xor_transform(plaintext, ks)
    assert encrypted != plaintext.encode()
    decrypted = xor_transform(encrypted, ks).decode()
    assert decrypted == plaintext, f"XOR roundtrip failed: {decrypted}"
    print("[PASS] XOR encrypt/decrypt roundtrip")


def test_xor_rejects_short_keystream():
    with pytest.raises(ValueError):
        xor_transform(b"abcd", b"ab")


def test_dh_shared_secret():
    alice = HandshakeSession(rng=random.Random(1))
    bob = HandshakeSession(rng=random.Random(2))
    assert alice.state is HandshakeState.PUBLIC_VALUE_COMPUTED
    alice_shared = alice.complete(bob.public)
    bob_shared = bob.complete(alice.public)
    assert alice_shared == bob_shared, f"DH mismatch: {alice_shared} != {bob_shared}"
    assert alice.established and bob.established
    print("[PASS] DH shared secret matches on both sides")


def test_seeded_sessions_are_reproducible():
    first = HandshakeSession(rng=random.Random(7))
    second = HandshakeSession(rng=random.Random(7))
    assert first.private == second.private
    assert first.public == second.public


def test_private_exponent_one():
    session = HandshakeSession(rng=FixedRandom(1))
    assert session.public == 2
    assert session.complete(2) == 2


def test_secret_is_set_once():
    session = HandshakeSession(rng=FixedRandom(5))
    session.complete(3)
    with pytest.raises(RuntimeError):
        session.complete(4)


def test_out_of_range_peer_value():
    lenient = HandshakeSession(rng=FixedRandom(3))
    assert lenient.complete(2**64 - 1) == pow(2**64 - 1, 3, DH_PRIME)

    strict = HandshakeSession(rng=FixedRandom(3), strict=True)
    with pytest.raises(ProtocolError):
        strict.complete(DH_PRIME)
    assert strict.state is HandshakeState.PUBLIC_VALUE_COMPUTED


def test_custom_suite():
    suite = DiffieHellmanSuite(p=23, g=5)
    alice = HandshakeSession(suite=suite, rng=FixedRandom(6))
    bob = HandshakeSession(suite=suite, rng=FixedRandom(15))
    assert alice.public == 8 and bob.public == 19
    assert alice.complete(bob.public) == bob.complete(alice.public) == 2


if __name__ == "__main__":
    test_mod_exp_matches_pow()
    test_dh_symmetry()
    test_keystream_length_and_prefix()
    test_xor_roundtrip()
    test_dh_shared_secret()
    print("\nAll tests passed!")
