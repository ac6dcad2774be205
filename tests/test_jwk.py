"""Tests for JWK <-> key object conversion."""

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa, x25519

from keyforge.core.errors import InvalidKeyEncoding, Unsupported
from keyforge.core.jwk import (
    b64url_decode,
    b64url_encode,
    jwk_to_key,
    octet_jwk,
    private_key_to_jwk,
    public_key_to_jwk,
)


class TestBase64Url:
    def test_no_padding(self):
        assert b64url_encode(b"\xfb\xff") == "-_8"
        assert b64url_decode("-_8") == b"\xfb\xff"

    def test_empty(self):
        assert b64url_encode(b"") == ""
        assert b64url_decode("") == b""


class TestToJwk:
    """Tests for key object to JWK conversion."""

    def test_rsa_public(self, rsa_key):
        jwk = public_key_to_jwk(rsa_key)
        assert set(jwk) == {"kty", "n", "e"}
        assert jwk["e"] == "AQAB"

    def test_rsa_private_round_trip(self, rsa_key):
        key = jwk_to_key(private_key_to_jwk(rsa_key))
        assert isinstance(key, rsa.RSAPrivateKey)
        assert key.private_numbers() == rsa_key.private_numbers()

    def test_rsa_without_primes(self, rsa_key):
        """p and q are recovered when only n, e, d are present."""
        jwk = {k: v for k, v in private_key_to_jwk(rsa_key).items() if k in ("kty", "n", "e", "d")}
        key = jwk_to_key(jwk)
        assert key.private_numbers().d == rsa_key.private_numbers().d

    def test_ec_round_trip(self, ec_key):
        jwk = private_key_to_jwk(ec_key)
        assert jwk["crv"] == "P-256"
        key = jwk_to_key(jwk)
        assert isinstance(key, ec.EllipticCurvePrivateKey)
        assert key.private_numbers() == ec_key.private_numbers()

    def test_ec_public(self, ec_key):
        key = jwk_to_key(public_key_to_jwk(ec_key.public_key()))
        assert isinstance(key, ec.EllipticCurvePublicKey)
        assert key.public_numbers() == ec_key.public_key().public_numbers()

    def test_okp(self, ed25519_key, x25519_key):
        ed = private_key_to_jwk(ed25519_key)
        assert ed["kty"] == "OKP" and ed["crv"] == "Ed25519"
        assert isinstance(jwk_to_key(ed), ed25519.Ed25519PrivateKey)

        x = public_key_to_jwk(x25519_key)
        assert x["crv"] == "X25519" and "d" not in x
        assert isinstance(jwk_to_key(x), x25519.X25519PublicKey)

    def test_octet(self):
        assert jwk_to_key(octet_jwk(b"\x00" * 16)) == b"\x00" * 16


class TestFromJwkErrors:
    """Tests for malformed and unsupported JWKs."""

    def test_unknown_kty(self):
        with pytest.raises(Unsupported):
            jwk_to_key({"kty": "DSA"})

    def test_unknown_curve(self):
        with pytest.raises(Unsupported):
            jwk_to_key({"kty": "EC", "crv": "P-192", "x": "AA", "y": "AA"})

    def test_missing_member(self):
        with pytest.raises(InvalidKeyEncoding, match="missing 'n'"):
            jwk_to_key({"kty": "RSA", "e": "AQAB"})

    def test_missing_k(self):
        with pytest.raises(InvalidKeyEncoding):
            jwk_to_key({"kty": "oct"})

    def test_point_not_on_curve(self):
        with pytest.raises(InvalidKeyEncoding):
            jwk_to_key({"kty": "EC", "crv": "P-256", "x": "AQ", "y": "AQ"})

    def test_bad_okp_length(self):
        with pytest.raises(InvalidKeyEncoding):
            jwk_to_key({"kty": "OKP", "crv": "Ed25519", "x": "AAAA"})
