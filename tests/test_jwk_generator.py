"""Tests for JWK material generation."""

import json
import logging
import random

import pytest

from keyforge.core.algorithm_registry import (
    JsonWebAlgorithm,
    JwkeyOperation,
    JwkeyType,
    JwkeyUsage,
    RsaKeySize,
)
from keyforge.core.errors import KeySizeInvalid, Unsupported
from keyforge.core.jwk import b64url_decode, b64url_encode, jwk_to_key
from keyforge.core.jwk_generator import JwkGenerator, validate_rsa_key_size
from keyforge.core.secure_memory import SeededRandomSource


@pytest.fixture
def generator():
    return JwkGenerator()


class TestSymmetric:
    """Tests for octet key generation."""

    @pytest.mark.parametrize("algorithm,size", [
        (JsonWebAlgorithm.DIR, 32),
        (JsonWebAlgorithm.HS256, 32),
        (JsonWebAlgorithm.A128KW, 32),
        (JsonWebAlgorithm.A128CBC_HS256, 32),
        (JsonWebAlgorithm.HS384, 48),
        (JsonWebAlgorithm.A192GCM, 48),
        (JsonWebAlgorithm.HS512, 64),
        (JsonWebAlgorithm.A256GCMKW, 64),
    ])
    def test_octet_sizes(self, generator, algorithm, size):
        value = generator.generate_value(algorithm)
        assert value["kty"] == "oct"
        assert len(b64url_decode(value["k"])) == size

    def test_seeded_source_is_deterministic(self):
        first = JwkGenerator(random_source=SeededRandomSource(7)).generate_value(JsonWebAlgorithm.HS256)
        second = JwkGenerator(random_source=SeededRandomSource(7)).generate_value(JsonWebAlgorithm.HS256)
        assert first == second
        assert first["k"] == b64url_encode(random.Random(7).randbytes(32))

    def test_bits_rejected(self, generator):
        with pytest.raises(Unsupported):
            generator.generate_value(JsonWebAlgorithm.HS256, bits=2048)


class TestRsa:
    """Tests for RSA JWK generation."""

    def test_bits_required(self, generator):
        with pytest.raises(KeySizeInvalid, match="required for RS256"):
            generator.generate_value(JsonWebAlgorithm.RS256)

    @pytest.mark.parametrize("bits", [1024, 2047, 8192, "big"])
    def test_bad_sizes(self, bits):
        with pytest.raises(KeySizeInvalid):
            validate_rsa_key_size(bits, JsonWebAlgorithm.PS256)

    @pytest.mark.parametrize("bits", [2048.9, 2048.0, "2048", True])
    def test_sizes_are_not_coerced(self, bits):
        """Only an int names a key size; floats, strings and bools are refused."""
        with pytest.raises(KeySizeInvalid):
            validate_rsa_key_size(bits, JsonWebAlgorithm.RS256)

    def test_supported_size(self):
        assert validate_rsa_key_size(3072, JsonWebAlgorithm.RSA_OAEP) is RsaKeySize.RSA_3072

    def test_rs256_with_2048_bits(self, generator):
        value = generator.generate_value(JsonWebAlgorithm.RS256, bits=2048)
        assert value["kty"] == "RSA"
        assert jwk_to_key(value).key_size == 2048

    def test_rs256_document(self, generator):
        jwk = json.loads(generator.generate(JwkeyType.RSA, JsonWebAlgorithm.RS256, bits=2048))
        assert jwk["kty"] == "RSA"
        assert jwk["alg"] == "RS256"

    def test_generates_requested_modulus(self, generator):
        value = generator.generate_value(JsonWebAlgorithm.RSA_OAEP_256, bits=2048)
        assert value["kty"] == "RSA"
        assert value["e"] == "AQAB"
        assert len(b64url_decode(value["n"])) == 256
        for member in ("d", "p", "q", "dp", "dq", "qi"):
            assert member in value
        assert jwk_to_key(value).key_size == 2048


class TestCurves:
    """Tests for EC and OKP JWK generation."""

    @pytest.mark.parametrize("algorithm,crv,size", [
        (JsonWebAlgorithm.ES256, "P-256", 32),
        (JsonWebAlgorithm.ES384, "P-384", 48),
        (JsonWebAlgorithm.ES521, "P-521", 66),
        (JsonWebAlgorithm.ES256K, "secp256k1", 32),
    ])
    def test_ec_curves(self, generator, algorithm, crv, size):
        value = generator.generate_value(algorithm)
        assert value["kty"] == "EC"
        assert value["crv"] == crv
        assert len(b64url_decode(value["x"])) == size
        assert len(b64url_decode(value["y"])) == size
        assert len(b64url_decode(value["d"])) == size

    def test_eddsa(self, generator):
        value = generator.generate_value(JsonWebAlgorithm.EDDSA)
        assert value["kty"] == "OKP"
        assert value["crv"] == "Ed25519"
        assert len(b64url_decode(value["x"])) == 32

    @pytest.mark.parametrize("algorithm", [
        JsonWebAlgorithm.ECDH_ES,
        JsonWebAlgorithm.ECDH_ES_A128KW,
        JsonWebAlgorithm.ECDH_ES_A256KW,
    ])
    def test_ecdh_uses_x25519(self, generator, algorithm):
        value = generator.generate_value(algorithm)
        assert value["kty"] == "OKP"
        assert value["crv"] == "X25519"


class TestGenerate:
    """Tests for metadata overlay and serialization."""

    def test_default_algorithm_omits_alg(self, generator):
        value = json.loads(generator.generate(JwkeyType.SYMMETRIC))
        assert value["kty"] == "oct"
        assert len(b64url_decode(value["k"])) == 64
        assert "alg" not in value
        assert "kid" not in value
        assert "use" not in value
        assert "key_ops" not in value

    def test_overlay_order(self, generator):
        text = generator.generate(
            JwkeyType.SYMMETRIC,
            algorithm=JsonWebAlgorithm.HS256,
            key_id="k1",
            usage=JwkeyUsage.SIGNATURE,
            operations=[JwkeyOperation.SIGN, JwkeyOperation.VERIFY],
        )
        value = json.loads(text)
        assert list(value) == ["kty", "k", "kid", "alg", "key_ops", "use"]
        assert value["alg"] == "HS256"
        assert value["kid"] == "k1"
        assert value["key_ops"] == ["sign", "verify"]
        assert value["use"] == "sig"

    def test_pretty_printed(self, generator):
        text = generator.generate(JwkeyType.ED25519, key_id="ed")
        assert text.startswith('{\n  "kty": "OKP"')

    def test_empty_operations_omitted(self, generator):
        value = json.loads(generator.generate(JwkeyType.X25519, operations=[]))
        assert "key_ops" not in value

    def test_encryption_usage(self, generator):
        value = json.loads(generator.generate(JwkeyType.X25519, usage=JwkeyUsage.ENCRYPTION))
        assert value["use"] == "enc"

    def test_es512_alias_written_as_es521(self, generator):
        value = json.loads(generator.generate(JwkeyType.EC_DSA, algorithm="ES512"))
        assert value["alg"] == "ES521"
        assert value["crv"] == "P-521"

    def test_algorithm_wins_on_mismatch(self, generator, caplog):
        """The algorithm decides the family; a mismatch is only logged."""
        with caplog.at_level(logging.WARNING):
            value = json.loads(generator.generate(JwkeyType.RSA, algorithm=JsonWebAlgorithm.HS256))
        assert value["kty"] == "oct"
        assert "algorithm does not belong to requested key type" in caplog.text

    def test_rsa_without_bits(self, generator):
        with pytest.raises(KeySizeInvalid):
            generator.generate(JwkeyType.RSA)
