"""JWK Material Generator.

Generates key material for a JOSE algorithm and serializes it as a JSON
Web Key. The algorithm alone decides the key family and size:

- Symmetric (dir, HS*, A*KW, A*GCM, A*GCMKW, A*CBC-HS*): random octets,
  32 / 48 / 64 bytes for the 128 / 192 / 256-bit tiers
- ES256 / ES384 / ES521 / ES256K: P-256 / P-384 / P-521 / secp256k1
- RS*, PS*, RSA1_5, RSA-OAEP*: RSA, size supplied by the caller
- EdDSA: Ed25519 signing key
- ECDH-ES*: X25519 static key

Caller metadata (kid, alg, key_ops, use) is overlaid afterwards.
"""

import json
from typing import Any, Iterable

from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa, x25519

from keyforge.core.algorithm_registry import (
    JsonWebAlgorithm,
    JwkeyOperation,
    JwkeyType,
    JwkeyUsage,
    RsaKeySize,
    default_algorithm,
    rsa_key_size,
    type_of,
)
from keyforge.core.errors import KeySizeInvalid, SerializationFailure, Unsupported
from keyforge.core.jwk import octet_jwk, private_key_to_jwk
from keyforge.core.logging import get_logger
from keyforge.core.secure_memory import RandomSource, system_random, temporary_key

logger = get_logger(__name__)

A = JsonWebAlgorithm

# Octet key length in bytes per symmetric algorithm
OCTET_KEY_SIZES: dict[JsonWebAlgorithm, int] = {
    A.DIR: 32,
    A.HS256: 32,
    A.A128GCM: 32,
    A.A128GCMKW: 32,
    A.A128KW: 32,
    A.A128CBC_HS256: 32,
    A.HS384: 48,
    A.A192GCM: 48,
    A.A192GCMKW: 48,
    A.A192KW: 48,
    A.A192CBC_HS384: 48,
    A.HS512: 64,
    A.A256GCM: 64,
    A.A256GCMKW: 64,
    A.A256KW: 64,
    A.A256CBC_HS512: 64,
}

EC_ALGORITHM_CURVES: dict[JsonWebAlgorithm, type[ec.EllipticCurve]] = {
    A.ES256: ec.SECP256R1,
    A.ES384: ec.SECP384R1,
    A.ES521: ec.SECP521R1,
    A.ES256K: ec.SECP256K1,
}

del A


def validate_rsa_key_size(bits: Any, algorithm: JsonWebAlgorithm) -> RsaKeySize:
    """Check an RSA key size against the supported tiers.

    Raises:
        KeySizeInvalid: ``bits`` is missing or not 2048, 3072 or 4096.
    """
    if bits is None:
        raise KeySizeInvalid(f"rsa key size is required for {JsonWebAlgorithm(algorithm).value}")
    return rsa_key_size(bits)


class JwkGenerator:
    """Generates JWK key material per algorithm."""

    def __init__(
        self,
        random_source: RandomSource = system_random,
        rsa_public_exponent: int = 65537,
    ):
        self._random = random_source
        self._rsa_public_exponent = rsa_public_exponent

    def generate_value(
        self,
        algorithm: JsonWebAlgorithm,
        bits: int | RsaKeySize | None = None,
    ) -> dict[str, Any]:
        """Generate key material for ``algorithm`` as a bare JWK dict.

        Args:
            algorithm: JOSE algorithm deciding family, curve and size
            bits: RSA modulus size; required for RSA, rejected otherwise

        Raises:
            KeySizeInvalid: RSA algorithm without a supported ``bits``
            Unsupported: ``bits`` given for a non-RSA algorithm
        """
        algorithm = JsonWebAlgorithm(algorithm)
        family = type_of(algorithm)

        if family != JwkeyType.RSA and bits is not None:
            raise Unsupported(f"bits for {algorithm.value}", "key size only applies to rsa")

        if family == JwkeyType.SYMMETRIC:
            with temporary_key(self._random.token_bytes(OCTET_KEY_SIZES[algorithm])) as secret:
                return octet_jwk(secret)

        if family == JwkeyType.EC_DSA:
            private_key = ec.generate_private_key(EC_ALGORITHM_CURVES[algorithm]())
        elif family == JwkeyType.RSA:
            key_size = validate_rsa_key_size(bits, algorithm)
            private_key = rsa.generate_private_key(
                public_exponent=self._rsa_public_exponent,
                key_size=int(key_size),
            )
        elif family == JwkeyType.ED25519:
            private_key = ed25519.Ed25519PrivateKey.generate()
        else:
            private_key = x25519.X25519PrivateKey.generate()

        return private_key_to_jwk(private_key)

    def generate(
        self,
        key_type: JwkeyType,
        algorithm: JsonWebAlgorithm | None = None,
        key_id: str | None = None,
        usage: JwkeyUsage | None = None,
        operations: Iterable[JwkeyOperation] | None = None,
        bits: int | RsaKeySize | None = None,
    ) -> str:
        """Generate a JWK and render it as pretty-printed JSON.

        The algorithm defaults to the key type's canonical algorithm, but
        "alg" is only written when the caller named one.
        """
        key_type = JwkeyType(key_type)
        effective = JsonWebAlgorithm(algorithm) if algorithm is not None else default_algorithm(key_type)

        if type_of(effective) != key_type:
            logger.warning(
                "algorithm does not belong to requested key type",
                key_type=key_type.value,
                algorithm=effective.value,
            )

        logger.info("generate jwk", key_type=key_type.value, algorithm=effective.value)
        value = self.generate_value(effective, bits)

        if key_id is not None:
            value["kid"] = key_id
        if algorithm is not None:
            value["alg"] = effective.value
        ops = [JwkeyOperation(op).value for op in operations or ()]
        if ops:
            value["key_ops"] = ops
        if usage is not None:
            value["use"] = JwkeyUsage(usage).code

        try:
            return json.dumps(value, indent=2)
        except (TypeError, ValueError) as e:
            raise SerializationFailure("value to string failed") from e

