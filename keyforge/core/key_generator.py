"""Asymmetric key pair generation.

Generates RSA, ECC and Edwards private keys straight into one of the
AsymmetricKeyFormat encodings, and derives the matching public key from
an encoded private key.

Supported:
- RSA: 2048, 3072, 4096 bits
- ECC: nistp256, nistp384, nistp521, secp256k1
- Edwards: ed25519 (signing), x25519 (key agreement)
"""

from enum import Enum

from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa, x25519

from keyforge.core.algorithm_registry import RsaKeySize, rsa_key_size
from keyforge.core.key_codec import AsymmetricKeyFormat, KeyFormatCodec, key_codec
from keyforge.core.logging import get_logger, log_operation
from keyforge.core.secure_memory import SecureBytes

logger = get_logger(__name__)


class EccCurveName(str, Enum):
    """Named short-Weierstrass curves."""
    NIST_P256 = "nistp256"
    NIST_P384 = "nistp384"
    NIST_P521 = "nistp521"
    SECP256K1 = "secp256k1"


class EdwardsCurveName(str, Enum):
    """Curve25519 variants."""
    ED25519 = "ed25519"
    X25519 = "x25519"


ECC_CURVES: dict[EccCurveName, type[ec.EllipticCurve]] = {
    EccCurveName.NIST_P256: ec.SECP256R1,
    EccCurveName.NIST_P384: ec.SECP384R1,
    EccCurveName.NIST_P521: ec.SECP521R1,
    EccCurveName.SECP256K1: ec.SECP256K1,
}


class KeyPairGenerator:
    """Generates encoded private keys and derives encoded public keys."""

    def __init__(self, codec: KeyFormatCodec = key_codec, rsa_public_exponent: int = 65537):
        self._codec = codec
        self._rsa_public_exponent = rsa_public_exponent

    @log_operation("generate rsa key")
    def generate_rsa(self, key_size: int | RsaKeySize, fmt: AsymmetricKeyFormat) -> SecureBytes:
        """Generate an RSA private key encoded in ``fmt``.

        Raises:
            KeySizeInvalid: ``key_size`` is not 2048, 3072 or 4096.
            EncodingFailure: the key cannot be written in ``fmt``.
        """
        size = rsa_key_size(key_size)

        logger.info("generate rsa key", key_size=int(size), format=AsymmetricKeyFormat(fmt).value)
        private_key = rsa.generate_private_key(
            public_exponent=self._rsa_public_exponent,
            key_size=int(size),
        )
        return self._codec.encode_private_key(private_key, fmt)

    @log_operation("generate ecc key")
    def generate_ecc(self, curve: EccCurveName, fmt: AsymmetricKeyFormat) -> SecureBytes:
        """Generate an EC private key on ``curve`` encoded in ``fmt`` (PKCS#8 only)."""
        curve = EccCurveName(curve)
        logger.info("generate ecc key", curve=curve.value, format=AsymmetricKeyFormat(fmt).value)
        private_key = ec.generate_private_key(ECC_CURVES[curve]())
        return self._codec.encode_private_key(private_key, fmt)

    @log_operation("generate edwards key")
    def generate_edwards(self, curve: EdwardsCurveName, fmt: AsymmetricKeyFormat) -> SecureBytes:
        """Generate an Ed25519 or X25519 private key encoded in ``fmt`` (PKCS#8 only)."""
        curve = EdwardsCurveName(curve)
        logger.info("generate edwards key", curve=curve.value, format=AsymmetricKeyFormat(fmt).value)
        if curve == EdwardsCurveName.ED25519:
            private_key = ed25519.Ed25519PrivateKey.generate()
        else:
            private_key = x25519.X25519PrivateKey.generate()
        return self._codec.encode_private_key(private_key, fmt)

    @log_operation("derive public key")
    def derive_public_key(self, private_key: bytes, fmt: AsymmetricKeyFormat) -> bytes:
        """Public key for an encoded private key, written in the same format.

        Raises:
            InvalidKeyEncoding: ``private_key`` does not decode in ``fmt``.
            EncodingFailure: the public key cannot be written in ``fmt``.
        """
        key = self._codec.decode_private_key(private_key, fmt)
        return self._codec.encode_public_key(key.public_key(), fmt)
