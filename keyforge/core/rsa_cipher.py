"""RSA Encryption Padding Resolver.

Turns a declared padding (PKCS#1 v1.5 or OAEP) plus optional digest
choices into a concrete encryption scheme, and runs RSA encryption and
decryption with it.

Defaults:
- OAEP digest and MGF1 digest are SHA-256 when not supplied
- OAEP label is empty
- PKCS#1 v1.5 ignores digest fields entirely

OpenSSL (through cryptography) runs every scheme it supports. It refuses
OAEP with a SHA-3 message or MGF1 digest, so those schemes run through
PyCryptodome's PKCS1_OAEP instead. Both produce standard RFC 8017 OAEP.
Decryption failures are reported with one undifferentiated message.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from Crypto.Cipher import PKCS1_OAEP
from Crypto.Hash import SHA1, SHA256, SHA384, SHA512, SHA3_256, SHA3_384, SHA3_512
from Crypto.PublicKey import RSA
from Crypto.Signature.pss import MGF1

from keyforge.core.errors import DecryptionFailure, EncryptionFailure, Unsupported
from keyforge.core.key_codec import AsymmetricKeyFormat, KeyFormatCodec, key_codec, key_family
from keyforge.core.logging import get_logger, log_operation

logger = get_logger(__name__)


class DigestKind(str, Enum):
    """Hash functions selectable for OAEP, exchanged as kebab-case tokens."""
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    SHA3_256 = "sha3-256"
    SHA3_384 = "sha3-384"
    SHA3_512 = "sha3-512"

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """Fresh hash instance for this digest."""
        return _HASH_FACTORIES[self]()


_HASH_FACTORIES = {
    DigestKind.SHA1: hashes.SHA1,
    DigestKind.SHA256: hashes.SHA256,
    DigestKind.SHA384: hashes.SHA384,
    DigestKind.SHA512: hashes.SHA512,
    DigestKind.SHA3_256: hashes.SHA3_256,
    DigestKind.SHA3_384: hashes.SHA3_384,
    DigestKind.SHA3_512: hashes.SHA3_512,
}

# PyCryptodome hash modules, for schemes OpenSSL will not run
_PYCRYPTODOME_HASHES = {
    DigestKind.SHA1: SHA1,
    DigestKind.SHA256: SHA256,
    DigestKind.SHA384: SHA384,
    DigestKind.SHA512: SHA512,
    DigestKind.SHA3_256: SHA3_256,
    DigestKind.SHA3_384: SHA3_384,
    DigestKind.SHA3_512: SHA3_512,
}

SHA3_DIGESTS = frozenset({DigestKind.SHA3_256, DigestKind.SHA3_384, DigestKind.SHA3_512})


class RsaEncryptionPadding(str, Enum):
    """RSA encryption padding kinds."""
    PKCS1V15 = "pkcs1-v1_5"
    OAEP = "oaep"


@dataclass(frozen=True)
class PaddingSpec:
    """Declared padding with optional digest choices."""
    padding: RsaEncryptionPadding
    digest: DigestKind | None = None
    mgf_digest: DigestKind | None = None


@dataclass(frozen=True)
class Pkcs1v15Scheme:
    """RSAES-PKCS1-v1_5. Carries no parameters."""

    def to_padding(self) -> padding.AsymmetricPadding:
        return padding.PKCS1v15()

    def overhead(self) -> int:
        return 11


@dataclass(frozen=True)
class OaepScheme:
    """RSAES-OAEP with independent message and MGF1 digests, empty label."""
    digest: DigestKind
    mgf_digest: DigestKind

    def to_padding(self) -> padding.AsymmetricPadding:
        return padding.OAEP(
            mgf=padding.MGF1(algorithm=self.mgf_digest.hash_algorithm()),
            algorithm=self.digest.hash_algorithm(),
            label=None,
        )

    @property
    def openssl_supported(self) -> bool:
        return not ({self.digest, self.mgf_digest} & SHA3_DIGESTS)

    def pycryptodome_cipher(self, key: RSA.RsaKey):
        """PKCS1_OAEP cipher for ``key`` with this scheme's digests."""
        mgf_hash = _PYCRYPTODOME_HASHES[self.mgf_digest]
        return PKCS1_OAEP.new(
            key,
            hashAlgo=_PYCRYPTODOME_HASHES[self.digest],
            mgfunc=lambda seed, length: MGF1(seed, length, mgf_hash),
        )

    def overhead(self) -> int:
        return 2 * self.digest.hash_algorithm().digest_size + 2


EncryptionScheme = Union[Pkcs1v15Scheme, OaepScheme]


def resolve_padding(spec: PaddingSpec) -> EncryptionScheme:
    """Build the encryption scheme for a padding spec. Never fails."""
    if spec.padding == RsaEncryptionPadding.PKCS1V15:
        return Pkcs1v15Scheme()
    return OaepScheme(
        digest=spec.digest or DigestKind.SHA256,
        mgf_digest=spec.mgf_digest or DigestKind.SHA256,
    )


def max_plaintext_length(public_key: rsa.RSAPublicKey, scheme: EncryptionScheme) -> int:
    """Largest message ``scheme`` can encrypt under ``public_key``."""
    key_size_bytes = (public_key.key_size + 7) // 8
    return max(key_size_bytes - scheme.overhead(), 0)


def _pycryptodome_public(public_key: rsa.RSAPublicKey) -> RSA.RsaKey:
    numbers = public_key.public_numbers()
    return RSA.construct((numbers.n, numbers.e))


def _pycryptodome_private(private_key: rsa.RSAPrivateKey) -> RSA.RsaKey:
    numbers = private_key.private_numbers()
    public = numbers.public_numbers
    return RSA.construct((public.n, public.e, numbers.d, numbers.p, numbers.q))


def encrypt_rsa(
    public_key: rsa.RSAPublicKey,
    scheme: EncryptionScheme,
    plaintext: bytes,
) -> bytes:
    """Encrypt ``plaintext`` under ``public_key``.

    Raises:
        EncryptionFailure: message too long for the key and padding, or the
            backend does not support the scheme's digests.
    """
    limit = max_plaintext_length(public_key, scheme)
    if len(plaintext) > limit:
        raise EncryptionFailure(
            f"rsa encrypt failed: message of {len(plaintext)} bytes exceeds {limit}"
        )

    try:
        if isinstance(scheme, OaepScheme) and not scheme.openssl_supported:
            return scheme.pycryptodome_cipher(_pycryptodome_public(public_key)).encrypt(plaintext)
        return public_key.encrypt(plaintext, scheme.to_padding())
    except (ValueError, UnsupportedAlgorithm) as e:
        raise EncryptionFailure(f"rsa encrypt failed: {e}") from e


def decrypt_rsa(
    private_key: rsa.RSAPrivateKey,
    scheme: EncryptionScheme,
    ciphertext: bytes,
) -> bytes:
    """Decrypt ``ciphertext`` with ``private_key``.

    Raises:
        DecryptionFailure: wrong key, corrupted ciphertext or padding
            mismatch, without saying which.
    """
    try:
        if isinstance(scheme, OaepScheme) and not scheme.openssl_supported:
            return scheme.pycryptodome_cipher(_pycryptodome_private(private_key)).decrypt(ciphertext)
        return private_key.decrypt(ciphertext, scheme.to_padding())
    except (ValueError, TypeError, UnsupportedAlgorithm):
        raise DecryptionFailure("rsa decrypt failed") from None


@dataclass(frozen=True)
class RsaEncryptionDto:
    """RSA operation request: encoded key, its format, padding and input bytes."""
    key: bytes
    format: AsymmetricKeyFormat
    padding: PaddingSpec
    input: bytes


def _require_rsa(key, role: str):
    if not isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
        raise Unsupported(key_family(key), f"rsa {role} requires an rsa key")
    return key


@log_operation("encrypt rsa")
def encrypt_rsa_request(request: RsaEncryptionDto, codec: KeyFormatCodec = key_codec) -> bytes:
    """Decode the public key in ``request`` and encrypt its input.

    Raises:
        InvalidKeyEncoding: the key does not decode in the declared format.
        Unsupported: the key is not an RSA key.
        EncryptionFailure: the input does not fit the key and padding.
    """
    scheme = resolve_padding(request.padding)
    logger.info(
        "encrypt rsa",
        format=AsymmetricKeyFormat(request.format).value,
        padding=request.padding.padding.value,
    )
    public_key = _require_rsa(codec.decode_public_key(request.key, request.format), "encryption")
    return encrypt_rsa(public_key, scheme, request.input)


@log_operation("decrypt rsa")
def decrypt_rsa_request(request: RsaEncryptionDto, codec: KeyFormatCodec = key_codec) -> bytes:
    """Decode the private key in ``request`` and decrypt its input.

    Raises:
        InvalidKeyEncoding: the key does not decode in the declared format.
        Unsupported: the key is not an RSA key.
        DecryptionFailure: wrong key, corrupt input or padding mismatch.
    """
    scheme = resolve_padding(request.padding)
    logger.info(
        "decrypt rsa",
        format=AsymmetricKeyFormat(request.format).value,
        padding=request.padding.padding.value,
    )
    private_key = _require_rsa(codec.decode_private_key(request.key, request.format), "decryption")
    return decrypt_rsa(private_key, scheme, request.input)
