"""JOSE Algorithm Registry.

Static tables for the JSON Web Algorithms (RFC 7518) the toolbox knows:
- Algorithm → key family (JwkeyType)
- Key family → canonical default algorithm
- Algorithm → signing scheme, for the subset usable with JWS
- Per-family algorithm and usage listings for the front end

Every mapping is a dict keyed by the closed enums below. Module import
fails if a mapping does not cover its enum, so adding an algorithm
without placing it in every table is caught immediately.
"""

from enum import Enum, IntEnum
from typing import Any

from keyforge.core.errors import KeySizeInvalid, Unsupported


class JwkeyType(str, Enum):
    """JWK key families."""
    RSA = "rsa"
    EC_DSA = "ecdsa"
    ED25519 = "ed25519"
    X25519 = "x25519"
    SYMMETRIC = "symmetric"


class JsonWebAlgorithm(str, Enum):
    """JOSE algorithm identifiers."""
    DIR = "dir"
    A128KW = "A128KW"
    A192KW = "A192KW"
    A256KW = "A256KW"
    A128GCM = "A128GCM"
    A192GCM = "A192GCM"
    A256GCM = "A256GCM"
    A128GCMKW = "A128GCMKW"
    A192GCMKW = "A192GCMKW"
    A256GCMKW = "A256GCMKW"
    A128CBC_HS256 = "A128CBC-HS256"
    A192CBC_HS384 = "A192CBC-HS384"
    A256CBC_HS512 = "A256CBC-HS512"
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"

    ES256 = "ES256"
    ES384 = "ES384"
    ES521 = "ES521"  # P-521; "ES512" accepted on input
    ES256K = "ES256K"

    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    PS256 = "PS256"
    PS384 = "PS384"
    PS512 = "PS512"
    RSA1_5 = "RSA1_5"
    RSA_OAEP = "RSA-OAEP"
    RSA_OAEP_256 = "RSA-OAEP-256"
    RSA_OAEP_384 = "RSA-OAEP-384"
    RSA_OAEP_512 = "RSA-OAEP-512"

    EDDSA = "EdDSA"
    ECDH_ES = "ECDH-ES"
    ECDH_ES_A128KW = "ECDH-ES+A128KW"
    ECDH_ES_A192KW = "ECDH-ES+A192KW"
    ECDH_ES_A256KW = "ECDH-ES+A256KW"

    @classmethod
    def _missing_(cls, value):
        if value == "ES512":
            return cls.ES521
        return None


class SigningScheme(str, Enum):
    """JWS signing schemes (the "alg" header value)."""
    NONE = "none"
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    PS256 = "PS256"
    PS384 = "PS384"
    PS512 = "PS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"
    ES256K = "ES256K"
    EDDSA = "EdDSA"


class JwkeyUsage(str, Enum):
    """JWK "use" parameter, rendered as its three-letter code."""
    ENCRYPTION = "Encryption"
    SIGNATURE = "Signature"

    @property
    def code(self) -> str:
        return "enc" if self is JwkeyUsage.ENCRYPTION else "sig"


class JwkeyOperation(str, Enum):
    """JWK "key_ops" values (RFC 7517 section 4.3)."""
    SIGN = "sign"
    VERIFY = "verify"
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"
    WRAP_KEY = "wrapKey"
    UNWRAP_KEY = "unwrapKey"
    DERIVE_KEY = "deriveKey"
    DERIVE_BITS = "deriveBits"


class RsaKeySize(IntEnum):
    """Supported RSA modulus sizes in bits."""
    RSA_2048 = 2048
    RSA_3072 = 3072
    RSA_4096 = 4096


def rsa_key_size(value: Any) -> RsaKeySize:
    """Look up a supported RSA modulus size. Only real integers qualify.

    Raises:
        KeySizeInvalid: ``value`` is not an int, or not 2048, 3072 or 4096.
    """
    supported = [size.value for size in RsaKeySize]
    if isinstance(value, int) and not isinstance(value, bool) and value in supported:
        return RsaKeySize(value)
    raise KeySizeInvalid(
        f"unsupported rsa key size {value!r}, expected one of {', '.join(map(str, supported))}"
    )


A = JsonWebAlgorithm

ALGORITHM_KEY_TYPES: dict[JsonWebAlgorithm, JwkeyType] = {
    A.DIR: JwkeyType.SYMMETRIC,
    A.A128KW: JwkeyType.SYMMETRIC,
    A.A192KW: JwkeyType.SYMMETRIC,
    A.A256KW: JwkeyType.SYMMETRIC,
    A.A128GCM: JwkeyType.SYMMETRIC,
    A.A192GCM: JwkeyType.SYMMETRIC,
    A.A256GCM: JwkeyType.SYMMETRIC,
    A.A128GCMKW: JwkeyType.SYMMETRIC,
    A.A192GCMKW: JwkeyType.SYMMETRIC,
    A.A256GCMKW: JwkeyType.SYMMETRIC,
    A.A128CBC_HS256: JwkeyType.SYMMETRIC,
    A.A192CBC_HS384: JwkeyType.SYMMETRIC,
    A.A256CBC_HS512: JwkeyType.SYMMETRIC,
    A.HS256: JwkeyType.SYMMETRIC,
    A.HS384: JwkeyType.SYMMETRIC,
    A.HS512: JwkeyType.SYMMETRIC,
    A.ES256: JwkeyType.EC_DSA,
    A.ES384: JwkeyType.EC_DSA,
    A.ES521: JwkeyType.EC_DSA,
    A.ES256K: JwkeyType.EC_DSA,
    A.RS256: JwkeyType.RSA,
    A.RS384: JwkeyType.RSA,
    A.RS512: JwkeyType.RSA,
    A.PS256: JwkeyType.RSA,
    A.PS384: JwkeyType.RSA,
    A.PS512: JwkeyType.RSA,
    A.RSA1_5: JwkeyType.RSA,
    A.RSA_OAEP: JwkeyType.RSA,
    A.RSA_OAEP_256: JwkeyType.RSA,
    A.RSA_OAEP_384: JwkeyType.RSA,
    A.RSA_OAEP_512: JwkeyType.RSA,
    A.EDDSA: JwkeyType.ED25519,
    A.ECDH_ES: JwkeyType.X25519,
    A.ECDH_ES_A128KW: JwkeyType.X25519,
    A.ECDH_ES_A192KW: JwkeyType.X25519,
    A.ECDH_ES_A256KW: JwkeyType.X25519,
}

DEFAULT_ALGORITHMS: dict[JwkeyType, JsonWebAlgorithm] = {
    JwkeyType.RSA: A.RS256,
    JwkeyType.EC_DSA: A.ES256,
    JwkeyType.ED25519: A.EDDSA,
    JwkeyType.X25519: A.ECDH_ES,
    JwkeyType.SYMMETRIC: A.A256GCM,
}

SIGNING_SCHEMES: dict[JsonWebAlgorithm, SigningScheme] = {
    A.EDDSA: SigningScheme.EDDSA,
    A.ES256: SigningScheme.ES256,
    A.ES256K: SigningScheme.ES256K,
    A.ES384: SigningScheme.ES384,
    A.ES521: SigningScheme.ES512,
    A.HS256: SigningScheme.HS256,
    A.HS384: SigningScheme.HS384,
    A.HS512: SigningScheme.HS512,
    A.PS256: SigningScheme.PS256,
    A.PS384: SigningScheme.PS384,
    A.PS512: SigningScheme.PS512,
    A.RS256: SigningScheme.RS256,
    A.RS384: SigningScheme.RS384,
    A.RS512: SigningScheme.RS512,
    A.DIR: SigningScheme.NONE,
}

# Algorithms offered per key family, in display order
FAMILY_ALGORITHMS: dict[JwkeyType, list[JsonWebAlgorithm]] = {
    JwkeyType.RSA: [A.RS256, A.RS384, A.RS512, A.PS256, A.PS384, A.PS512],
    JwkeyType.EC_DSA: [A.ES256, A.ES384, A.ES521, A.ES256K],
    JwkeyType.ED25519: [A.EDDSA],
    JwkeyType.X25519: [A.ECDH_ES, A.ECDH_ES_A128KW, A.ECDH_ES_A192KW, A.ECDH_ES_A256KW],
    JwkeyType.SYMMETRIC: [
        A.DIR,
        A.HS256, A.A128GCM, A.A128GCMKW, A.A128KW, A.A128CBC_HS256,
        A.HS384, A.A192GCM, A.A192GCMKW, A.A192KW, A.A192CBC_HS384,
        A.HS512, A.A256GCM, A.A256GCMKW, A.A256KW, A.A256CBC_HS512,
    ],
}

FAMILY_USAGES: dict[JwkeyType, list[JwkeyUsage]] = {
    JwkeyType.RSA: [JwkeyUsage.ENCRYPTION, JwkeyUsage.SIGNATURE],
    JwkeyType.EC_DSA: [JwkeyUsage.SIGNATURE],
    JwkeyType.ED25519: [JwkeyUsage.SIGNATURE],
    JwkeyType.X25519: [JwkeyUsage.ENCRYPTION],
    JwkeyType.SYMMETRIC: [JwkeyUsage.ENCRYPTION, JwkeyUsage.SIGNATURE],
}

del A


def _require_total(table: dict, domain: type[Enum], name: str) -> None:
    missing = [member.value for member in domain if member not in table]
    if missing:
        raise RuntimeError(f"{name} does not cover: {', '.join(missing)}")


_require_total(ALGORITHM_KEY_TYPES, JsonWebAlgorithm, "ALGORITHM_KEY_TYPES")
_require_total(DEFAULT_ALGORITHMS, JwkeyType, "DEFAULT_ALGORITHMS")
_require_total(FAMILY_ALGORITHMS, JwkeyType, "FAMILY_ALGORITHMS")
_require_total(FAMILY_USAGES, JwkeyType, "FAMILY_USAGES")


def type_of(algorithm: JsonWebAlgorithm) -> JwkeyType:
    """Key family an algorithm operates on."""
    return ALGORITHM_KEY_TYPES[JsonWebAlgorithm(algorithm)]


def default_algorithm(key_type: JwkeyType) -> JsonWebAlgorithm:
    """Canonical algorithm for a key family."""
    return DEFAULT_ALGORITHMS[JwkeyType(key_type)]


def signing_scheme(algorithm: JsonWebAlgorithm) -> SigningScheme:
    """JWS signing scheme for an algorithm.

    Raises:
        Unsupported: if the algorithm has no signing semantics
            (key wrapping, content encryption, RSA encryption, ECDH).
    """
    algorithm = JsonWebAlgorithm(algorithm)
    try:
        return SIGNING_SCHEMES[algorithm]
    except KeyError:
        raise Unsupported(algorithm.value, "no signing semantics") from None


def algorithms_for(key_type: JwkeyType) -> list[JsonWebAlgorithm]:
    return list(FAMILY_ALGORITHMS[JwkeyType(key_type)])


def usages_for(key_type: JwkeyType) -> list[JwkeyUsage]:
    return list(FAMILY_USAGES[JwkeyType(key_type)])
