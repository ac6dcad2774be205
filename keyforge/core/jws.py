"""JWS compact serialization (RFC 7515).

Signs and verifies ``header.payload.signature`` tokens with a key held as
a JWK. The JOSE algorithm is mapped to its signing scheme through the
algorithm registry, so key wrapping, content encryption and ECDH
algorithms are rejected with Unsupported before any key is touched.

Supported schemes:
- HS256 / HS384 / HS512: HMAC over an oct key
- RS256 / RS384 / RS512: RSASSA-PKCS1-v1_5
- PS256 / PS384 / PS512: RSASSA-PSS, MGF1 with the same hash, salt = digest length
- ES256 / ES384 / ES512 / ES256K: ECDSA, raw R||S signature
- EdDSA: Ed25519
- none: produced for "dir", empty signature
"""

import json
from typing import Any, Iterable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from keyforge.core.algorithm_registry import JsonWebAlgorithm, SigningScheme, signing_scheme
from keyforge.core.errors import SignatureInvalid, Unsupported
from keyforge.core.jwk import b64url_decode, b64url_encode, jwk_to_key
from keyforge.core.logging import get_logger

logger = get_logger(__name__)

S = SigningScheme

_HASHES: dict[SigningScheme, type[hashes.HashAlgorithm]] = {
    S.HS256: hashes.SHA256,
    S.HS384: hashes.SHA384,
    S.HS512: hashes.SHA512,
    S.RS256: hashes.SHA256,
    S.RS384: hashes.SHA384,
    S.RS512: hashes.SHA512,
    S.PS256: hashes.SHA256,
    S.PS384: hashes.SHA384,
    S.PS512: hashes.SHA512,
    S.ES256: hashes.SHA256,
    S.ES384: hashes.SHA384,
    S.ES512: hashes.SHA512,
    S.ES256K: hashes.SHA256,
}

# scheme -> (curve name, coordinate size in bytes)
_ECDSA_CURVES: dict[SigningScheme, tuple[str, int]] = {
    S.ES256: (ec.SECP256R1.name, 32),
    S.ES384: (ec.SECP384R1.name, 48),
    S.ES512: (ec.SECP521R1.name, 66),
    S.ES256K: (ec.SECP256K1.name, 32),
}

_HMAC = (S.HS256, S.HS384, S.HS512)
_PKCS1 = (S.RS256, S.RS384, S.RS512)
_PSS = (S.PS256, S.PS384, S.PS512)

del S


def _pss(hash_alg: hashes.HashAlgorithm) -> padding.PSS:
    return padding.PSS(mgf=padding.MGF1(hash_alg), salt_length=hash_alg.digest_size)


def _wrong_key(scheme: SigningScheme, expected: str) -> Unsupported:
    return Unsupported(scheme.value, f"requires {expected}")


def _sign(scheme: SigningScheme, key: Any, data: bytes) -> bytes:
    if scheme == SigningScheme.NONE:
        return b""

    if scheme == SigningScheme.EDDSA:
        if not isinstance(key, ed25519.Ed25519PrivateKey):
            raise _wrong_key(scheme, "an Ed25519 private key")
        return key.sign(data)

    hash_alg = _HASHES[scheme]()

    if scheme in _HMAC:
        if not isinstance(key, bytes):
            raise _wrong_key(scheme, "an oct key")
        h = hmac.HMAC(key, hash_alg)
        h.update(data)
        return h.finalize()

    if scheme in _PKCS1 or scheme in _PSS:
        if not isinstance(key, rsa.RSAPrivateKey):
            raise _wrong_key(scheme, "an RSA private key")
        pad = padding.PKCS1v15() if scheme in _PKCS1 else _pss(hash_alg)
        return key.sign(data, pad, hash_alg)

    curve_name, size = _ECDSA_CURVES[scheme]
    if not isinstance(key, ec.EllipticCurvePrivateKey) or key.curve.name != curve_name:
        raise _wrong_key(scheme, f"an EC private key on {curve_name}")
    r, s = decode_dss_signature(key.sign(data, ec.ECDSA(hash_alg)))
    return r.to_bytes(size, "big") + s.to_bytes(size, "big")


def _verify(scheme: SigningScheme, key: Any, data: bytes, signature: bytes) -> bool:
    if scheme == SigningScheme.NONE:
        return signature == b""

    if hasattr(key, "private_bytes"):
        key = key.public_key()

    try:
        if scheme == SigningScheme.EDDSA:
            if not isinstance(key, ed25519.Ed25519PublicKey):
                return False
            key.verify(signature, data)
            return True

        hash_alg = _HASHES[scheme]()

        if scheme in _HMAC:
            if not isinstance(key, bytes):
                return False
            h = hmac.HMAC(key, hash_alg)
            h.update(data)
            h.verify(signature)
            return True

        if scheme in _PKCS1 or scheme in _PSS:
            if not isinstance(key, rsa.RSAPublicKey):
                return False
            pad = padding.PKCS1v15() if scheme in _PKCS1 else _pss(hash_alg)
            key.verify(signature, data, pad, hash_alg)
            return True

        curve_name, size = _ECDSA_CURVES[scheme]
        if not isinstance(key, ec.EllipticCurvePublicKey) or key.curve.name != curve_name:
            return False
        if len(signature) != 2 * size:
            return False
        r = int.from_bytes(signature[:size], "big")
        s = int.from_bytes(signature[size:], "big")
        key.verify(encode_dss_signature(r, s), data, ec.ECDSA(hash_alg))
        return True

    except InvalidSignature:
        return False


def sign_jws(
    header: dict[str, Any] | None,
    payload: bytes,
    jwk: dict[str, Any],
    algorithm: JsonWebAlgorithm,
) -> str:
    """Sign ``payload`` and return the compact JWS.

    The "alg" header member is always set from ``algorithm``; any other
    members of ``header`` are kept as given.

    Raises:
        Unsupported: ``algorithm`` has no signing semantics, or the JWK is
            the wrong key type for it.
        InvalidKeyEncoding: the JWK cannot be turned into a key.
    """
    algorithm = JsonWebAlgorithm(algorithm)
    scheme = signing_scheme(algorithm)

    protected = dict(header or {})
    protected["alg"] = scheme.value

    key = None if scheme == SigningScheme.NONE else jwk_to_key(jwk)

    header_b64 = b64url_encode(json.dumps(protected, separators=(",", ":")).encode())
    payload_b64 = b64url_encode(payload)
    signing_input = f"{header_b64}.{payload_b64}".encode()

    logger.info("sign jws", algorithm=algorithm.value, scheme=scheme.value)
    signature = _sign(scheme, key, signing_input)
    return f"{header_b64}.{payload_b64}.{b64url_encode(signature)}"


def verify_jws(
    token: str,
    jwk: dict[str, Any],
    algorithms: Iterable[JsonWebAlgorithm] | None = None,
) -> tuple[bytes, dict[str, Any]]:
    """Verify a compact JWS and return ``(payload, header)``.

    ``algorithms`` restricts the accepted schemes. Unsecured tokens
    ("alg": "none") are only accepted when "dir" is explicitly allowed.

    Raises:
        SignatureInvalid: malformed token, disallowed algorithm or bad signature.
        InvalidKeyEncoding: the JWK cannot be turned into a key.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise SignatureInvalid("invalid jws format")
    header_b64, payload_b64, signature_b64 = parts

    try:
        header = json.loads(b64url_decode(header_b64))
        payload = b64url_decode(payload_b64)
        signature = b64url_decode(signature_b64)
    except (ValueError, TypeError) as e:
        raise SignatureInvalid("jws segment decode failed") from e

    if not isinstance(header, dict) or "alg" not in header:
        raise SignatureInvalid("missing 'alg' header")

    try:
        scheme = SigningScheme(header["alg"])
    except ValueError:
        raise SignatureInvalid(f"unknown jws algorithm {header['alg']!r}") from None

    allowed = {signing_scheme(alg) for alg in algorithms} if algorithms is not None else None
    if scheme == SigningScheme.NONE and (allowed is None or SigningScheme.NONE not in allowed):
        raise SignatureInvalid("unsecured jws not allowed")
    if allowed is not None and scheme not in allowed:
        raise SignatureInvalid(f"algorithm {scheme.value} not allowed")

    key = None if scheme == SigningScheme.NONE else jwk_to_key(jwk)
    if not _verify(scheme, key, f"{header_b64}.{payload_b64}".encode(), signature):
        logger.warning("jws verification failed", scheme=scheme.value)
        raise SignatureInvalid("signature verification failed")

    return payload, header
