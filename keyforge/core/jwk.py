"""JSON Web Key conversions (RFC 7517 / RFC 7518 section 6).

Converts between cryptography key objects and JWK dictionaries:
- RSA       kty=RSA  n, e [, d, p, q, dp, dq, qi]
- EC        kty=EC   crv (P-256, P-384, P-521, secp256k1), x, y [, d]
- Ed25519   kty=OKP  crv=Ed25519, x [, d]
- X25519    kty=OKP  crv=X25519, x [, d]
- octet     kty=oct  k
"""

import base64
from typing import Any

from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa, x25519

from keyforge.core.errors import InvalidKeyEncoding, Unsupported

# JWK curve name -> (curve class, coordinate size in bytes)
EC_CURVES: dict[str, tuple[type[ec.EllipticCurve], int]] = {
    "P-256": (ec.SECP256R1, 32),
    "P-384": (ec.SECP384R1, 48),
    "P-521": (ec.SECP521R1, 66),
    "secp256k1": (ec.SECP256K1, 32),
}

_CURVE_NAMES = {curve.name: crv for crv, (curve, _) in EC_CURVES.items()}


def b64url_encode(data: bytes) -> str:
    """Base64url encode without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(data: str) -> bytes:
    """Base64url decode with padding restoration."""
    padding = 4 - len(data) % 4
    if padding != 4:
        data += "=" * padding
    return base64.urlsafe_b64decode(data)


def _uint(value: int, size: int | None = None) -> str:
    if size is None:
        size = max((value.bit_length() + 7) // 8, 1)
    return b64url_encode(value.to_bytes(size, "big"))


def _int(jwk: dict, member: str) -> int:
    try:
        return int.from_bytes(b64url_decode(jwk[member]), "big")
    except KeyError:
        raise InvalidKeyEncoding(f"jwk is missing '{member}'") from None


def octet_jwk(secret: bytes | bytearray) -> dict[str, Any]:
    return {"kty": "oct", "k": b64url_encode(bytes(secret))}


def _ec_curve_name(curve: ec.EllipticCurve) -> tuple[str, int]:
    try:
        crv = _CURVE_NAMES[curve.name]
    except KeyError:
        raise Unsupported(curve.name, "curve has no JWK name") from None
    return crv, EC_CURVES[crv][1]


def public_key_to_jwk(key: Any) -> dict[str, Any]:
    """JWK for a public key (a private key is reduced to its public half)."""
    if hasattr(key, "private_bytes"):
        key = key.public_key()

    if isinstance(key, rsa.RSAPublicKey):
        numbers = key.public_numbers()
        return {"kty": "RSA", "n": _uint(numbers.n), "e": _uint(numbers.e)}

    if isinstance(key, ec.EllipticCurvePublicKey):
        crv, size = _ec_curve_name(key.curve)
        numbers = key.public_numbers()
        return {
            "kty": "EC",
            "crv": crv,
            "x": _uint(numbers.x, size),
            "y": _uint(numbers.y, size),
        }

    if isinstance(key, ed25519.Ed25519PublicKey):
        return {"kty": "OKP", "crv": "Ed25519", "x": b64url_encode(key.public_bytes_raw())}

    if isinstance(key, x25519.X25519PublicKey):
        return {"kty": "OKP", "crv": "X25519", "x": b64url_encode(key.public_bytes_raw())}

    raise Unsupported(type(key).__name__, "no JWK representation")


def private_key_to_jwk(key: Any) -> dict[str, Any]:
    """JWK carrying both public and private members."""
    jwk = public_key_to_jwk(key)

    if isinstance(key, rsa.RSAPrivateKey):
        numbers = key.private_numbers()
        jwk.update({
            "d": _uint(numbers.d),
            "p": _uint(numbers.p),
            "q": _uint(numbers.q),
            "dp": _uint(numbers.dmp1),
            "dq": _uint(numbers.dmq1),
            "qi": _uint(numbers.iqmp),
        })
    elif isinstance(key, ec.EllipticCurvePrivateKey):
        _, size = _ec_curve_name(key.curve)
        jwk["d"] = _uint(key.private_numbers().private_value, size)
    elif isinstance(key, (ed25519.Ed25519PrivateKey, x25519.X25519PrivateKey)):
        jwk["d"] = b64url_encode(key.private_bytes_raw())
    else:
        raise Unsupported(type(key).__name__, "not a private key")

    return jwk


def jwk_to_key(jwk: dict[str, Any]) -> Any:
    """Key object for a JWK dict; octet keys come back as bytes.

    Raises:
        InvalidKeyEncoding: members missing or inconsistent.
        Unsupported: unknown kty or curve.
    """
    kty = jwk.get("kty")

    try:
        if kty == "oct":
            if "k" not in jwk:
                raise InvalidKeyEncoding("jwk is missing 'k'")
            return b64url_decode(jwk["k"])

        if kty == "RSA":
            public_numbers = rsa.RSAPublicNumbers(_int(jwk, "e"), _int(jwk, "n"))
            if "d" not in jwk:
                return public_numbers.public_key()
            d = _int(jwk, "d")
            if "p" in jwk and "q" in jwk:
                p, q = _int(jwk, "p"), _int(jwk, "q")
            else:
                p, q = rsa.rsa_recover_prime_factors(public_numbers.n, public_numbers.e, d)
            return rsa.RSAPrivateNumbers(
                p=p,
                q=q,
                d=d,
                dmp1=rsa.rsa_crt_dmp1(d, p),
                dmq1=rsa.rsa_crt_dmq1(d, q),
                iqmp=rsa.rsa_crt_iqmp(p, q),
                public_numbers=public_numbers,
            ).private_key()

        if kty == "EC":
            crv = jwk.get("crv")
            if crv not in EC_CURVES:
                raise Unsupported(str(crv), "unknown EC curve")
            curve_cls, _ = EC_CURVES[crv]
            public_numbers = ec.EllipticCurvePublicNumbers(
                _int(jwk, "x"), _int(jwk, "y"), curve_cls()
            )
            if "d" in jwk:
                return ec.EllipticCurvePrivateNumbers(_int(jwk, "d"), public_numbers).private_key()
            return public_numbers.public_key()

        if kty == "OKP":
            crv = jwk.get("crv")
            if crv == "Ed25519":
                private_cls, public_cls = ed25519.Ed25519PrivateKey, ed25519.Ed25519PublicKey
            elif crv == "X25519":
                private_cls, public_cls = x25519.X25519PrivateKey, x25519.X25519PublicKey
            else:
                raise Unsupported(str(crv), "unknown OKP curve")
            if "d" in jwk:
                return private_cls.from_private_bytes(b64url_decode(jwk["d"]))
            if "x" not in jwk:
                raise InvalidKeyEncoding("jwk is missing 'x'")
            return public_cls.from_public_bytes(b64url_decode(jwk["x"]))

    except (ValueError, TypeError) as e:
        raise InvalidKeyEncoding(f"init {str(kty).lower()} jwk failed") from e

    raise Unsupported(str(kty), "unknown JWK key type")
