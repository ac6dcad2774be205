"""Request and response schemas for key material operations.

Byte buffers (keys, plaintext, ciphertext) travel as standard base64
strings. Field names are exchanged in camelCase.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from keyforge.core.algorithm_registry import (
    JsonWebAlgorithm,
    JwkeyOperation,
    JwkeyType,
    JwkeyUsage,
    RsaKeySize,
)
from keyforge.core.key_codec import AsymmetricKeyFormat
from keyforge.core.key_generator import EccCurveName, EdwardsCurveName
from keyforge.core.rsa_cipher import DigestKind, PaddingSpec, RsaEncryptionPadding


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ============================================================================
# Key generation
# ============================================================================

class RsaGenerateRequest(CamelModel):
    """RSA key generation request."""
    key_size: int = Field(default=RsaKeySize.RSA_2048, description="Modulus size: 2048, 3072 or 4096")
    format: AsymmetricKeyFormat = Field(default=AsymmetricKeyFormat.PKCS8_PEM)


class EccGenerateRequest(CamelModel):
    """ECC key generation request."""
    curve: EccCurveName = Field(default=EccCurveName.NIST_P256)
    format: AsymmetricKeyFormat = Field(default=AsymmetricKeyFormat.PKCS8_PEM)


class EdwardsGenerateRequest(CamelModel):
    """Edwards-curve key generation request."""
    curve: EdwardsCurveName = Field(default=EdwardsCurveName.ED25519)
    format: AsymmetricKeyFormat = Field(default=AsymmetricKeyFormat.PKCS8_PEM)


class GeneratedKeyResponse(CamelModel):
    private_key: str = Field(..., description="Encoded private key (base64)")
    format: AsymmetricKeyFormat


class DeriveKeyRequest(CamelModel):
    """Public key derivation request."""
    private_key: str = Field(..., description="Encoded private key (base64)")
    format: AsymmetricKeyFormat


class DerivedKeyResponse(CamelModel):
    public_key: str = Field(..., description="Encoded public key (base64)")
    format: AsymmetricKeyFormat


# ============================================================================
# Key transfer
# ============================================================================

class KeyTransferRequest(CamelModel):
    """Re-encode a key pair between formats. Either side may be omitted."""
    private_key: str | None = Field(default=None, description="Private key in `from` format (base64)")
    public_key: str | None = Field(default=None, description="Public key in `from` format (base64)")
    from_: AsymmetricKeyFormat = Field(..., alias="from")
    to: AsymmetricKeyFormat


class KeyTupleResponse(CamelModel):
    """Re-encoded keys; an empty string marks a side that was not requested."""
    private_key: str
    public_key: str


# ============================================================================
# RSA encryption
# ============================================================================

class RsaEncryptionPaddingDto(CamelModel):
    """Padding declaration; digests only apply to OAEP."""
    padding: RsaEncryptionPadding
    digest: DigestKind | None = None
    mgf_digest: DigestKind | None = None

    def to_spec(self) -> PaddingSpec:
        return PaddingSpec(
            padding=self.padding,
            digest=self.digest,
            mgf_digest=self.mgf_digest,
        )


class RsaEncryptionRequest(CamelModel):
    """RSA encrypt / decrypt request."""
    key: str = Field(..., description="Public key to encrypt, private key to decrypt (base64)")
    format: AsymmetricKeyFormat
    padding: RsaEncryptionPaddingDto
    input: str = Field(..., description="Plaintext or ciphertext (base64)")


class RsaEncryptionResponse(CamelModel):
    output: str = Field(..., description="Ciphertext or plaintext (base64)")


# ============================================================================
# JWK / JWS
# ============================================================================

class JwkGenerate(CamelModel):
    """JWK generation request."""
    key_id: str | None = None
    key_type: JwkeyType
    algorithm: JsonWebAlgorithm | None = None
    usage: JwkeyUsage | None = None
    operations: list[JwkeyOperation] | None = None
    bits: int | None = Field(default=None, description="RSA modulus size, required for RSA algorithms")


class JwkResponse(CamelModel):
    jwk: str = Field(..., description="Pretty-printed JWK JSON")


class JwsSignRequest(CamelModel):
    """Compact JWS signing request."""
    header: dict[str, Any] | None = Field(default=None, description="Extra protected header members")
    payload: str = Field(..., description="Payload to sign (base64)")
    jwk: dict[str, Any]
    algorithm: JsonWebAlgorithm


class JwsSignResponse(CamelModel):
    jws: str = Field(..., description="header.payload.signature")


class JwsVerifyRequest(CamelModel):
    """Compact JWS verification request."""
    jws: str
    jwk: dict[str, Any]
    algorithms: list[JsonWebAlgorithm] | None = Field(
        default=None,
        description="Allowed algorithms (None accepts every signing algorithm except dir)",
    )


class JwsVerifyResponse(CamelModel):
    valid: bool
    payload: str = Field(..., description="Verified payload (base64)")
    header: dict[str, Any]
