"""Pydantic schemas for keyforge."""

from keyforge.schemas.keys import (
    DeriveKeyRequest,
    DerivedKeyResponse,
    EccGenerateRequest,
    EdwardsGenerateRequest,
    GeneratedKeyResponse,
    JwkGenerate,
    JwkResponse,
    JwsSignRequest,
    JwsSignResponse,
    JwsVerifyRequest,
    JwsVerifyResponse,
    KeyTransferRequest,
    KeyTupleResponse,
    RsaEncryptionPaddingDto,
    RsaEncryptionRequest,
    RsaEncryptionResponse,
    RsaGenerateRequest,
    to_camel,
)

__all__ = [
    "DeriveKeyRequest",
    "DerivedKeyResponse",
    "EccGenerateRequest",
    "EdwardsGenerateRequest",
    "GeneratedKeyResponse",
    "JwkGenerate",
    "JwkResponse",
    "JwsSignRequest",
    "JwsSignResponse",
    "JwsVerifyRequest",
    "JwsVerifyResponse",
    "KeyTransferRequest",
    "KeyTupleResponse",
    "RsaEncryptionPaddingDto",
    "RsaEncryptionRequest",
    "RsaEncryptionResponse",
    "RsaGenerateRequest",
    "to_camel",
]
