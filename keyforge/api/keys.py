"""Asymmetric key API routes.

Generation, public key derivation, format transfer and RSA
encryption / decryption. CPU-bound work runs in a worker thread.
"""

import asyncio
import base64
import binascii
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from keyforge.config import Settings, get_settings
from keyforge.core.key_generator import KeyPairGenerator
from keyforge.core.key_transfer import transfer_key
from keyforge.core.rsa_cipher import RsaEncryptionDto, decrypt_rsa_request, encrypt_rsa_request
from keyforge.schemas.keys import (
    DeriveKeyRequest,
    DerivedKeyResponse,
    EccGenerateRequest,
    EdwardsGenerateRequest,
    GeneratedKeyResponse,
    KeyTransferRequest,
    KeyTupleResponse,
    RsaEncryptionRequest,
    RsaEncryptionResponse,
    RsaGenerateRequest,
)

router = APIRouter(prefix="/keys", tags=["keys"])


def decode_b64(value: str, field: str) -> bytes:
    """Decode a standard base64 request field, 400 on failure."""
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid base64 in {field}",
        )


def encode_b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def get_key_pair_generator(
    settings: Annotated[Settings, Depends(get_settings)],
) -> KeyPairGenerator:
    return KeyPairGenerator(rsa_public_exponent=settings.rsa_public_exponent)


# ============================================================================
# Generation
# ============================================================================

@router.post("/rsa/generate", response_model=GeneratedKeyResponse)
async def generate_rsa(
    data: RsaGenerateRequest,
    generator: Annotated[KeyPairGenerator, Depends(get_key_pair_generator)],
):
    """Generate an RSA private key in the requested format."""
    with await asyncio.to_thread(generator.generate_rsa, data.key_size, data.format) as key:
        return GeneratedKeyResponse(private_key=encode_b64(bytes(key)), format=data.format)


@router.post("/ecc/generate", response_model=GeneratedKeyResponse)
async def generate_ecc(
    data: EccGenerateRequest,
    generator: Annotated[KeyPairGenerator, Depends(get_key_pair_generator)],
):
    """Generate an EC private key. PKCS#1 formats are rejected for EC keys."""
    with await asyncio.to_thread(generator.generate_ecc, data.curve, data.format) as key:
        return GeneratedKeyResponse(private_key=encode_b64(bytes(key)), format=data.format)


@router.post("/edwards/generate", response_model=GeneratedKeyResponse)
async def generate_edwards(
    data: EdwardsGenerateRequest,
    generator: Annotated[KeyPairGenerator, Depends(get_key_pair_generator)],
):
    """Generate an Ed25519 or X25519 private key."""
    with await asyncio.to_thread(generator.generate_edwards, data.curve, data.format) as key:
        return GeneratedKeyResponse(private_key=encode_b64(bytes(key)), format=data.format)


@router.post("/derive", response_model=DerivedKeyResponse)
async def derive_public_key(
    data: DeriveKeyRequest,
    generator: Annotated[KeyPairGenerator, Depends(get_key_pair_generator)],
):
    """Derive the public key of an encoded private key, in the same format."""
    private_key = decode_b64(data.private_key, "privateKey")
    public_key = await asyncio.to_thread(generator.derive_public_key, private_key, data.format)
    return DerivedKeyResponse(public_key=encode_b64(public_key), format=data.format)


# ============================================================================
# Transfer
# ============================================================================

@router.post("/transfer", response_model=KeyTupleResponse)
async def transfer(data: KeyTransferRequest):
    """Re-encode a private and/or public key from one format to another.

    Omitted sides come back as empty strings.
    """
    private_key = decode_b64(data.private_key, "privateKey") if data.private_key is not None else None
    public_key = decode_b64(data.public_key, "publicKey") if data.public_key is not None else None

    result = await asyncio.to_thread(transfer_key, private_key, public_key, data.from_, data.to)
    return KeyTupleResponse(
        private_key=encode_b64(result.private_key),
        public_key=encode_b64(result.public_key),
    )


# ============================================================================
# RSA encryption
# ============================================================================

def _rsa_request(data: RsaEncryptionRequest) -> RsaEncryptionDto:
    return RsaEncryptionDto(
        key=decode_b64(data.key, "key"),
        format=data.format,
        padding=data.padding.to_spec(),
        input=decode_b64(data.input, "input"),
    )


@router.post("/rsa/encrypt", response_model=RsaEncryptionResponse)
async def encrypt_rsa(data: RsaEncryptionRequest):
    """Encrypt with an RSA public key.

    OAEP digests default to SHA-256; PKCS#1 v1.5 ignores them.
    """
    output = await asyncio.to_thread(encrypt_rsa_request, _rsa_request(data))
    return RsaEncryptionResponse(output=encode_b64(output))


@router.post("/rsa/decrypt", response_model=RsaEncryptionResponse)
async def decrypt_rsa(data: RsaEncryptionRequest):
    """Decrypt with an RSA private key."""
    output = await asyncio.to_thread(decrypt_rsa_request, _rsa_request(data))
    return RsaEncryptionResponse(output=encode_b64(output))
