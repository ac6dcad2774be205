"""JOSE (JWK, JWS) API routes."""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from keyforge.api.keys import decode_b64, encode_b64
from keyforge.config import Settings, get_settings
from keyforge.core.jwk_generator import JwkGenerator
from keyforge.core.jws import sign_jws, verify_jws
from keyforge.schemas.keys import (
    JwkGenerate,
    JwkResponse,
    JwsSignRequest,
    JwsSignResponse,
    JwsVerifyRequest,
    JwsVerifyResponse,
)

router = APIRouter(prefix="/jose", tags=["jose"])


def get_jwk_generator(
    settings: Annotated[Settings, Depends(get_settings)],
) -> JwkGenerator:
    return JwkGenerator(rsa_public_exponent=settings.rsa_public_exponent)


@router.post("/jwk", response_model=JwkResponse)
async def generate_jwk(
    data: JwkGenerate,
    generator: Annotated[JwkGenerator, Depends(get_jwk_generator)],
):
    """Generate a JSON Web Key.

    The algorithm decides the key family and size; RSA algorithms need
    ``bits`` (2048, 3072 or 4096). Without an algorithm the key type's
    default is used and no "alg" member is written.
    """
    jwk = await asyncio.to_thread(
        generator.generate,
        data.key_type,
        data.algorithm,
        data.key_id,
        data.usage,
        data.operations,
        data.bits,
    )
    return JwkResponse(jwk=jwk)


@router.post("/jws/sign", response_model=JwsSignResponse)
async def create_jws(data: JwsSignRequest):
    """Create a JWS in compact serialization (header.payload.signature).

    Supported algorithms: HS*, RS*, PS*, ES256/ES384/ES521/ES256K, EdDSA,
    and dir (unsecured, "alg": "none").
    """
    payload = decode_b64(data.payload, "payload")
    jws = await asyncio.to_thread(sign_jws, data.header, payload, data.jwk, data.algorithm)
    return JwsSignResponse(jws=jws)


@router.post("/jws/verify", response_model=JwsVerifyResponse)
async def check_jws(data: JwsVerifyRequest):
    """Verify a compact JWS and return its payload.

    Pass ``algorithms`` to prevent algorithm confusion.
    """
    payload, header = await asyncio.to_thread(verify_jws, data.jws, data.jwk, data.algorithms)
    return JwsVerifyResponse(valid=True, payload=encode_b64(payload), header=header)
