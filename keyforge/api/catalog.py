"""Catalog API routes.

Lists the closed value sets the front end builds its selectors from.
"""

from fastapi import APIRouter, Query

from keyforge.core.algorithm_registry import (
    JwkeyOperation,
    JwkeyType,
    RsaKeySize,
    algorithms_for,
    usages_for,
)
from keyforge.core.key_codec import AsymmetricKeyFormat
from keyforge.core.key_generator import EccCurveName, EdwardsCurveName
from keyforge.core.rsa_cipher import DigestKind, RsaEncryptionPadding

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/digests", response_model=list[str])
async def list_digests():
    return [d.value for d in DigestKind]


@router.get("/rsa-key-sizes", response_model=list[int])
async def list_rsa_key_sizes():
    return [int(size) for size in RsaKeySize]


@router.get("/paddings", response_model=list[str])
async def list_paddings():
    return [p.value for p in RsaEncryptionPadding]


@router.get("/formats", response_model=list[str])
async def list_formats():
    return [f.value for f in AsymmetricKeyFormat]


@router.get("/ecc-curves", response_model=list[str])
async def list_ecc_curves():
    return [c.value for c in EccCurveName]


@router.get("/edwards-curves", response_model=list[str])
async def list_edwards_curves():
    return [c.value for c in EdwardsCurveName]


@router.get("/jwk/key-types", response_model=list[str])
async def list_jwk_key_types():
    return [t.value for t in JwkeyType]


@router.get("/jwk/algorithms", response_model=list[str])
async def list_jwk_algorithms(
    key_type: JwkeyType = Query(..., alias="keyType", description="Key family"),
):
    """Algorithms offered for a key family, in display order."""
    return [a.value for a in algorithms_for(key_type)]


@router.get("/jwk/usages", response_model=list[str])
async def list_jwk_usages(
    key_type: JwkeyType = Query(..., alias="keyType", description="Key family"),
):
    """Usages a key family can carry."""
    return [u.value for u in usages_for(key_type)]


@router.get("/jwk/operations", response_model=list[str])
async def list_jwk_operations():
    return [op.value for op in JwkeyOperation]
