"""
PPOB API - Digiflazz Router
Pass-through price list and deposit balance
"""
import logging

from fastapi import APIRouter, Depends

from ppob_api.dependencies import get_digiflazz_client
from ppob_api.exceptions import ProviderError
from ppob_api.middleware.auth import AuthContext, authenticate, require_admin
from ppob_api.services.digiflazz import DigiflazzClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/pricelist")
async def fetch_price_list(
    auth: AuthContext = Depends(authenticate),
    client: DigiflazzClient = Depends(get_digiflazz_client),
):
    try:
        return await client.fetch_price_list()
    except Exception as e:
        logger.error(f"Digiflazz price list failed: {e}")
        raise ProviderError("Failed to fetch price list") from e


@router.get("/balance")
async def fetch_balance(
    admin: AuthContext = Depends(require_admin),
    client: DigiflazzClient = Depends(get_digiflazz_client),
):
    try:
        return await client.fetch_balance()
    except Exception as e:
        logger.error(f"Digiflazz balance check failed: {e}")
        raise ProviderError("Failed to fetch balance") from e
