"""
PPOB API - Digiflazz Client
Signed calls to the Digiflazz prepaid API: price list, order placement, balance.

Every request is signed with md5(username + api_key + suffix). The suffix is
a fixed command string for queries and the order's ref_id for transactions,
so an order signature cannot be replayed for a different ref_id.

Transport errors and non-2xx answers propagate to the caller as httpx
exceptions. There is no retry.
"""
import hashlib
import logging
from datetime import datetime
from typing import Dict, Optional

import httpx

from ppob_api.config import Settings

logger = logging.getLogger(__name__)


class DigiflazzClient:
    PRICE_LIST_PATH = "/price-list"
    TRANSACTION_PATH = "/transaction"
    BALANCE_PATH = "/cek-saldo"

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.username = settings.DIGIFLAZZ_USERNAME
        self.api_key = settings.DIGIFLAZZ_API_KEY
        self.base_url = settings.DIGIFLAZZ_BASE_URL.rstrip("/")
        self.timeout = settings.DIGIFLAZZ_TIMEOUT
        self.testing = settings.DIGIFLAZZ_TESTING
        self._transport = transport

    def sign(self, suffix: str) -> str:
        return hashlib.md5(f"{self.username}{self.api_key}{suffix}".encode()).hexdigest()

    async def _post(self, path: str, body: Dict) -> Dict:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(
                f"{self.base_url}{path}",
                json=body,
                headers={"Content-Type": "application/json"},
            )
            resp.raise_for_status()
            return resp.json()

    async def fetch_price_list(self) -> Dict:
        """Raw prepaid price list, uninterpreted"""
        body = {
            "cmd": "prepaid",
            "username": self.username,
            "sign": self.sign("pricelist"),
        }
        return await self._post(self.PRICE_LIST_PATH, body)

    async def place_order(self, buyer_sku_code: str, customer_no: str, ref_id: str) -> Dict:
        body = {
            "username": self.username,
            "buyer_sku_code": buyer_sku_code,
            "customer_no": customer_no,
            "ref_id": ref_id,
            "sign": self.sign(ref_id),
        }
        if self.testing:
            body["testing"] = True

        logger.info(f"Placing Digiflazz order {ref_id} sku={buyer_sku_code}")
        return await self._post(self.TRANSACTION_PATH, body)

    async def fetch_balance(self) -> Dict:
        body = {
            "cmd": "deposit",
            "username": self.username,
            "sign": self.sign("depo"),
        }
        data = await self._post(self.BALANCE_PATH, body)
        deposit = (data.get("data") or {}).get("deposit")
        if deposit is None:
            raise ValueError("Unexpected balance payload from Digiflazz")
        return {
            "deposit": float(deposit),
            "checked_at": datetime.utcnow().isoformat(),
        }
