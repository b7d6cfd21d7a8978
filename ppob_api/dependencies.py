"""
PPOB API - Dependencies
Per-request access to the objects create_app puts on app.state
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ppob_api.config import Settings
from ppob_api.database import get_db
from ppob_api.services.digiflazz import DigiflazzClient
from ppob_api.services.order_service import OrderService
from ppob_api.services.token_service import TokenService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_digiflazz_client(request: Request) -> DigiflazzClient:
    return request.app.state.digiflazz


def get_token_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TokenService:
    return TokenService(db, settings)


def get_order_service(
    db: Session = Depends(get_db),
    client: DigiflazzClient = Depends(get_digiflazz_client),
) -> OrderService:
    return OrderService(db, client)
