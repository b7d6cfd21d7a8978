"""
PPOB API - Main API Entry Point
FastAPI application with JWT auth, Digiflazz orders and webhook reconciliation
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ppob_api.config import Settings
from ppob_api.database import build_engine, build_session_factory, init_db
from ppob_api.exceptions import AppError
from ppob_api.models.user import Role, User, UserStatus
from ppob_api.routers import auth, branches, digiflazz, nasabah, products, reports, transactions, users, webhook
from ppob_api.services.digiflazz import DigiflazzClient
from ppob_api.services.password import hash_password

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_admin(app: FastAPI):
    """Create the configured admin account if it does not exist yet"""
    settings: Settings = app.state.settings
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return

    db = app.state.session_factory()
    try:
        if db.query(User).filter(User.email == settings.ADMIN_EMAIL).first():
            return
        db.add(User(
            username=settings.ADMIN_USERNAME,
            email=settings.ADMIN_EMAIL,
            password_hash=hash_password(settings.ADMIN_PASSWORD, settings.BCRYPT_SALT_ROUNDS),
            role=Role.ADMIN,
            status=UserStatus.VERIFIED,
        ))
        db.commit()
        logger.info(f"Seeded admin account {settings.ADMIN_EMAIL}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    seed_admin(app)
    logger.info(f"{app.state.settings.APP_NAME} started")
    yield
    app.state.engine.dispose()


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Invalid request", "errors": errors},
        )

    # Global error handler for crash protection
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": str(exc) if app.state.settings.DEBUG else "Internal server error",
            },
        )


def create_app(settings: Optional[Settings] = None, digiflazz_client: Optional[DigiflazzClient] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="PPOB API with Digiflazz integration",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    engine = build_engine(settings.DATABASE_URL)
    init_db(engine)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.digiflazz = digiflazz_client or DigiflazzClient(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router, prefix="/auth", tags=["Auth"])
    app.include_router(users.router, prefix="/users", tags=["Users"])
    app.include_router(products.router, prefix="/products", tags=["Products"])
    app.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])
    app.include_router(digiflazz.router, prefix="/digiflazz", tags=["Digiflazz"])
    app.include_router(webhook.router, tags=["Digiflazz Webhook"])
    app.include_router(branches.router, prefix="/api/branch", tags=["Branch"])
    app.include_router(nasabah.router, prefix="/api/nasabah", tags=["Nasabah"])
    app.include_router(reports.router, prefix="/reports", tags=["Reports"])

    register_exception_handlers(app)

    @app.get("/")
    async def root():
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "online",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("ppob_api.main:create_app", factory=True, host="0.0.0.0", port=Settings().PORT)
