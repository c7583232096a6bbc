"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router as api_router
from app.api.errors import register_exception_handlers
from app.core.config import Settings, settings
from app.core.security import TokenConfig, TokenService


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the application; the token signing config is fixed here, once."""
    app_settings = app_settings or settings

    app = FastAPI(
        title="SmartLedger API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.token_service = TokenService(TokenConfig.from_settings(app_settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if app_settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix=app_settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "SmartLedger API"}

    return app


app = create_app()
