"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..app import Application
from .routes import conversations, costs


# Global application instance
_app: Application | None = None


def get_app() -> Application:
    """Get the global application instance."""
    global _app
    if not _app:
        _app = Application()
    return _app


def set_app(application: Application | None) -> None:
    """Replace the global application instance (tests, embedding)."""
    global _app
    _app = application


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan."""
    application = get_app()
    await application.start()
    yield
    await application.stop()


def create_fastapi_app() -> FastAPI:
    """Create and configure FastAPI application."""
    fastapi_app = FastAPI(
        title="multichat API",
        description="Conversation encoding and cost accounting for multi-model chats",
        version="0.1.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:5174"],  # Vite default
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application = get_app()
    fastapi_app.include_router(conversations.create_conversations_router(application))
    fastapi_app.include_router(costs.create_costs_router(application))

    return fastapi_app
