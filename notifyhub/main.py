from contextlib import asynccontextmanager

from fastapi import FastAPI

from notifyhub.config import get_settings
from notifyhub.infrastructure.database import engine, initialize_database
from notifyhub.infrastructure.discovery import notifiable_discovery
from notifyhub.infrastructure.notifications import register_logging_listener
from notifyhub.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Inicializa la base de datos y el registro de destinatarios al arrancar."""

    settings = get_settings()
    if settings.notifiables_file is not None:
        notifiable_discovery.configure(settings.notifiables_file)
        notifiable_discovery.get_notifiables()
    register_logging_listener()
    initialize_database()
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    app = FastAPI(title="notifyhub", lifespan=lifespan)
    register_routes(app)
    return app


app = create_app()
