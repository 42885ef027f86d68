from fastapi import FastAPI

from .notifiables import router as notifiables_router
from .notifications import router as notifications_router


def register_routes(app: FastAPI) -> None:
    """Registra todos los routers de la API en la aplicación FastAPI."""

    app.include_router(notifiables_router)
    app.include_router(notifications_router)
