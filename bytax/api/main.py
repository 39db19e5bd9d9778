from fastapi import FastAPI

from bytax.api.routes_health import router as health_router
from bytax.api.routes_tax import router as tax_router
from bytax.core.config import settings
from bytax.core.errors import register_error_handlers
from bytax.core.logger import init_logging


def create_app() -> FastAPI:
    init_logging()
    app = FastAPI(title=settings.APP_NAME)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(tax_router)
    return app


app = create_app()
