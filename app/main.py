from fastapi import FastAPI

from app.config import get_settings
from app.infra.logging_config import LoggingConfig
from app.routers.posts_router import posts_router


def create_app(testing: bool = False) -> FastAPI:
    settings = get_settings()
    LoggingConfig()

    app = FastAPI(title=settings.app_name, debug=testing)
    app.include_router(posts_router)

    @app.get("/health", tags=["system"])
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
