import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from parceldesk.infrastructure.config import Settings, settings
from parceldesk.infrastructure.logger_config import configure_logging
from parceldesk.presentation import auth
from parceldesk.presentation.exception_handlers import register_exception_handlers
from parceldesk.presentation.routers import router
from parceldesk.services.parceldesk_service import build_context


def create_app(app_settings: Settings | None = None) -> FastAPI:
    app_settings = app_settings or settings
    configure_logging(app_settings.log_level)

    app = FastAPI(title="parceldesk")
    app.state.settings = app_settings
    app.state.context = build_context(app_settings)

    @app.on_event("startup")
    def _load_reservations_on_startup() -> None:
        """
        On startup load the persisted reservation document into the in-memory store
        """
        app.state.context.reservation_repo.load()

    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.session_secret,
        max_age=app_settings.session_max_age,
    )
    register_exception_handlers(app)
    app.include_router(router)
    app.include_router(auth.router)
    app.mount("/uploads", StaticFiles(directory=app_settings.uploads_dir), name="uploads")
    return app


# Built on demand so importing this module touches no data directory:
#   uvicorn --factory parceldesk.main:create_app
if __name__ == "__main__":
    uvicorn.run(create_app(), host=settings.host, port=settings.port)
