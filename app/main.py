from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routers.assistant import router as assistant_router
from app.api.routers.expenses import router as expenses_router
from app.api.routers.itineraries import router as itineraries_router
from app.api.routers.places import router as places_router
from app.api.routers.share import router as share_router
from app.api.routers.trips import router as trips_router
from app.core.error_handlers import register_error_handlers
from app.core.logging import configure_logging
from app.core.repository import MongoDBRepo
from app.core.settings import get_settings

load_dotenv()


def create_app(repo: MongoDBRepo | None = None) -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    application = FastAPI(title="Yatra Planner Backend")

    # CORS: the frontend dev server plus any origins listed in ALLOWED_ORIGINS
    allowed_origins = [
        settings.frontend_url.rstrip("/"),
        "http://localhost:8080",
        "http://127.0.0.1:8080",
    ]
    if settings.allowed_origins:
        allowed_origins.extend(
            [origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()]
        )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(dict.fromkeys(allowed_origins)),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Created lazily by get_repo when not injected
    application.state.repo = repo

    register_error_handlers(application)

    @application.get("/healthz", tags=["health"])
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    application.include_router(trips_router)
    application.include_router(itineraries_router)
    application.include_router(expenses_router)
    application.include_router(places_router)
    application.include_router(assistant_router)
    application.include_router(share_router)
    return application


app = create_app()
