import os

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    aisuite_model: str = os.getenv("AISUITE_MODEL", "openai:gpt-4o-mini")
    google_places_api_key: str = os.getenv("GOOGLE_PLACES_API_KEY", "")
    # Pause between successive Places lookups to stay under the API quota
    places_lookup_delay_seconds: float = float(os.getenv("PLACES_LOOKUP_DELAY_SECONDS", "0.1"))
    mongodb_uri: str = os.getenv("MONGODB_URI", "")
    database_name: str = os.getenv("DATABASE_NAME", "yatra_planner")
    jwt_secret_key: str = os.getenv("JWT_SECRET_KEY", "")
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:8080")
    allowed_origins: str = os.getenv("ALLOWED_ORIGINS", "")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = os.getenv("LOG_FORMAT", "text")
    # TrueType font for PDF export, e.g. a Noto Sans Devanagari file; Pillow default otherwise
    pdf_font_path: str = os.getenv("PDF_FONT_PATH", "")


def get_settings() -> Settings:
    return Settings()
