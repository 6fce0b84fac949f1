import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class Config(BaseModel):
    app_name: str = "Hostel Leave Service"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    version: str = "1.0.0"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./hostel_leave.db")

    # Request context
    request_id_header: str = "X-Request-ID"
    # Identity of the caller, set by the upstream authenticator
    actor_id_header: str = os.getenv("ACTOR_ID_HEADER", "X-Actor-ID")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS: comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

settings = Config()

_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing") and settings.database_url.startswith("sqlite"):
    _logger.warning("Running %s on SQLite; concurrent writers serialize on a single database lock.", settings.environment)
