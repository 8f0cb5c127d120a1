"""Application settings loaded from environment variables."""

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta

logger = logging.getLogger(__name__)

# Fallback signing secret. Guessable; kept so a bare checkout still runs,
# and always reported at startup.
DEFAULT_JWT_SECRET = "secret"


@dataclass(frozen=True)
class Settings:
    mongo_url: str = "mongodb://localhost:27017"
    database_name: str = "simple-app"
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expiration: timedelta = field(default=timedelta(hours=1))
    bcrypt_rounds: int = 12
    cors_origins: str = "http://localhost:5173"
    log_level: str = "INFO"
    port: int = 3001

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret_key == DEFAULT_JWT_SECRET

    @classmethod
    def from_env(cls) -> "Settings":
        settings = cls(
            mongo_url=os.getenv("MONGO_URL", cls.mongo_url),
            database_name=os.getenv("MONGODB_DATABASE", cls.database_name),
            jwt_secret_key=os.getenv("JWT_SECRET_KEY") or DEFAULT_JWT_SECRET,
            jwt_expiration=timedelta(minutes=int(os.getenv("JWT_EXPIRATION_MINUTES", "60"))),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
            cors_origins=os.getenv("CORS_ORIGINS", cls.cors_origins),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            port=int(os.getenv("PORT", "3001")),
        )
        if settings.uses_default_secret:
            logger.warning(
                "JWT_SECRET_KEY not set, signing tokens with the built-in default secret. "
                "Generate a secure key with: openssl rand -hex 32"
            )
        return settings
