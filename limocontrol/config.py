# limocontrol/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices


class Settings(BaseSettings):
    # read .env, ignore unknown keys
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # no URL -> in-memory store
    DATABASE_URL: str | None = None

    # JWT
    JWT_SECRET: str = Field(
        default="change-me",
        validation_alias=AliasChoices("JWT_SECRET", "SECRET_KEY"),
    )
    JWT_TTL_SEC: int = 60 * 60 * 8
    JWT_ALG: str = "HS256"

    # Passwords
    BCRYPT_ROUNDS: int = 8
    DEFAULT_RESET_PASSWORD: str = "admin"

    # Seeding
    SEED_ADMIN_EMAIL: str = "admin@limo.local"
    SEED_ADMIN_PASSWORD: str = "admin"
    SEED_DEMO_DATA: bool = False

    # CORS
    ALLOWED_ORIGINS: str = "*"

    LOG_LEVEL: str = "INFO"

    @property
    def allowed_origins(self) -> list[str]:
        origins = [o.strip() for o in (self.ALLOWED_ORIGINS or "").split(",") if o.strip()]
        return origins or ["*"]


settings = Settings()
