from typing import List, Literal
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_DEFAULT_ORIGINS = "http://localhost:3000"

def split_csv(value: str) -> List[str]:
    """Split a comma-separated setting, trimming entries and dropping blanks."""
    return [item.strip() for item in (value or "").split(",") if item.strip()]

class Settings(BaseSettings):
    # App
    APP_NAME: str = "corsgate"
    APP_ENV: Literal["development", "test", "production"] = "development"
    APP_PORT: int = 8080
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Allow list of origins (comma-separated). Supported shapes:
    #   *, scheme://host[:port], host, *.domain, scheme://prefix*
    CLIENT_ORIGINS: str = DEV_DEFAULT_ORIGINS
    # Used in production when CLIENT_ORIGINS is unset or still the dev default
    PRODUCTION_DEFAULT_ORIGINS: str = ""

    # Realtime
    SOCKET_PATH: str = "/socket.io"

    # Static CORS response configuration (not part of the origin decision)
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: str = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
    CORS_ALLOW_HEADERS: str = "Content-Type,Authorization,X-Requested-With"
    CORS_EXPOSE_HEADERS: str = "X-Request-Id"
    CORS_MAX_AGE: int = 86400
    CORS_PREFLIGHT_STATUS: int = Field(default=204, ge=200, le=299)

    # Meta
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @field_validator("APP_ENV", "LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_case(cls, value, info):
        if isinstance(value, str):
            value = value.strip()
            return value.upper() if info.field_name == "LOG_LEVEL" else value.lower()
        return value

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    def uses_production_defaults(self) -> bool:
        if not self.is_production or not self.PRODUCTION_DEFAULT_ORIGINS.strip():
            return False
        if "CLIENT_ORIGINS" not in self.model_fields_set or not self.CLIENT_ORIGINS.strip():
            return True
        return self.CLIENT_ORIGINS.strip() == DEV_DEFAULT_ORIGINS

    def allowed_origins(self) -> List[str]:
        """Return the effective allow-list entries for this deployment mode."""
        if self.uses_production_defaults():
            return split_csv(self.PRODUCTION_DEFAULT_ORIGINS)
        return split_csv(self.CLIENT_ORIGINS)

settings = Settings()
