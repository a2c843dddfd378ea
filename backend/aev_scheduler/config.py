"""
Application configuration from environment variables.
Loads .env from the backend directory so secrets are found regardless of cwd.
DATABASE_URL and SECRET_KEY have no defaults: the process refuses to start without them.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env next to backend/ (parent of aev_scheduler/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    from dotenv import load_dotenv
    load_dotenv(_ENV_FILE, override=False)
else:
    # Fallback: backend/.env relative to cwd (e.g. when running from repo root)
    import os
    _cwd_env = Path(os.getcwd()) / "backend" / ".env"
    if _cwd_env.exists():
        from dotenv import load_dotenv
        load_dotenv(_cwd_env, override=False)


class Settings(BaseSettings):
    """Load and validate config from env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required. sqlite:///./aev_dev.db for local work, postgresql+psycopg2://... in production.
    database_url: str
    secret_key: str

    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24

    # Session token is also accepted as a cookie so browser pages need no Authorization header.
    session_cookie_name: str = "session_token"
    session_cookie_secure: bool = False

    # Six-digit code shown by the login page before the staff sign-up form.
    # UI convenience only: /api/register does not check it.
    staff_registration_code: str = "111111"

    # Password given to bulk-imported students whose row has none.
    bulk_default_password: str = "defaultPassword"

    # CORS: comma-separated origins
    cors_origins: str = "http://localhost:3000"

    debug: bool = False

    @field_validator("database_url", "secret_key")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must be set and non-empty")
        return v.strip()


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings; raises pydantic ValidationError when required vars are missing."""
    return Settings()
