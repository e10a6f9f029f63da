"""
Application configuration from environment variables.
Loads .env from the backend directory so secrets are found regardless of cwd.
"""
import os
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production"

# Strategies understood by services.ranking.get_ranking_strategy
RANKING_STRATEGIES = frozenset({"random", "profile"})

# .env next to backend/ (parent of alumni_connect/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    from dotenv import load_dotenv
    load_dotenv(_ENV_FILE, override=False)
else:
    # Fallback: backend/.env relative to cwd (e.g. when running from repo root)
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

    # Database: sqlite for local work and tests, postgresql for production
    database_url: str = "sqlite:///./alumni_dev.db"

    # Environment: set ENV=production in production; used to enforce SECRET_KEY.
    env: str = ""

    # JWT. Tokens live 7 days, same as the web client expects.
    secret_key: str = DEFAULT_SECRET_KEY
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24 * 7

    # CORS: comma-separated origins
    cors_origins: str = "http://localhost:5173"

    # Match scores and suggestion order: "random" (default) or "profile" (deterministic)
    ranking_strategy: str = "random"
    # Candidates fetched before the ranking strategy picks the top `limit` suggestions
    suggestion_pool_size: int = 200

    default_page_size: int = 20
    max_page_size: int = 100

    debug: bool = False

    @field_validator("ranking_strategy", mode="before")
    @classmethod
    def _normalize_strategy(cls, v: str) -> str:
        s = (v or "random").strip().lower() if isinstance(v, str) else "random"
        if s not in RANKING_STRATEGIES:
            raise ValueError(f"ranking_strategy must be one of {sorted(RANKING_STRATEGIES)}")
        return s

    @property
    def is_production(self) -> bool:
        return (self.env or "").strip().lower() == "production"


settings = Settings()
