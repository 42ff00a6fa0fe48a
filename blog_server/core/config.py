# blog_server/core/config.py

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv


class ConfigError(ValueError):
    """Raised when the process configuration cannot produce usable settings."""


def _env_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


def _env_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


# -------------------------------
# Settings
# -------------------------------

@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration, built once at startup and handed to create_app().
    The signing secret lives here and nowhere else.
    """
    access_token_secret: str
    token_algorithm: str = "HS256"
    token_ttl: timedelta = timedelta(hours=20)
    bcrypt_rounds: int = 10
    database_url: str = "sqlite:///./data/app.db"
    db_timeout: float = 10.0
    upload_dir: str = "uploads"
    protect_post_routes: bool = False
    cors_origins: Tuple[str, ...] = ("*",)
    debug: bool = False
    port: int = 4000

    def __post_init__(self):
        if not self.access_token_secret:
            raise ConfigError("ACCESS_TOKEN_SECRET must be set")
        if self.token_ttl <= timedelta(0):
            raise ConfigError("token TTL must be positive")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ConfigError("BCRYPT_ROUNDS must be between 4 and 31")


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Builds Settings from environment variables.
    When no mapping is given, a local .env file is loaded into os.environ first.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    origins = tuple(
        o.strip() for o in env.get("CORS_ORIGINS", "*").split(",") if o.strip()
    )

    return Settings(
        access_token_secret=env.get("ACCESS_TOKEN_SECRET", "").strip(),
        token_algorithm=env.get("JWT_ALGORITHM", "HS256"),
        token_ttl=timedelta(
            hours=_env_number(env, "ACCESS_TOKEN_EXPIRE_HOURS", 20.0, float)
        ),
        bcrypt_rounds=_env_number(env, "BCRYPT_ROUNDS", 10, int),
        database_url=env.get("DATABASE_URL", "sqlite:///./data/app.db"),
        db_timeout=_env_number(env, "DB_TIMEOUT_SECONDS", 10.0, float),
        upload_dir=env.get("UPLOAD_DIR", "uploads"),
        protect_post_routes=_env_bool(env.get("PROTECT_POST_ROUTES"), False),
        cors_origins=origins or ("*",),
        debug=_env_bool(env.get("DEBUG"), False),
        port=_env_number(env, "PORT", 4000, int),
    )
