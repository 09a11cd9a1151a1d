import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False

    # Generative service
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Remote lead store (unset = remote disabled)
    DATABASE_URL: Optional[str] = None

    # Local usage store (unset = in-memory)
    LOCAL_STORE_DIR: Optional[str] = None

    # Usage policy
    FREE_USES_PER_FEATURE: int = 1
    DEFAULT_LEAD_LIMIT: int = 1

    # Upload caps
    MAX_REMIX_VIDEO_BYTES: int = 30 * 1024 * 1024

    # Studio sessions kept in memory
    SESSION_IDLE_SECONDS: int = 3600
    MAX_SESSIONS: int = 1000

    # Admin access
    ADMIN_KEY: Optional[str] = None
    ENVIRONMENT: str = "dev"  # "dev" | "test" | "prod"

    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate required configuration.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    Secrets are not logged, only missing keys.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("codeprompt")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    required_keys = [
        "GEMINI_API_KEY",
    ]

    missing = [key for key in required_keys if not getattr(cfg, key, None)]
    if missing:
        message = f"Missing required configuration: {', '.join(missing)}"
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)

    if not getattr(cfg, "DATABASE_URL", None):
        log.info("DATABASE_URL not set; remote lead store disabled, usage is tracked locally only")

    return True


@dataclass(frozen=True)
class RemoteStoreEnabled:
    database_url: str


@dataclass(frozen=True)
class RemoteStoreDisabled:
    """Documented variant for deployments without a lead database."""


REMOTE_DISABLED = RemoteStoreDisabled()

RemoteStore = Union[RemoteStoreEnabled, RemoteStoreDisabled]


@dataclass(frozen=True)
class UsagePolicy:
    free_uses_per_feature: int = 1
    default_lead_limit: int = 1


@dataclass(frozen=True)
class GenerationConfig:
    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash"


@dataclass(frozen=True)
class StudioConfig:
    """Explicit startup configuration handed to the access gate and adapter."""

    generation: GenerationConfig = field(default_factory=GenerationConfig)
    usage: UsagePolicy = field(default_factory=UsagePolicy)
    remote: RemoteStore = REMOTE_DISABLED
    local_store_dir: Optional[str] = None
    max_remix_video_bytes: int = 30 * 1024 * 1024
    session_idle_seconds: int = 3600
    max_sessions: int = 1000

    @property
    def remote_enabled(self) -> bool:
        return isinstance(self.remote, RemoteStoreEnabled)


def build_studio_config(settings_obj: Optional[Settings] = None) -> StudioConfig:
    cfg = settings_obj or settings
    remote: RemoteStore = REMOTE_DISABLED
    if cfg.DATABASE_URL:
        remote = RemoteStoreEnabled(database_url=cfg.DATABASE_URL)
    return StudioConfig(
        generation=GenerationConfig(api_key=cfg.GEMINI_API_KEY, model=cfg.GEMINI_MODEL),
        usage=UsagePolicy(
            free_uses_per_feature=cfg.FREE_USES_PER_FEATURE,
            default_lead_limit=cfg.DEFAULT_LEAD_LIMIT,
        ),
        remote=remote,
        local_store_dir=cfg.LOCAL_STORE_DIR,
        max_remix_video_bytes=cfg.MAX_REMIX_VIDEO_BYTES,
        session_idle_seconds=cfg.SESSION_IDLE_SECONDS,
        max_sessions=cfg.MAX_SESSIONS,
    )
