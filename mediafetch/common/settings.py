# mediafetch/common/settings.py
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    prefix: str = "/api"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["GET", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = False

    # uvicorn auto-reload for local development only
    reload: bool = False

    # how often the disconnect watcher polls while an extraction is running
    disconnect_poll_sec: float = Field(0.5, gt=0)

    @field_validator("cors_allow_credentials", "reload", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v)


class YtDlpConfig(BaseModel):
    bin: str = "yt-dlp"
    timeout_sec: int = Field(120, ge=1)
    poll_interval_sec: float = Field(0.25, gt=0)
    terminate_grace_sec: float = Field(5.0, ge=0)
    check_all_formats: bool = True
    extra_args: List[str] = Field(default_factory=list)
    stream_chunk_size: int = Field(64 * 1024, ge=1024)

    @field_validator("check_all_formats", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v, default=True)


class CacheConfig(BaseModel):
    ttl_sec: float = Field(30 * 60, gt=0)
    # None -> 4 x ttl
    sweep_interval_sec: Optional[float] = Field(None, gt=0)

    @computed_field  # type: ignore[misc]
    @property
    def effective_sweep_interval_sec(self) -> float:
        if self.sweep_interval_sec:
            return self.sweep_interval_sec
        return self.ttl_sec * 4


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "mediafetch"
    app_env: str = "development"  # development|test|staging|production
    log_level: str = "INFO"

    # -------- Format policy --------
    preferred_video_ext: str = "mp4"

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    ytdlp: YtDlpConfig = YtDlpConfig()
    cache: CacheConfig = CacheConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("preferred_video_ext", mode="before")
    @classmethod
    def _strip_dot(cls, v):
        return str(v or "").strip().lstrip(".").lower()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from mediafetch.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()  # pydantic_settings will read from .env automatically
