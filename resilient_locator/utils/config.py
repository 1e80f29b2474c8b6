# resilient_locator/utils/config.py
from __future__ import annotations

import functools
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# ---------- Enums ----------

class BrowserType(str, Enum):
    chromium = "chromium"
    firefox = "firefox"
    webkit = "webkit"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# ---------- Settings ----------

class Settings(BaseSettings):
    """
    Central configuration for the resilient locator and its scenario runner.

    Values load in this order of precedence:
      1) Environment variables
      2) .env file in project root
      3) Defaults below
    """

    # ---- Wait policy ----
    LOCATOR_TIMEOUT_MS: int = Field(default=15000, ge=0, description="Deadline for one lookup or readiness wait")
    POLL_INTERVAL_MS: int = Field(default=500, ge=1, description="Delay between cascade re-evaluations")

    # ---- Browser configuration ----
    HEADLESS: bool = Field(default=True, description="Run the browser headless")
    BROWSER_TYPE: BrowserType = Field(default=BrowserType.chromium, description="Playwright browser")
    VIEWPORT_WIDTH: int = Field(default=1366, ge=320, le=7680)
    VIEWPORT_HEIGHT: int = Field(default=768, ge=320, le=4320)
    SLOW_MO: int = Field(default=0, ge=0, description="Slow down actions (ms) for debugging")
    PAGE_LOAD_TIMEOUT: int = Field(default=60000, ge=1000)
    BROWSER_ARGS: List[str] = Field(
        default_factory=lambda: ["--start-maximized", "--disable-blink-features=AutomationControlled"],
    )

    # ---- Scenarios ----
    SCENARIOS_DIR: Path = Field(default=Path("./scenarios"))
    BASE_URL: str = Field(default="https://app.cloudqa.io/home/AutomationPracticeForm")

    # ---- Logging ----
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO)
    LOG_TO_FILE: bool = Field(default=False)
    LOG_FILE: Path = Field(default=Path("./resilient-locator.log"))
    COLORIZED_OUTPUT: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("SCENARIOS_DIR", "LOG_FILE", mode="before")
    @classmethod
    def _coerce_to_path(cls, v):
        if isinstance(v, Path):
            return v
        return Path(str(v)) if v is not None else v

    @field_validator("SCENARIOS_DIR", "LOG_FILE", mode="after")
    @classmethod
    def _absolutize(cls, v: Path):
        return v if v.is_absolute() else Path.cwd() / v

    @field_validator("VIEWPORT_WIDTH", "VIEWPORT_HEIGHT")
    @classmethod
    def _viewport_bounds(cls, val: int):
        return max(320, min(val, 10000))

    def ensure_dirs(self) -> None:
        """Create the log directory when file logging is on (idempotent)."""
        if self.LOG_TO_FILE:
            self.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

    # Convenience: Playwright launch options dict
    def playwright_launch_kwargs(self, headless: Optional[bool] = None) -> dict:
        return {
            "headless": self.HEADLESS if headless is None else headless,
            "slow_mo": self.SLOW_MO,
            "args": list(self.BROWSER_ARGS),
        }

    # Convenience: Playwright new_context kwargs
    def playwright_context_kwargs(self) -> dict:
        return {"viewport": {"width": self.VIEWPORT_WIDTH, "height": self.VIEWPORT_HEIGHT}}


# --------- Public accessor (memoized) ---------

@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and cache settings once per process.
    Call `get_settings.cache_clear()` if you need to reload after changing env.
    """
    s = Settings()
    s.ensure_dirs()
    return s
