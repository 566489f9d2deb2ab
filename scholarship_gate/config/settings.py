# scholarship_gate/config/settings.py

from datetime import date
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROTECTED_TABLES = ["students", "scholarships", "applications", "reviewers"]


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "scholarship-gate"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "0.1.0"

    # --- Database ---
    database_url: str = "sqlite+aiosqlite:///./scholarship_gate.db"

    # --- Access policy ---
    policy_timezone: str = "UTC"
    # Seed for the restricted-date calendar (JSON list in the environment).
    holiday_dates: List[date] = Field(
        default_factory=lambda: [date(2025, 6, 1), date(2025, 6, 15)]
    )
    # "YYYY" or "YYYY-MM"; when set only holidays inside it are restricted.
    holiday_scope: Optional[str] = None
    protected_resources: List[str] = Field(default_factory=lambda: list(PROTECTED_TABLES))

    # --- Audit ---
    audit_lookback_days: int = Field(7, ge=1)
    # status column is String(4000)
    audit_status_max_length: int = Field(4000, ge=64, le=4000)

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("holiday_scope")
    @classmethod
    def holiday_scope_format(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        parts = v.strip().split("-")
        if len(parts) > 2 or not all(p.isdigit() for p in parts):
            raise ValueError("holiday_scope must be YYYY or YYYY-MM")
        if len(parts) == 2 and not 1 <= int(parts[1]) <= 12:
            raise ValueError("holiday_scope month must be 01-12")
        return v.strip()


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
