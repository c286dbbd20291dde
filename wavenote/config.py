#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
WaveNote - Configuration
Application settings loaded from environment variables and an optional .env file
"""

import secrets
from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

import pytz
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class DashboardSettings(BaseSettings):
    """WaveNote web application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== APPLICATION =====

    APP_NAME: str = Field(
        default="WaveNote - Personal To-Do App",
        description="Application title shown in the page header"
    )

    VERSION: str = Field(
        default="1.0.0",
        description="Application version"
    )

    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment (development/production/testing)"
    )

    DEBUG: bool = Field(
        default=True,
        description="Debug mode"
    )

    SECRET_KEY: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        description="Key used to sign session cookies"
    )

    # ===== NETWORK =====

    DASHBOARD_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the web server to"
    )

    DASHBOARD_PORT: int = Field(
        default=8000,
        description="Port to bind the web server to"
    )

    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # ===== PATHS =====

    DATA_DIR: Path = Field(
        default=Path("data"),
        description="Directory holding the document store files"
    )

    LOGS_DIR: Path = Field(
        default=Path("logs"),
        description="Directory for log files"
    )

    # ===== LOGGING =====

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG/INFO/WARNING/ERROR/CRITICAL)"
    )

    LOG_FORMAT: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        description="Log record format"
    )

    LOG_DATE_FORMAT: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Date format used in log records"
    )

    LOG_TO_FILE: bool = Field(
        default=True,
        description="Also write logs to a rotating file in LOGS_DIR"
    )

    # ===== TASKS AND ACCOUNTS =====

    TIMEZONE: str = Field(
        default="UTC",
        description="Time zone used to read and display task deadlines"
    )

    TASKS_COLLECTION: str = Field(
        default="to-do-tasks",
        description="Name of the per-user task collection"
    )

    MIN_PASSWORD_LENGTH: int = Field(
        default=6,
        description="Minimum password length accepted on sign up"
    )

    SESSION_COOKIE: str = Field(
        default="wavenote_session",
        description="Name of the session cookie"
    )

    MAX_SESSIONS: int = Field(
        default=1000,
        description="Browser sessions kept in memory; the least recently used is dropped beyond this"
    )

    SESSION_IDLE_TIMEOUT: int = Field(
        default=3600,
        description="Seconds after which an idle browser session is dropped from memory"
    )

    # ===== VALIDATORS =====

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed_envs = ["development", "production", "testing"]
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator("DASHBOARD_PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError("DASHBOARD_PORT must be between 1 and 65535")
        return v

    @field_validator("TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown TIMEZONE: {v}")
        return v

    @field_validator("MAX_SESSIONS", "SESSION_IDLE_TIMEOUT")
    @classmethod
    def validate_session_limits(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Session limits must be positive")
        return v

    @field_validator("MIN_PASSWORD_LENGTH")
    @classmethod
    def validate_min_password_length(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MIN_PASSWORD_LENGTH must be positive")
        return v

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def validate_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "DashboardSettings":
        if self.ENVIRONMENT == "production":
            self.DEBUG = False
        return self

    # ===== HELPERS =====

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def secret_key_generated(self) -> bool:
        """True when SECRET_KEY came from the random default rather than the environment"""
        return "SECRET_KEY" not in self.model_fields_set

    @property
    def tzinfo(self):
        """pytz time zone used as the local representation of deadlines"""
        return pytz.timezone(self.TIMEZONE)

    def get_full_url(self, path: str = "") -> str:
        return f"http://{self.DASHBOARD_HOST}:{self.DASHBOARD_PORT}/{path.lstrip('/')}"


@lru_cache()
def get_settings() -> DashboardSettings:
    """Settings singleton"""
    return DashboardSettings()
