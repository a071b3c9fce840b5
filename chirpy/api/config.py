"""
Environment-aware configuration.
Flask config classes read the environment (and .env) once; AuthSettings is the
immutable slice of it that the auth core receives at startup.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta

from dotenv import load_dotenv

from chirpy.utils.errors import ConfigError

load_dotenv()  # Read .env if present


class BaseConfig:
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    # "dev" unlocks POST /admin/reset
    PLATFORM = os.getenv("PLATFORM", "")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///chirpy.db")
    # No defaults: both are required at startup
    JWT_SECRET = os.getenv("JWT_SECRET", "")
    POLKA_KEY = os.getenv("POLKA_KEY", "")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", "3600")))
    REFRESH_TOKEN_DAYS = int(os.getenv("REFRESH_TOKEN_DAYS", "60"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class ProductionConfig(BaseConfig):
    DEBUG = False


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    PLATFORM = "dev"


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/prod/testing).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig


@dataclass(frozen=True)
class AuthSettings:
    """Read-only auth configuration, built once and passed to the auth core."""

    signing_secret: str
    api_key: str
    access_token_ttl: timedelta = timedelta(hours=1)
    refresh_token_days: int = 60

    @classmethod
    def from_config(cls, config: Mapping) -> AuthSettings:
        secret = config.get("JWT_SECRET") or ""
        api_key = config.get("POLKA_KEY") or ""
        if not secret:
            raise ConfigError("JWT_SECRET is not set")
        if not api_key:
            raise ConfigError("POLKA_KEY is not set")
        return cls(
            signing_secret=secret,
            api_key=api_key,
            access_token_ttl=config.get("ACCESS_TOKEN_EXPIRES", timedelta(hours=1)),
            refresh_token_days=int(config.get("REFRESH_TOKEN_DAYS", 60)),
        )
