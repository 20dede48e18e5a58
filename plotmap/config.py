from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Type


class Config:
    """Base application configuration."""

    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI: str = os.getenv(
        "DATABASE_URL",
        os.getenv(
            "SQLALCHEMY_DATABASE_URI",
            "sqlite:///plots.db",
        ),
    )
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    DIAGRAM_DIR: Path = Path(os.getenv("DIAGRAM_DIR", "instance/diagrams"))
    DIAGRAM_FILENAME: str = os.getenv("DIAGRAM_FILENAME", "blueprint.svg")
    # werkzeug.security hash of the admin password; no hash means no admin login.
    ADMIN_PASSWORD_HASH: str = os.getenv("ADMIN_PASSWORD_HASH", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    DEBUG: bool = True
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG")


class ProductionConfig(Config):
    DEBUG: bool = False


class TestingConfig(Config):
    TESTING: bool = True
    SQLALCHEMY_DATABASE_URI: str = "sqlite:///:memory:"


CONFIG_MAP: Dict[str, Type[Config]] = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": Config,
}


def resolve_config(config_name: str | None) -> Type[Config]:
    """Return the configuration class for the given name."""
    if not config_name:
        return CONFIG_MAP["default"]
    return CONFIG_MAP.get(config_name, CONFIG_MAP["default"])
