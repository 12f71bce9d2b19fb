"""Application settings.

Read from ``STOREFRONT_*`` environment variables and an optional ``.env``
file in the working directory.  Business ceilings are not configurable;
they live as constants next to the rules that enforce them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

# Repo-root ``data/`` directory when installed in editable mode.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):
    """Top-level storefront settings."""

    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "WARNING"
    log_format: Literal["console", "json"] = "console"

    model_config = {"env_prefix": "STOREFRONT_", "env_file": ".env", "extra": "ignore"}

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def users_file(self) -> Path:
        return self.data_dir / "users.json"

    @property
    def products_file(self) -> Path:
        return self.data_dir / "products.json"

    @property
    def carts_file(self) -> Path:
        return self.data_dir / "carts.json"

    @property
    def orders_file(self) -> Path:
        return self.data_dir / "orders.json"


def load_settings(overrides: dict[str, Any] | None = None) -> Settings:
    """Build settings from the environment, with *overrides* taking precedence.

    ``None`` values in *overrides* are ignored so CLI options that were not
    given fall through to the environment.
    """
    data = {k: v for k, v in (overrides or {}).items() if v is not None}
    return Settings(**data)
