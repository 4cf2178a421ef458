"""Centralized, typed configuration for layout constants and logging."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cardatlas.catalog import load_taxonomy
from cardatlas.layout import LayoutConfig
from cardatlas.lookup import LAYOUT_DEFAULTS
from cardatlas.models import Taxonomy


class Settings(BaseSettings):
    """Strongly typed application settings.

    Values come from ``CARDATLAS_*`` environment variables, then an optional
    ``.env`` file, then the defaults below.
    """

    model_config = SettingsConfigDict(
        env_prefix="CARDATLAS_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    log_level: str = "INFO"
    log_file: Optional[str] = None

    card_width: float = Field(default=LAYOUT_DEFAULTS["card_width"], gt=0)
    horizontal_spacing: float = Field(default=LAYOUT_DEFAULTS["horizontal_spacing"], ge=0)
    vertical_spacing: float = Field(default=LAYOUT_DEFAULTS["vertical_spacing"], gt=0)
    layout_margin: float = Field(default=LAYOUT_DEFAULTS["margin"], ge=0)
    min_layout_width: float = Field(default=LAYOUT_DEFAULTS["min_width"], ge=0)
    card_height: float = Field(default=LAYOUT_DEFAULTS["card_height"], gt=0)
    card_top_padding: float = Field(default=LAYOUT_DEFAULTS["card_top_padding"], ge=0)

    taxonomy_file: Optional[str] = None

    def layout_config(self) -> LayoutConfig:
        return LayoutConfig(
            card_width=self.card_width,
            horizontal_spacing=self.horizontal_spacing,
            vertical_spacing=self.vertical_spacing,
            margin=self.layout_margin,
            min_width=self.min_layout_width,
            card_height=self.card_height,
            card_top_padding=self.card_top_padding,
        )

    def taxonomy(self) -> Taxonomy:
        """The configured taxonomy file, or the built-in default layers."""
        if not self.taxonomy_file:
            return Taxonomy.default()
        return load_taxonomy(self.taxonomy_file)


@lru_cache()
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings()
