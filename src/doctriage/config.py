"""
Configuration management for DocTriage.

Loads settings from environment variables with sensible defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # Storage
    # ==========================================================================
    data_dir: Path = Path("./data")
    store_filename: str = "doctriage_store.json"

    @property
    def store_path(self) -> Path:
        """Path of the JSON file mirroring the document store."""
        return self.data_dir / self.store_filename

    @field_validator("data_dir", mode="before")
    @classmethod
    def convert_to_path(cls, v: str | Path) -> Path:
        """Convert string paths to Path objects."""
        return Path(v) if isinstance(v, str) else v

    # ==========================================================================
    # Graph Layout
    # ==========================================================================
    layout_iterations: int = Field(default=30, ge=0)
    layout_repulsion: float = 300.0
    layout_attraction: float = 0.05
    layout_seed_margin: float = 50.0  # initial placement inset
    layout_bounds_margin: float = 30.0  # clamp inset applied every iteration
    layout_seed: int | None = Field(
        default=None, description="Fix the random seed for reproducible layouts"
    )
    layout_stable: bool = Field(
        default=True,
        description="Reuse positions when nodes, edges and viewport are unchanged",
    )

    # ==========================================================================
    # Interaction & Rendering
    # ==========================================================================
    click_tolerance: float = 12.0
    hover_tolerance: float = 10.0
    viewport_width: int = 800
    viewport_height: int = 600
    render_dpi: int = 100

    # ==========================================================================
    # Analysis
    # ==========================================================================
    analysis_relationship_probability: float = Field(default=0.3, ge=0.0, le=1.0)
    analysis_seed: int | None = None

    # ==========================================================================
    # API Configuration
    # ==========================================================================
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
