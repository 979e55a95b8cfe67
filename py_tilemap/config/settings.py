"""Configuration management."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from ``TILEMAP_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TILEMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="plain", description="Logging format (plain or json)")

    # Geometry Configuration
    fp_threshold: float = Field(
        default=1e-7, gt=0, description="Threshold for floating point equality"
    )
    # Separate from fp_threshold: positions are rounded to this many decimal
    # digits to build lookup keys for map nodes and tiles.
    node_key_precision: int = Field(
        default=6, ge=0, le=12, description="Decimal digits of node lookup keys"
    )

    # Map Generation Configuration
    default_map_width: float = Field(default=500, gt=0, description="Default map width")
    default_map_height: float = Field(default=500, gt=0, description="Default map height")
    min_sample_distance: float = Field(
        default=1.0, gt=0, description="Minimal distance between tile seeds"
    )
    num_sample_candidates: int = Field(
        default=20, gt=0, description="Candidates tested per new tile seed"
    )
    num_octaves: int = Field(default=9, gt=0, description="Perlin noise octaves")
    persistence: float = Field(default=2.0, description="Amplitude factor per octave")
    random_seed: str = Field(default="1234567890", description="Default random seed")

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("plain", "json"):
            raise ValueError(f"log_format must be 'plain' or 'json', got {value!r}")
        return value


# Instantiate singleton settings object
settings = Settings()
