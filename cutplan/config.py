"""Configuration management for Workshop Cut Planner."""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CUTPLAN_",
        extra="ignore",
    )

    # Stock sheet (mm)
    sheet_width: int = Field(default=2730, gt=0, description="Stock sheet width in mm")
    sheet_height: int = Field(default=1830, gt=0, description="Stock sheet height in mm")
    kerf: int = Field(default=3, ge=0, description="Saw blade kerf in mm")
    trim: int = Field(default=10, ge=0, description="Edge trim reserved on every side in mm")

    # Budget rates
    effective_sheet_area_m2: float = Field(
        default=5.06,
        description="Real usable area of one stock sheet in square metres",
    )
    price_per_sheet: float = Field(default=345.0, description="Price of one stock sheet")
    markup_multiplier: float = Field(default=1.38, description="Multiplier applied to total cost")
    labor_per_square_meter: float = Field(default=220.0, description="Labor rate per square metre of parts")
    hardware_ratio: float = Field(default=0.22, ge=0, description="Hardware cost as a share of material cost")
    other_ratio: float = Field(default=0.08, ge=0, description="Other supplies as a share of material + hardware")

    # Part extraction
    wood_keywords: List[str] = Field(
        default_factory=lambda: ["freijó", "freijo", "amadeirado"],
        description="Keywords that mark a BOM line as wood-grain material",
    )

    log_level: str = Field(default="WARNING", description="Log level for the CLI")

    def nesting_config(self):
        """Build the nesting configuration for the stock sheet."""
        from cutplan.nesting.shelf_nester import NestingConfig

        return NestingConfig(
            sheet_width=self.sheet_width,
            sheet_height=self.sheet_height,
            kerf=self.kerf,
            trim=self.trim,
        )

    def rate_config(self):
        """Build the budget rates."""
        from cutplan.estimator.budget import RateConfig

        return RateConfig(
            price_per_sheet=self.price_per_sheet,
            markup_multiplier=self.markup_multiplier,
            labor_per_square_meter=self.labor_per_square_meter,
        )

    def budget_engine(self):
        """Build a budget engine with the configured ratios."""
        from cutplan.estimator.budget import BudgetEngine

        return BudgetEngine(
            effective_sheet_area_m2=self.effective_sheet_area_m2,
            hardware_ratio=self.hardware_ratio,
            other_ratio=self.other_ratio,
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(settings: Optional[Settings]) -> None:
    """Override global settings. Passing None reloads from the environment."""
    global _settings
    _settings = settings
