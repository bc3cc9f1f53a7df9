"""
maritime-ghg Configuration Module.

Settings are read from environment variables, with a .env file in the
project root loaded first when present.

Usage:
    from maritime_ghg.config import settings

    settings.configure_logging()
    print(settings.default_eua_price_eur)
"""

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


DEFAULT_EUA_PRICE_EUR = 85.0
DEFAULT_GFI_TIER1_PRICE_USD = 100.0
DEFAULT_GFI_TIER2_PRICE_USD = 380.0


def get_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    try:
        return float(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


def is_valid_price(value: float) -> bool:
    """A usable price is finite and non-negative."""
    return math.isfinite(value) and value >= 0


@dataclass
class Settings:
    """Library settings loaded from environment."""

    # Market price defaults (used only when a record omits its price)
    default_eua_price_eur: float = field(
        default_factory=lambda: get_float("DEFAULT_EUA_PRICE_EUR", DEFAULT_EUA_PRICE_EUR)
    )
    gfi_tier1_price_usd: float = field(
        default_factory=lambda: get_float("GFI_TIER1_PRICE_USD", DEFAULT_GFI_TIER1_PRICE_USD)
    )
    gfi_tier2_price_usd: float = field(
        default_factory=lambda: get_float("GFI_TIER2_PRICE_USD", DEFAULT_GFI_TIER2_PRICE_USD)
    )

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = field(
        default_factory=lambda: os.getenv(
            "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )

    def __post_init__(self):
        """Validate settings after initialization."""
        if not is_valid_price(self.default_eua_price_eur):
            logging.warning(
                f"EUA price {self.default_eua_price_eur} is negative or not finite, "
                f"using {DEFAULT_EUA_PRICE_EUR}"
            )
            self.default_eua_price_eur = DEFAULT_EUA_PRICE_EUR

        if not (is_valid_price(self.gfi_tier1_price_usd) and is_valid_price(self.gfi_tier2_price_usd)):
            logging.warning(
                "GFI remedial unit prices must be finite and non-negative, "
                "falling back to Tier 1 = %s / Tier 2 = %s USD",
                DEFAULT_GFI_TIER1_PRICE_USD, DEFAULT_GFI_TIER2_PRICE_USD,
            )
            self.gfi_tier1_price_usd = DEFAULT_GFI_TIER1_PRICE_USD
            self.gfi_tier2_price_usd = DEFAULT_GFI_TIER2_PRICE_USD

    def configure_logging(self):
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        logging.basicConfig(level=level, format=self.log_format)


# Singleton instance
settings = Settings()


def get_settings() -> Settings:
    """Get the settings instance (useful for dependency injection)."""
    return settings
