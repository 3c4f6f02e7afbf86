"""
Centralized settings, path configuration and pricing constants.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


PACKAGE_ROOT = Path(__file__).resolve().parent.parent


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass(frozen=True)
class PricingConstants:
    """Rates and bounds shared by every pricing computation."""

    tax_rate: float = 0.18
    feet_per_meter: float = 3.2808399

    # Structure & installation (per cabinet / per square foot, before tax)
    indoor_structure_per_cabinet: float = 4000.0
    outdoor_structure_per_sqft: float = 2500.0
    installation_per_sqft: float = 500.0

    # Used when a catalog tier price cannot be resolved
    default_unit_price: float = 5300.0

    min_quantity: float = 0.01
    max_quantity: float = 10000.0
    fallback_quantity: float = 1.0


DEFAULT_CONSTANTS = PricingConstants()


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    project_root: Path

    # Catalog inputs
    products_csv: Path
    controllers_csv: Path

    # Persisted quotations (JSON)
    quotation_store: Path

    constants: PricingConstants = DEFAULT_CONSTANTS

    # Document defaults
    company_name: str = "Orion LED"
    id_prefix: str = "ORION"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()
        data_dir = PACKAGE_ROOT / 'data'

        constants = DEFAULT_CONSTANTS
        tax_rate = os.environ.get('LED_QUOTE_TAX_RATE')
        if tax_rate:
            constants = PricingConstants(tax_rate=float(tax_rate))

        return cls(
            project_root=root,
            products_csv=Path(os.environ.get('LED_QUOTE_PRODUCTS_CSV', data_dir / 'products.csv')),
            controllers_csv=Path(os.environ.get('LED_QUOTE_CONTROLLERS_CSV', data_dir / 'controllers.csv')),
            quotation_store=Path(os.environ.get('LED_QUOTE_STORE', root / 'quotations.json')),
            constants=constants,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
