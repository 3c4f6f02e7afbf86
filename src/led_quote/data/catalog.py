"""
Catalog Lookup - read-only product and controller price tables.

The catalog is loaded once from CSV into an immutable Catalog snapshot.
CatalogStore swaps snapshots on reload; a computation that grabbed a
snapshot keeps pricing against it.
"""
import hashlib
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Mapping, Optional

import pandas as pd

from ..engine.controller_price import normalize_controller_name, lookup_controller
from ..engine.errors import UnknownProductError
from ..engine.models import ProductSpec, TierPrices
from ..engine.unit_price import parse_price

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = [
    'id', 'name', 'category', 'environment', 'pixel_pitch',
    'price', 'si_channel_price', 'reseller_price',
    'rental_end_customer', 'rental_si_channel', 'rental_reseller',
    'cabinet_width_mm', 'cabinet_height_mm', 'fixed_area_sqft',
]
CONTROLLER_COLUMNS = ['name', 'end_user', 'reseller', 'channel']


def get_file_hash(path: Path) -> str:
    """Get SHA256 hash of a file."""
    if not path.exists():
        return ""
    with open(path, 'rb') as f:
        return hashlib.sha256(f.read()).hexdigest()[:12]


@dataclass(frozen=True)
class Catalog:
    """Immutable snapshot of products and controller prices."""
    products: Mapping[str, ProductSpec]
    controllers: Mapping[str, TierPrices]
    source_hash: str = ""
    loaded_from: dict = field(default_factory=dict)

    def get_product(self, product_id: str) -> ProductSpec:
        product_id = str(product_id).strip()
        if product_id not in self.products:
            raise UnknownProductError(product_id)
        return self.products[product_id]

    def get_controller_price(self, name: str) -> Optional[TierPrices]:
        normalized = normalize_controller_name(name)
        if normalized is None:
            return None
        return lookup_controller(normalized, self.controllers)


def build_catalog(products: list[ProductSpec], controllers: dict[str, TierPrices],
                  source_hash: str = "", loaded_from: Optional[dict] = None) -> Catalog:
    """Freeze in-memory tables into a Catalog."""
    return Catalog(
        products=MappingProxyType({p.id: p for p in products}),
        controllers=MappingProxyType(dict(controllers)),
        source_hash=source_hash,
        loaded_from=loaded_from or {},
    )


def _blank_to_none(value: str) -> Optional[str]:
    value = str(value).strip()
    return value or None


def _number(value: str) -> Optional[float]:
    value = _blank_to_none(value)
    return float(value) if value is not None else None


def _raw_price(value: str):
    """Keep 'NA' and other non-numeric markers as text for the resolver to flag."""
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return float(value.replace(',', ''))
    except ValueError:
        return value


def _product_from_row(row: dict) -> ProductSpec:
    rental = None
    rental_values = [row['rental_end_customer'], row['rental_si_channel'], row['rental_reseller']]
    if any(_blank_to_none(v) for v in rental_values):
        rental = TierPrices(
            end_user=_raw_price(row['rental_end_customer']),
            reseller=_raw_price(row['rental_reseller']),
            channel=_raw_price(row['rental_si_channel']),
        )

    pitch = _number(row['pixel_pitch'])
    fixed_area = _number(row['fixed_area_sqft'])
    fixed_area_by_pitch = {pitch: fixed_area} if pitch is not None and fixed_area is not None else {}

    return ProductSpec(
        id=row['id'].strip(),
        name=row['name'].strip(),
        category=row['category'].strip(),
        environment=row['environment'].strip(),
        pixel_pitch=pitch,
        price=_raw_price(row['price']),
        si_channel_price=_raw_price(row['si_channel_price']),
        reseller_price=_raw_price(row['reseller_price']),
        rental_prices=rental,
        cabinet_width_mm=_number(row['cabinet_width_mm']),
        cabinet_height_mm=_number(row['cabinet_height_mm']),
        fixed_area_by_pitch=fixed_area_by_pitch,
    )


def _read_csv(path: Path, columns: list[str]) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found at {path}")
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name} is missing columns: {', '.join(missing)}")
    return df


def load_catalog(products_csv: Path, controllers_csv: Path) -> Catalog:
    """Load products and controller prices from CSV into a Catalog snapshot."""
    products_df = _read_csv(products_csv, PRODUCT_COLUMNS)
    controllers_df = _read_csv(controllers_csv, CONTROLLER_COLUMNS)

    products = [_product_from_row(row) for row in products_df.to_dict(orient='records')]

    controllers = {}
    for row in controllers_df.to_dict(orient='records'):
        name = row['name'].strip()
        if name in controllers:
            logger.warning("Duplicate controller %r in %s, keeping first", name, controllers_csv.name)
            continue
        prices = {tier: parse_price(row[tier]) for tier in ('end_user', 'reseller', 'channel')}
        if None in prices.values():
            # Unpriced controllers resolve as unknown names
            logger.warning("Controller %r in %s has no usable price for %s, skipping", name,
                           controllers_csv.name, ", ".join(t for t, p in prices.items() if p is None))
            continue
        controllers[name] = TierPrices(**prices)

    source_hash = get_file_hash(products_csv) + get_file_hash(controllers_csv)
    logger.info("Loaded catalog: %d products, %d controllers (%s)",
                len(products), len(controllers), source_hash)
    return build_catalog(
        products, controllers,
        source_hash=source_hash,
        loaded_from={"products": str(products_csv), "controllers": str(controllers_csv)},
    )


class CatalogStore:
    """
    Holds the current catalog snapshot.

    snapshot() hands out the current immutable Catalog. reload() builds a
    new one off to the side and swaps the reference under a lock.
    """

    def __init__(self, loader: Callable[[], Catalog]):
        self._loader = loader
        self._lock = threading.Lock()
        self._catalog = loader()

    @classmethod
    def from_files(cls, products_csv: Path, controllers_csv: Path) -> 'CatalogStore':
        return cls(lambda: load_catalog(products_csv, controllers_csv))

    def snapshot(self) -> Catalog:
        with self._lock:
            return self._catalog

    def reload(self) -> Catalog:
        catalog = self._loader()
        with self._lock:
            self._catalog = catalog
        return catalog
