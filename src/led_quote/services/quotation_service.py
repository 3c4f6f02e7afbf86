"""
Quotation Service - persists priced quotations.

Records are stored as a JSON list on disk. A record holds the breakdown
exactly as the engine produced it, plus the request that produced it and
customer metadata. Price fields are never edited one by one: the only way
to change them is replace_breakdown() with a freshly computed breakdown.
"""
import json
import logging
import threading
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from ..engine.discount import DiscountInfo, apply_discount
from ..engine.models import DisplayRequest, QuotationBreakdown
from .quotation_ids import generate_quotation_id

logger = logging.getLogger(__name__)

STATUSES = ("new", "contacted", "closed")


class QuotationNotFoundError(KeyError):
    """No quotation with the requested id."""


class DegradedQuotationError(Exception):
    """Refused to store a breakdown that rests on fallback prices."""

    def __init__(self, breakdown: QuotationBreakdown):
        fields = ", ".join(breakdown.unresolved_fields)
        super().__init__(f"Quotation for {breakdown.product_id} is degraded (unresolved: {fields})")
        self.unresolved_fields = breakdown.unresolved_fields


class InvalidStatusError(ValueError):
    """Status is not one of STATUSES."""


@dataclass
class QuotationRecord:
    """A persisted quotation."""
    quotation_id: str
    sales_person: str
    customer: dict
    request: dict
    breakdown: dict
    status: str = "new"
    message: str = ""
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    updated_at: Optional[str] = None
    discount: Optional[dict] = None

    @property
    def grand_total(self) -> float:
        return float(self.breakdown["grand_total"])

    @property
    def degraded(self) -> bool:
        return bool(self.breakdown.get("degraded", False))

    @property
    def product_id(self) -> str:
        return self.breakdown["product_id"]

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'QuotationRecord':
        return cls(
            quotation_id=data['quotation_id'],
            sales_person=data.get('sales_person', ''),
            customer=data.get('customer') or {},
            request=data.get('request') or {},
            breakdown=data['breakdown'],
            status=data.get('status', 'new'),
            message=data.get('message', ''),
            created_at=data.get('created_at') or datetime.now().isoformat(),
            updated_at=data.get('updated_at'),
            discount=data.get('discount'),
        )


def _require_breakdown(breakdown) -> None:
    if not isinstance(breakdown, QuotationBreakdown):
        raise TypeError("Only a QuotationBreakdown produced by the pricing engine can be stored")


def _discount_figures(breakdown: QuotationBreakdown, info: Optional[DiscountInfo]) -> Optional[dict]:
    """Discounted totals stored next to the untouched breakdown."""
    if info is None:
        return None
    figures = apply_discount(breakdown, info).to_dict()
    del figures["original"]
    return figures


class QuotationService:
    """Service for storing and retrieving quotations."""

    def __init__(self, store_path: Optional[Path] = None, id_prefix: str = "ORION"):
        self.store_path = store_path
        self.id_prefix = id_prefix
        self._lock = threading.Lock()
        self._records: dict[str, QuotationRecord] = {}
        if store_path and store_path.exists():
            self._load()

    def _load(self):
        with open(self.store_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        self._records = {r['quotation_id']: QuotationRecord.from_dict(r) for r in data}
        logger.info("Loaded %d quotations from %s", len(self._records), self.store_path)

    def _write(self):
        if not self.store_path:
            return
        self.store_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.store_path.with_suffix(self.store_path.suffix + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump([r.to_dict() for r in self._records.values()], f, indent=2, ensure_ascii=False)
        tmp_path.replace(self.store_path)

    def save(
        self,
        breakdown: QuotationBreakdown,
        request: DisplayRequest,
        sales_person: str,
        customer: Optional[dict] = None,
        message: str = "",
        allow_degraded: bool = False,
        today: Optional[date] = None,
        discount: Optional[DiscountInfo] = None,
    ) -> QuotationRecord:
        """
        Store a new quotation and return its record.

        A degraded breakdown is refused unless allow_degraded is set. A
        discount is applied to a copy; the breakdown is stored as priced and
        the discounted totals sit beside it. An invalid discount raises
        InvalidInputError before anything is stored.
        """
        _require_breakdown(breakdown)
        if breakdown.degraded and not allow_degraded:
            raise DegradedQuotationError(breakdown)
        discount_figures = _discount_figures(breakdown, discount)

        with self._lock:
            quotation_id = generate_quotation_id(
                self._records.keys(), sales_person, today=today, prefix=self.id_prefix,
            )
            record = QuotationRecord(
                quotation_id=quotation_id,
                sales_person=sales_person,
                customer=dict(customer or {}),
                request=request.to_dict(),
                breakdown=breakdown.to_dict(),
                message=message,
                discount=discount_figures,
            )
            self._records[quotation_id] = record
            self._write()

        if breakdown.degraded:
            logger.warning("Stored degraded quotation %s (unresolved: %s)",
                           quotation_id, ", ".join(breakdown.unresolved_fields))
        else:
            logger.info("Stored quotation %s: %.0f", quotation_id, breakdown.grand_total)
        return record

    def replace_breakdown(
        self,
        quotation_id: str,
        breakdown: QuotationBreakdown,
        request: DisplayRequest,
        allow_degraded: bool = False,
    ) -> QuotationRecord:
        """
        Replace the whole breakdown (and the request behind it) of a stored quotation.

        A stored discount is re-applied to the new breakdown.
        """
        _require_breakdown(breakdown)
        if breakdown.degraded and not allow_degraded:
            raise DegradedQuotationError(breakdown)

        with self._lock:
            record = self._get(quotation_id)
            discount = record.discount
            if discount:
                discount = _discount_figures(breakdown, DiscountInfo(**discount["discount"]))
            record.breakdown = breakdown.to_dict()
            record.discount = discount
            record.request = request.to_dict()
            record.updated_at = datetime.now().isoformat()
            self._write()
        logger.info("Replaced breakdown of %s: %.0f", quotation_id, breakdown.grand_total)
        return record

    def update_status(self, quotation_id: str, status: str) -> QuotationRecord:
        status = (status or "").strip().lower()
        if status not in STATUSES:
            raise InvalidStatusError(f"Invalid status {status!r}, expected one of {', '.join(STATUSES)}")
        with self._lock:
            record = self._get(quotation_id)
            record.status = status
            record.updated_at = datetime.now().isoformat()
            self._write()
        return record

    def _get(self, quotation_id: str) -> QuotationRecord:
        if quotation_id not in self._records:
            raise QuotationNotFoundError(quotation_id)
        return self._records[quotation_id]

    def get(self, quotation_id: str) -> QuotationRecord:
        with self._lock:
            return self._get(quotation_id)

    def list_quotations(self, status: Optional[str] = None, sales_person: Optional[str] = None) -> list[QuotationRecord]:
        """List quotations, newest first."""
        with self._lock:
            records = list(self._records.values())
        if status:
            records = [r for r in records if r.status == status]
        if sales_person:
            records = [r for r in records if r.sales_person == sales_person]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def delete(self, quotation_id: str) -> bool:
        with self._lock:
            if quotation_id not in self._records:
                return False
            del self._records[quotation_id]
            self._write()
        return True
