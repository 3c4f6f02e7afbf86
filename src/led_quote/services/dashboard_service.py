"""
Dashboard Service - aggregates stored quotations for reporting.

Totals are always the stored grand_total of each breakdown; this module
never rebuilds a total from section fields. verify_records() is the one
place that recomputes, and it does so through the pricing engine.
"""
import logging
from typing import Iterable, Optional

import pandas as pd

from ..engine.errors import PricingError
from ..engine.models import DisplayRequest
from ..engine.pricing_engine import PricingEngine
from .quotation_service import QuotationRecord

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    'quotation_id', 'sales_person', 'status', 'product_id', 'buyer_tier',
    'grand_total', 'degraded', 'created_at',
]


class DashboardService:
    """Read-only reporting over a set of quotation records."""

    def __init__(self, records: Iterable[QuotationRecord]):
        self.records = list(records)

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {
                'quotation_id': r.quotation_id,
                'sales_person': r.sales_person,
                'status': r.status,
                'product_id': r.product_id,
                'buyer_tier': r.breakdown.get('buyer_tier'),
                'grand_total': r.grand_total,
                'degraded': r.degraded,
                'created_at': r.created_at,
            }
            for r in self.records
        ]
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)

    def total_value(self, status: Optional[str] = None) -> float:
        """Sum of stored grand totals, optionally for one status."""
        df = self.to_frame()
        if status:
            df = df[df['status'] == status]
        return float(df['grand_total'].sum()) if not df.empty else 0.0

    def _summary(self, key: str) -> list[dict]:
        df = self.to_frame()
        if df.empty:
            return []
        grouped = df.groupby(key).agg(
            count=('quotation_id', 'count'),
            total_value=('grand_total', 'sum'),
            degraded=('degraded', 'sum'),
        ).reset_index()
        return [
            {
                key: row[key],
                'count': int(row['count']),
                'total_value': float(row['total_value']),
                'degraded': int(row['degraded']),
            }
            for row in grouped.to_dict(orient='records')
        ]

    def summary_by_status(self) -> list[dict]:
        return self._summary('status')

    def summary_by_sales_person(self) -> list[dict]:
        return self._summary('sales_person')

    def stats(self) -> dict:
        df = self.to_frame()
        return {
            'quotation_count': int(len(df)),
            'total_value': self.total_value(),
            'degraded_count': int(df['degraded'].sum()) if not df.empty else 0,
            'by_status': self.summary_by_status(),
        }

    def verify_records(self, engine: PricingEngine, tolerance: float = 1.0) -> list[dict]:
        """
        Recompute each stored request through the engine and compare totals.

        Returns one entry per record with is_valid, stored and calculated
        totals and the difference. A request that can no longer be priced
        (e.g. the product left the catalog) is reported as invalid.
        """
        results = []
        for record in self.records:
            stored = record.grand_total
            try:
                request = DisplayRequest.from_dict(record.request)
                calculated = engine.calculate(request).grand_total
            except PricingError as e:
                logger.warning("Could not recompute %s: %s", record.quotation_id, e)
                results.append({
                    'quotation_id': record.quotation_id,
                    'is_valid': False,
                    'stored': stored,
                    'calculated': None,
                    'difference': None,
                    'message': f"Price validation failed: {e}",
                })
                continue

            difference = abs(stored - calculated)
            is_valid = difference <= tolerance
            if is_valid:
                message = f"Stored ₹{stored:,.0f} matches calculation"
            else:
                message = f"Stored ₹{stored:,.0f} vs calculation ₹{calculated:,.0f}, difference ₹{difference:,.0f}"
                logger.warning("Price mismatch on %s: %s", record.quotation_id, message)
            results.append({
                'quotation_id': record.quotation_id,
                'is_valid': is_valid,
                'stored': stored,
                'calculated': calculated,
                'difference': difference,
                'message': message,
            })
        return results
