"""
Quotation id generation.

Format: {PREFIX}/{YYYY}/{MM}/{DD}/{FIRSTNAME}/{NNN}, e.g. ORION/2026/10/17/PRIYA/003.
The serial counts per sales person first name per day and never exceeds 999.
"""
import re
from datetime import date
from typing import Iterable, Optional

MAX_SERIAL = 999


class QuotationIdExhaustedError(Exception):
    """No serial numbers left for this sales person today."""


def first_name(sales_person: str) -> str:
    name = (sales_person or "").strip().split(" ")[0].upper()
    if not name:
        raise ValueError("Sales person name is required to generate a quotation id")
    return name


def _id_pattern(prefix: str, day: date, name: str) -> re.Pattern:
    head = f"{prefix}/{day:%Y}/{day:%m}/{day:%d}/{name}/"
    return re.compile(rf"^{re.escape(head)}(\d{{3}})$", re.IGNORECASE)


def next_serial(existing_ids: Iterable[str], sales_person: str,
                today: Optional[date] = None, prefix: str = "ORION") -> int:
    """Highest serial already used by this person today, plus one."""
    today = today or date.today()
    pattern = _id_pattern(prefix, today, first_name(sales_person))
    highest = 0
    for quotation_id in existing_ids:
        match = pattern.match(quotation_id or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1


def generate_quotation_id(existing_ids: Iterable[str], sales_person: str,
                          today: Optional[date] = None, prefix: str = "ORION") -> str:
    today = today or date.today()
    name = first_name(sales_person)
    serial = next_serial(existing_ids, sales_person, today, prefix)
    if serial > MAX_SERIAL:
        raise QuotationIdExhaustedError(
            f"Maximum serial number ({MAX_SERIAL}) exceeded for {name} on {today:%d/%m/%Y}"
        )
    return f"{prefix}/{today:%Y}/{today:%m}/{today:%d}/{name}/{serial:03d}"
