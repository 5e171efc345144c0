import calendar
from datetime import date, datetime, timezone
from typing import Optional


def add_months(start: date, months: int) -> date:
    """start에 months개월을 더한다. 말일을 넘으면 해당 월의 마지막 날로 맞춘다."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    return text or None
