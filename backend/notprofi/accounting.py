import re
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

TWOPLACES = Decimal('0.01')
ZERO = Decimal('0.00')

MONTH_YEAR_RE = re.compile(r'([0-9]{4})-([0-9]{2})')


def to_decimal(value) -> Decimal:
    """Lenient amount parsing: missing or unparsable values count as zero."""
    if value is None or value == '':
        return ZERO
    try:
        d = Decimal(str(value).strip())
        if not d.is_finite():
            return ZERO
        return d.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return ZERO


def money_str(value) -> str:
    return str(to_decimal(value))


def format_money(value) -> str:
    return f"€ {to_decimal(value)}"


def month_label(dt: datetime) -> str:
    return dt.strftime('%Y-%m')


def month_bounds(month_year: str):
    """Return [start, end) datetimes for a "YYYY-MM" token, or None if malformed."""
    if not isinstance(month_year, str):
        return None
    m = MONTH_YEAR_RE.fullmatch(month_year)
    if not m:
        return None
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        return None
    try:
        start = datetime(year, month, 1)
        end = datetime(year + (month == 12), month % 12 + 1, 1)
    except ValueError:
        # year 0000 or the month after 9999-12
        return None
    return start, end


def format_invoice_number(month_year: str, number: int, prefix: str = 'RE') -> str:
    return f"{prefix}-{month_year.replace('-', '', 1)}-{number:04d}"


def format_job_number(timestamp_ms: int, prefix: str = 'NP24') -> str:
    return f"{prefix}-{str(timestamp_ms)[-6:]}"
