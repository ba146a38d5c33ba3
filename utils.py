from datetime import date, datetime


def _as_date(value):
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def format_date(value) -> str:
    """DD/MM/YYYY for a date, datetime or ISO string."""
    if value is None or value == "":
        return ""
    value = _as_date(value)
    return f"{value.day:02d}/{value.month:02d}/{value.year}"


def format_datetime(value) -> str:
    """DD/MM/YYYY HH:MM; plain dates are shown at 00:00."""
    if value is None or value == "":
        return ""
    value = _as_date(value)
    if not isinstance(value, datetime) and isinstance(value, date):
        value = datetime(value.year, value.month, value.day)
    return f"{format_date(value)} {value.hour:02d}:{value.minute:02d}"


def format_number(value) -> str:
    """Thousands separated with dots, as in es-AR."""
    return f"{int(value or 0):,}".replace(",", ".")
