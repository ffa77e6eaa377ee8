import json
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from core import errors


def parse_date(val, field="date", required=True):
    """
    Normaliza fechas ISO (YYYY-MM-DD), datetime o date a date.
    """
    if val is None or (isinstance(val, str) and val.strip() == ""):
        if required:
            raise errors.ValidationError(f"{field} is required")
        return None

    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val

    s = str(val).strip()
    # el cliente a veces manda "2024-01-01T00:00:00.000Z"
    if "T" in s:
        s = s.split("T", 1)[0]
    try:
        return date.fromisoformat(s)
    except ValueError:
        raise errors.ValidationError(f"Invalid {field}: {val!r}")


def parse_decimal(val, field="value", required=True, default=None):
    """
    Normaliza números con coma/punto a Decimal.
    """
    if val is None or (isinstance(val, str) and val.strip() == ""):
        if required:
            raise errors.ValidationError(f"{field} is required")
        return default

    if isinstance(val, bool):
        raise errors.ValidationError(f"Invalid {field}: {val!r}")
    if isinstance(val, Decimal):
        return val
    if isinstance(val, (int, float)):
        return Decimal(str(val))

    s = str(val).strip().replace(" ", "")
    if "," in s and "." in s:
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif "," in s:
        s = s.replace(",", ".")

    try:
        return Decimal(s)
    except InvalidOperation:
        raise errors.ValidationError(f"Invalid {field}: {val!r}")


def parse_int(val, field="value", required=True, default=None):
    num = parse_decimal(val, field=field, required=required, default=None)
    if num is None:
        return default
    if num != num.to_integral_value():
        raise errors.ValidationError(f"{field} must be a whole number")
    return int(num)


def parse_bool(val, default=False):
    if val is None:
        return default
    if isinstance(val, bool):
        return val
    s = str(val).strip().upper()
    if s in {"TRUE", "T", "1", "YES", "Y"}:
        return True
    if s in {"FALSE", "F", "0", "NO", "N", ""}:
        return False
    raise errors.ValidationError(f"Invalid boolean: {val!r}")


def read_json(request):
    if not request.body:
        return {}
    try:
        data = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise errors.ValidationError("Request body must be valid JSON")
    if not isinstance(data, dict):
        raise errors.ValidationError("Request body must be a JSON object")
    return data


def require(data, *fields, message="Required fields missing"):
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        raise errors.ValidationError(f"{message}: {', '.join(missing)}")


def format_quantity(qty) -> str:
    """Entero si es entero; si no, 3 decimales."""
    qty = Decimal(str(qty))
    if qty == qty.to_integral_value():
        return str(int(qty))
    return f"{qty:.3f}"
