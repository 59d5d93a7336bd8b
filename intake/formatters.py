"""Keystroke formatters and contact URI builders.

Formatters take whatever the user typed and return the display value the
form stores. They never raise: characters they do not understand are dropped.
"""

import re
from typing import Callable, Dict
from urllib.parse import quote

_NON_DIGITS = re.compile(r"[^0-9]")
_NON_DIAL = re.compile(r"[^0-9+]")


def digits_only(raw: str) -> str:
    """Strip every non-digit character."""
    return _NON_DIGITS.sub("", raw or "")


def format_currency(raw: str) -> str:
    """'50000' → '50,000'. No decimals, no sign; empty stays empty."""
    digits = digits_only(raw)
    if not digits:
        return ""
    # Grouped as a string: int() refuses very long digit runs.
    digits = digits.lstrip("0") or "0"
    head = len(digits) % 3 or 3
    groups = [digits[:head]] + [digits[i:i + 3] for i in range(head, len(digits), 3)]
    return ",".join(groups)


def format_phone(raw: str) -> str:
    """Group the last 10 digits as '(area) mid last', filling from the tail.

    Partial input keeps only the groups that have digits, so '070' stays
    '070' and '6070070' becomes '607 0070'.
    """
    digits = digits_only(raw)[-10:]
    last = digits[-4:]
    mid = digits[-7:-4]
    area = digits[-10:-7]
    groups = [f"({area})" if area else "", mid, last]
    return " ".join(g for g in groups if g)


# Map field → formatter. Fields not listed are stored verbatim.
FIELD_FORMATTERS: Dict[str, Callable[[str], str]] = {
    "amount_desired": format_currency,
    "monthly_revenue": format_currency,
    "phone": format_phone,
}


def format_field(name: str, raw: str) -> str:
    formatter = FIELD_FORMATTERS.get(name)
    if formatter is None:
        return raw
    return formatter(raw)


# ── Contact URIs ────────────────────────────────────────────────────────
def _encode_component(value: str) -> str:
    """Percent-encode the way encodeURIComponent does."""
    return quote(value, safe="-_.!~*'()")


def mailto_uri(address: str, subject: str | None = None, body: str | None = None) -> str:
    """mailto: link, optionally pre-filled with a subject and body."""
    params = []
    if subject is not None:
        params.append(f"subject={_encode_component(subject)}")
    if body is not None:
        params.append(f"body={_encode_component(body)}")
    uri = f"mailto:{address}"
    if params:
        uri += "?" + "&".join(params)
    return uri


def tel_uri(phone: str) -> str:
    """tel: link keeping only digits and '+'."""
    return f"tel:{_NON_DIAL.sub('', phone or '')}"
