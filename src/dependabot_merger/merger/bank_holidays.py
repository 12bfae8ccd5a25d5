"""Bank holiday lookup against the GOV.UK bank holidays feed."""

from __future__ import annotations

import json
import logging
from datetime import date
from urllib.error import URLError
from urllib.request import Request, urlopen

log = logging.getLogger(__name__)

BANK_HOLIDAYS_URL = "https://www.gov.uk/bank-holidays.json"
DEFAULT_DIVISION = "england-and-wales"


class BankHolidayLookupError(Exception):
    pass


def fetch_bank_holidays(division: str = DEFAULT_DIVISION, timeout: float = 30) -> set[str]:
    """ISO dates (YYYY-MM-DD) of every bank holiday listed for division."""
    req = Request(BANK_HOLIDAYS_URL, headers={"Accept": "application/json", "User-Agent": "dependabot-merger"})
    try:
        with urlopen(req, timeout=timeout) as response:
            data = json.loads(response.read().decode())
    except (URLError, json.JSONDecodeError) as e:
        msg = f"Could not fetch bank holidays from {BANK_HOLIDAYS_URL}: {e}"
        raise BankHolidayLookupError(msg) from e

    if division not in data:
        msg = f"Unknown bank holiday division {division!r}; expected one of {', '.join(sorted(data))}"
        raise BankHolidayLookupError(msg)
    return {event["date"] for event in data[division].get("events", [])}


def is_bank_holiday(
    today: date | None = None,
    holidays: set[str] | None = None,
    division: str = DEFAULT_DIVISION,
    timeout: float = 30,
) -> bool:
    """True if today is a bank holiday in division. Pass holidays to skip the network call."""
    today = today or date.today()
    if holidays is None:
        holidays = fetch_bank_holidays(division, timeout=timeout)
    is_holiday = today.isoformat() in holidays
    log.debug("%s bank holiday in %s: %s", today.isoformat(), division, is_holiday)
    return is_holiday
