"""Trade normalizer — canonicalizes raw journal rows.

Raw rows arrive in whatever shape the journal happened to store them.
The normalizer is the single place that deals with that:

* P&L is coerced to a finite float; rows without one are dropped from the
  statistical pipeline (journaling adherence still sees them).
* ``emotional_state`` is resolved from any of its historical encodings
  (list, single tag, comma-separated string, JSON array, JSON object) to
  a tuple of upper-cased tags.
* Holding duration is derived from entry/exit times, with overnight
  trades wrapping past midnight.

Usage::

    trades = normalize(raw_rows)
    trades[0].emotions        # ("FOMO", "CONFIDENT")
    trades[0].duration_hours  # 2.5
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from typing import Any

from ..core.errors import InvalidTradeInputError
from ..core.models import NormalizedTrade, Trade

logger = logging.getLogger(__name__)

_TIME_FORMATS = ("%H:%M", "%H:%M:%S", "%H:%M:%S.%f")


# ------------------------------------------------------------------ #
# Input validation                                                     #
# ------------------------------------------------------------------ #

def coerce_trades(trades: Iterable[Trade | Mapping[str, Any]]) -> list[Trade]:
    """Validate the container and turn each row into a ``Trade``.

    Raises
    ------
    InvalidTradeInputError
        If ``trades`` is not a collection of trade records.
    """
    if trades is None or isinstance(trades, (str, bytes, Mapping, Trade)):
        raise InvalidTradeInputError(
            f"Expected a collection of trades, got {type(trades).__name__}"
        )
    try:
        rows = list(trades)
    except TypeError as exc:
        raise InvalidTradeInputError(
            f"Expected a collection of trades, got {type(trades).__name__}"
        ) from exc

    result: list[Trade] = []
    for index, row in enumerate(rows):
        if isinstance(row, Trade):
            result.append(row)
        elif isinstance(row, Mapping):
            result.append(Trade.model_validate(dict(row)))
        else:
            raise InvalidTradeInputError(
                f"Trade #{index} is a {type(row).__name__}, expected a mapping"
            )
    return result


# ------------------------------------------------------------------ #
# Scalar coercion                                                      #
# ------------------------------------------------------------------ #

def coerce_number(value: Any) -> float | None:
    """Finite float from ``value``, or ``None`` when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_trade_date(value: Any) -> date | None:
    """Calendar date from an ISO string, ``date`` or ``datetime``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    parsed = _parse_datetime(text)
    return parsed.date() if parsed is not None else None


def _parse_datetime(text: str) -> datetime | None:
    if "T" not in text and " " not in text.strip():
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_time_of_day(value: Any) -> time | None:
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    return None


def _hours_of_day(moment: time) -> float:
    return (
        moment.hour
        + moment.minute / 60
        + moment.second / 3600
        + moment.microsecond / 3_600_000_000
    )


def _as_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return _parse_datetime(value.strip())
    return None


# ------------------------------------------------------------------ #
# Duration                                                             #
# ------------------------------------------------------------------ #

def compute_duration_hours(entry_time: Any, exit_time: Any) -> float | None:
    """Holding duration in hours, or ``None`` when it cannot be derived.

    Two full datetimes give the real elapsed time (a negative span is
    inconsistent and yields ``None``).  Time-of-day values wrap past
    midnight: an exit earlier than the entry adds 24 hours.
    """
    if entry_time is None or exit_time is None:
        return None

    entry_dt = _as_datetime(entry_time)
    exit_dt = _as_datetime(exit_time)
    if entry_dt is not None and exit_dt is not None:
        if (entry_dt.tzinfo is None) != (exit_dt.tzinfo is None):
            entry_dt = entry_dt.replace(tzinfo=None)
            exit_dt = exit_dt.replace(tzinfo=None)
        hours = (exit_dt - entry_dt).total_seconds() / 3600
        return hours if hours >= 0 else None

    entry_tod = entry_dt.time() if entry_dt is not None else _parse_time_of_day(entry_time)
    exit_tod = exit_dt.time() if exit_dt is not None else _parse_time_of_day(exit_time)
    if entry_tod is None or exit_tod is None:
        return None

    hours = _hours_of_day(exit_tod) - _hours_of_day(entry_tod)
    if hours < 0:
        hours += 24.0  # Overnight trade
    return hours


# ------------------------------------------------------------------ #
# Emotional state                                                      #
# ------------------------------------------------------------------ #

def _string_values(obj: Mapping[Any, Any]) -> list[str]:
    return [v for v in obj.values() if isinstance(v, str)]


def _tags_from_text(text: str) -> list[str]:
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    else:
        if parsed is None:
            return []
        if isinstance(parsed, list):
            return [v for v in parsed if isinstance(v, str)]
        if isinstance(parsed, dict):
            return _string_values(parsed)
        if isinstance(parsed, str):
            return [parsed]
        # Numbers and booleans fall through to plain-text handling

    segments = [s.strip() for s in text.split(",")]
    segments = [s for s in segments if s]
    return segments or [text]


def resolve_emotions(value: Any) -> tuple[str, ...]:
    """Canonical emotion tags for any stored ``emotional_state`` encoding.

    Tries, in order: a list of tags, a mapping (every string field is a
    tag), a JSON string (array, object or string), a comma-separated
    string, and finally the whole string as a single tag.  Never raises;
    empty input resolves to ``()``.
    """
    if value is None:
        return ()

    if isinstance(value, (list, tuple, set, frozenset)):
        raw = [v for v in value if isinstance(v, str)]
    elif isinstance(value, Mapping):
        raw = _string_values(value)
    elif isinstance(value, str):
        text = value.strip()
        raw = _tags_from_text(text) if text else []
    else:
        raw = [str(value)]

    tags: list[str] = []
    for tag in raw:
        canonical = tag.strip().upper()
        if canonical and canonical not in tags:
            tags.append(canonical)
    return tuple(tags)


# ------------------------------------------------------------------ #
# Normalization                                                        #
# ------------------------------------------------------------------ #

def _chronological_key(
    item: tuple[int, NormalizedTrade],
) -> tuple[int, date, float, int]:
    index, trade = item
    entry = _parse_time_of_day(trade.trade.entry_time)
    if entry is None:
        entry_dt = _as_datetime(trade.trade.entry_time)
        entry = entry_dt.time() if entry_dt is not None else None
    entry_hours = _hours_of_day(entry) if entry is not None else 0.0
    if trade.trade_date is None:
        return (1, date.min, 0.0, index)
    return (0, trade.trade_date, entry_hours, index)


def normalize_trade(trade: Trade) -> NormalizedTrade | None:
    """Normalize one trade; ``None`` when it has no realized P&L."""
    pnl = coerce_number(trade.pnl)
    if pnl is None:
        return None
    return NormalizedTrade(
        trade=trade,
        pnl=pnl,
        quantity=coerce_number(trade.quantity) or 0.0,
        entry_price=coerce_number(trade.entry_price) or 0.0,
        trade_date=parse_trade_date(trade.trade_date),
        emotions=resolve_emotions(trade.emotional_state),
        duration_hours=compute_duration_hours(trade.entry_time, trade.exit_time),
    )


def normalize(trades: Iterable[Trade | Mapping[str, Any]]) -> list[NormalizedTrade]:
    """Normalize a trade history into chronological, P&L-bearing trades."""
    return normalize_rows(coerce_trades(trades))


def normalize_rows(rows: list[Trade]) -> list[NormalizedTrade]:
    """``normalize`` for rows that are already ``Trade`` models."""
    normalized: list[NormalizedTrade] = []
    dropped = 0
    for row in rows:
        item = normalize_trade(row)
        if item is None:
            dropped += 1
            continue
        normalized.append(item)

    if dropped:
        logger.debug(
            "Normalizer: dropped %d of %d trades without a realized P&L",
            dropped,
            len(rows),
        )

    ordered = sorted(enumerate(normalized), key=_chronological_key)
    return [trade for _, trade in ordered]
