"""
Parsers for converting raw provider payloads to validated price series.

Market data arrives from the external data collaborator either as decoded
records (mappings with date/open/high/low/close/volume keys) or as a raw
JSON document. Both are normalized here into a ``MarketSeries``.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

import orjson

from ..errors import MalformedSeriesError
from ..utils.time import to_date
from .models import MarketSeries, PricePoint

PRICE_FIELDS = ("open", "high", "low", "close")


class ParseError(MalformedSeriesError):
    """Raised when a payload cannot be interpreted as daily price data."""
    pass


class InvalidPriceError(ParseError):
    """Raised when price data is invalid."""
    pass


class InvalidDateError(ParseError):
    """Raised when a record date cannot be parsed."""
    pass


def parse_json_payload(raw_data: Union[str, bytes]) -> Any:
    """
    Parse a raw JSON document.

    Args:
        raw_data: JSON text or bytes from the data provider

    Returns:
        Decoded document

    Raises:
        ParseError: If JSON parsing fails
    """
    try:
        return orjson.loads(raw_data)
    except orjson.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}", expected_format="json")


def parse_price_records(
    records: Iterable[Mapping[str, Any]],
    symbol: Optional[str] = None,
    *,
    sort: bool = True,
    drop_duplicates: bool = True
) -> MarketSeries:
    """
    Parse decoded price records into a MarketSeries.

    Records may use either lower-case keys or the capitalized keys common to
    charting APIs (``Date``, ``Open``, ``Close`` ...). Missing open/high/low
    fall back to the close, and missing volume to zero.

    Args:
        records: Iterable of record mappings
        symbol: Symbol the series belongs to
        sort: Sort records ascending by date before validation
        drop_duplicates: Keep only the last record for a repeated date

    Returns:
        Validated MarketSeries

    Raises:
        ParseError: If a record is malformed
        InvalidPriceError: If a price is missing, non-numeric or non-positive
        InvalidDateError: If a record date cannot be parsed
    """
    points = []

    for i, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise ParseError(
                f"Price record at index {i} must be a mapping",
                context={"symbol": symbol, "index": i},
            )
        points.append(_parse_single_record(record, i, symbol))

    if sort:
        points.sort(key=lambda point: point.date)

    if drop_duplicates:
        by_date = {point.date: point for point in points}
        points = [by_date[session] for session in sorted(by_date)] if sort else list(by_date.values())

    return MarketSeries(points, symbol=symbol)


def parse_series_payload(payload: Any, symbol: Optional[str] = None) -> MarketSeries:
    """
    Parse a provider payload into a MarketSeries.

    Accepted shapes:
        - JSON text/bytes of either shape below
        - ``[{"date": "2024-01-02", "close": 470.1, ...}, ...]``
        - ``{"symbol": "SPY", "data": [...records...]}``

    Raises:
        ParseError: If payload format is invalid
    """
    if isinstance(payload, (str, bytes)):
        payload = parse_json_payload(payload)

    if isinstance(payload, Mapping):
        if "data" not in payload:
            raise ParseError("Missing 'data' field in payload", context={"symbol": symbol})
        symbol = symbol or payload.get("symbol")
        payload = payload["data"]

    if not isinstance(payload, list):
        raise ParseError("'data' field must be a list of price records", context={"symbol": symbol})

    return parse_price_records(payload, symbol=symbol)


def _field(record: Mapping[str, Any], name: str) -> Any:
    if name in record:
        return record[name]
    return record.get(name.capitalize())


def _parse_single_record(record: Mapping[str, Any], index: int, symbol: Optional[str]) -> PricePoint:
    """Parse a single price record into a PricePoint."""
    raw_date = _field(record, "date")
    try:
        session = to_date(raw_date)
    except (TypeError, ValueError) as e:
        raise InvalidDateError(
            f"Invalid date {raw_date!r} at index {index}: {e}",
            context={"symbol": symbol, "index": index},
        )

    raw_close = _field(record, "close")
    if raw_close is None:
        raise InvalidPriceError(
            f"Missing close price at index {index}",
            context={"symbol": symbol, "index": index, "date": str(session)},
        )

    prices = {}
    for name in PRICE_FIELDS:
        raw_value = _field(record, name)
        if raw_value is None:
            raw_value = raw_close
        try:
            value = float(raw_value)
        except (TypeError, ValueError):
            raise InvalidPriceError(
                f"Invalid {name} price {raw_value!r} at index {index}",
                context={"symbol": symbol, "index": index, "date": str(session)},
            )
        if value <= 0:
            raise InvalidPriceError(
                f"All prices must be positive: {name}={value} at index {index}",
                context={"symbol": symbol, "index": index, "date": str(session)},
            )
        prices[name] = value

    raw_volume = _field(record, "volume")
    try:
        volume = float(raw_volume) if raw_volume is not None else 0.0
    except (TypeError, ValueError):
        raise ParseError(
            f"Invalid volume {raw_volume!r} at index {index}",
            context={"symbol": symbol, "index": index},
        )

    return PricePoint(date=session, volume=volume, **prices)
