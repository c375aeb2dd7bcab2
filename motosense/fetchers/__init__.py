"""External data fetchers."""

from motosense.fetchers.base import DataFetcher, HttpFetcher
from motosense.fetchers.fixture import DEFAULT_SOURCES, FixtureFetcher
from motosense.fetchers.payloads import (
    RaceResultItem,
    RaceScheduleItem,
    RaceWithResults,
    RiderDataItem,
    decode_payload,
    parse_datetime,
)

__all__ = [
    "DataFetcher",
    "HttpFetcher",
    "FixtureFetcher",
    "DEFAULT_SOURCES",
    "RaceScheduleItem",
    "RiderDataItem",
    "RaceResultItem",
    "RaceWithResults",
    "decode_payload",
    "parse_datetime",
]
