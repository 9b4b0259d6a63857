"""Emoji payload fetching and concurrent archive assembly."""

from emojitar.fetch.base import CallableFetcher, PayloadFetcher
from emojitar.fetch.cache import PayloadCache
from emojitar.fetch.cdn import CdnFetcher
from emojitar.fetch.coordinator import FetchCoordinator

__all__ = [
    "PayloadFetcher",
    "CallableFetcher",
    "CdnFetcher",
    "PayloadCache",
    "FetchCoordinator",
]
