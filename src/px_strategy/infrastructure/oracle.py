"""Price oracle collaborator.

Feeds follow the aggregator shape: ``latest_answer()`` returns the signed
answer and the unix time it was last updated; ``decimals()`` the fixed-point
precision of the answer. The settlement engine only ever reads feeds.
"""
import logging
from dataclasses import dataclass, field
from typing import Protocol

from eth_utils import to_checksum_address

from src.px_common.bps import WEI_DECIMALS, rescale
from src.px_common.errors import (
    LatencyToleranceNegativeError,
    LatencyToleranceTooHighError,
    PriceFeedUnavailableError,
    PriceNonPositiveError,
    PriceStaleError,
)

logger = logging.getLogger(__name__)

MAX_LATENCY_CEILING = 3600


class PriceFeed(Protocol):
    def latest_answer(self) -> tuple[int, int]: ...

    def decimals(self) -> int: ...


@dataclass
class StaticPriceFeed:
    """In-process feed; ``set_answer`` stands in for an oracle round update."""

    answer: int
    updated_at: int
    feed_decimals: int = WEI_DECIMALS

    def latest_answer(self) -> tuple[int, int]:
        return self.answer, self.updated_at

    def decimals(self) -> int:
        return self.feed_decimals

    def set_answer(self, answer: int, updated_at: int) -> None:
        self.answer = answer
        self.updated_at = updated_at


@dataclass
class OracleConfig:
    max_latency: int = MAX_LATENCY_CEILING

    def set_max_latency(self, max_latency: int) -> None:
        if max_latency < 0:
            raise LatencyToleranceNegativeError(max_latency)
        if max_latency > MAX_LATENCY_CEILING:
            raise LatencyToleranceTooHighError(max_latency, MAX_LATENCY_CEILING)
        self.max_latency = max_latency
        logger.info("Oracle max latency set to %ds", max_latency)


@dataclass
class PriceFeedRegistry:
    """Collection floor feeds keyed by checksummed address, plus one USD feed."""

    floor_feeds: dict[str, PriceFeed] = field(default_factory=dict)
    usd_feed: PriceFeed | None = None

    def set_floor_feed(self, collection: str, feed: PriceFeed) -> None:
        self.floor_feeds[to_checksum_address(collection)] = feed

    def floor_feed(self, collection: str) -> PriceFeed:
        feed = self.floor_feeds.get(to_checksum_address(collection))
        if feed is None:
            raise PriceFeedUnavailableError(collection)
        return feed

    def usd(self) -> PriceFeed:
        if self.usd_feed is None:
            raise PriceFeedUnavailableError("USD")
        return self.usd_feed


def read_price(feed: PriceFeed, now: int, max_latency: int) -> int:
    """Return the raw feed answer after the positivity and staleness checks."""
    answer, updated_at = feed.latest_answer()
    if answer <= 0:
        raise PriceNonPositiveError(answer)
    age = now - updated_at
    if age > max_latency:
        raise PriceStaleError(age, max_latency)
    return answer


def read_price_wei(feed: PriceFeed, now: int, max_latency: int) -> int:
    """``read_price`` rescaled to 18 decimals."""
    return rescale(read_price(feed, now, max_latency), feed.decimals(), WEI_DECIMALS)
