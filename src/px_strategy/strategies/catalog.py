from typing import Any

from src.px_common.errors import StrategyImplementationInvalidError
from src.px_strategy.infrastructure.oracle import OracleConfig, PriceFeedRegistry
from src.px_strategy.strategies.base import ExecutionStrategy
from src.px_strategy.strategies.chainlink_floor import FloorFromChainlinkStrategy, FloorMode
from src.px_strategy.strategies.item_ids_range import ItemIdsRangeStrategy
from src.px_strategy.strategies.standard import StandardSaleStrategy
from src.px_strategy.strategies.usd_dynamic_ask import USDDynamicAskStrategy

IMPLEMENTATION_KEYS: tuple[str, ...] = (
    "standard",
    "item_ids_range",
    "floor_premium_fixed",
    "floor_premium_bp",
    "floor_discount_fixed",
    "floor_discount_bp",
    "usd_dynamic_ask",
)


class StrategyCatalog:
    """Implementation key -> strategy instance, all bound to one owning engine."""

    def __init__(
        self,
        owner: Any,
        feeds: PriceFeedRegistry | None = None,
        oracle: OracleConfig | None = None,
    ) -> None:
        self.feeds = feeds or PriceFeedRegistry()
        self.oracle = oracle or OracleConfig()
        self._strategies: dict[str, ExecutionStrategy] = {
            "standard": StandardSaleStrategy(owner),
            "item_ids_range": ItemIdsRangeStrategy(owner),
            "usd_dynamic_ask": USDDynamicAskStrategy(owner, self.feeds, self.oracle),
        }
        for mode in FloorMode:
            self._strategies[f"floor_{mode.value}"] = FloorFromChainlinkStrategy(
                owner, mode, self.feeds, self.oracle
            )

    def keys(self) -> list[str]:
        return list(self._strategies)

    def has(self, implementation: str) -> bool:
        return implementation in self._strategies

    def register(self, implementation: str, strategy: ExecutionStrategy) -> None:
        """Install or replace the strategy served under ``implementation``."""
        self._strategies[implementation] = strategy

    def resolve(self, implementation: str) -> ExecutionStrategy:
        strategy = self._strategies.get(implementation)
        if strategy is None:
            raise StrategyImplementationInvalidError(implementation)
        return strategy
