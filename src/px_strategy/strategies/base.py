"""ExecutionStrategy interface shared by every pricing variant.

A strategy is bound to the engine that built it; ``execute_with_taker`` is
only reachable through that engine, so nonces, fees and transfers are always
applied around a settlement decision.
"""
from typing import Any, Protocol

from src.px_common.enums import QuoteType
from src.px_common.errors import AppError, WrongCallerError
from src.px_order.domain.models import MakerOrder, TakerOrder
from src.px_strategy.domain.models import SettlementResult, ValidationResult


class ExecutionStrategy(Protocol):
    def supports(self, maker_quote_type: QuoteType) -> bool: ...

    def validate(self, maker: MakerOrder) -> ValidationResult: ...

    def execute_with_taker(
        self, caller: Any, taker: TakerOrder, maker: MakerOrder, now: int
    ) -> SettlementResult: ...


class BoundStrategy:
    """Common plumbing: owner binding, side support and raise-to-result validation."""

    maker_sides: frozenset[QuoteType] = frozenset({QuoteType.BID, QuoteType.ASK})

    def __init__(self, owner: Any) -> None:
        self._owner = owner

    def ensure_caller(self, caller: Any) -> None:
        if caller is not self._owner:
            raise WrongCallerError()

    def supports(self, maker_quote_type: QuoteType) -> bool:
        return maker_quote_type in self.maker_sides

    def validate(self, maker: MakerOrder) -> ValidationResult:
        try:
            self.check_maker(maker)
        except AppError as exc:
            return ValidationResult.from_error(exc)
        return ValidationResult.ok()

    def check_maker(self, maker: MakerOrder) -> None:
        """Raise for maker-only defects. Subclasses override."""
