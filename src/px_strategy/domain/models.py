"""Domain models for px_strategy — pure dataclasses, no business logic."""

from dataclasses import dataclass

from src.px_common.errors import AppError

STANDARD_STRATEGY_ID = 0


@dataclass
class StrategyRecord:
    strategy_id: int
    is_active: bool
    has_royalties: bool
    protocol_fee_bp: int
    max_protocol_fee_bp: int
    implementation: str  # StrategyCatalog key


@dataclass(frozen=True)
class SettlementResult:
    """What a strategy decided will execute for one (maker, taker) pair."""

    price: int
    item_ids: tuple[int, ...]
    amounts: tuple[int, ...]
    is_nonce_invalidated: bool = True


@dataclass(frozen=True)
class ValidationResult:
    """Pre-flight outcome: never raised, always returned."""

    is_valid: bool
    error_code: int | None = None
    message: str = ""

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def from_error(cls, exc: AppError) -> "ValidationResult":
        return cls(is_valid=False, error_code=exc.code, message=exc.message)
