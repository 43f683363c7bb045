"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Caller / Auth
  2xxx: Signature
  3xxx: Nonce
  4xxx: Order validation
  5xxx: Oracle
  6xxx: Configuration
  9xxx: System

Every failure raised during a settlement attempt aborts the whole operation;
the caller must fix the input and resubmit.
"""

from enum import Enum


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Caller / Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid signature or expired token", 401)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Refresh token is invalid or expired", 401)


class UnauthorizedError(AppError):
    def __init__(self, address: str) -> None:
        super().__init__(1003, f"Caller {address} is not an operator", 403)


class WrongCallerError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Strategy can only be executed by its matching engine", 403)


class ChallengeExpiredError(AppError):
    def __init__(self, address: str) -> None:
        super().__init__(1005, f"No pending login challenge for {address}", 401)


# --- 2xxx: Signature ---

class SignatureLengthInvalidError(AppError):
    def __init__(self, length: int) -> None:
        super().__init__(2001, f"Signature length invalid: {length} bytes", 422)


class SignatureParameterVInvalidError(AppError):
    def __init__(self, v: int) -> None:
        super().__init__(2002, f"Signature parameter v invalid: {v}", 422)


class SignatureParameterSInvalidError(AppError):
    def __init__(self) -> None:
        super().__init__(2003, "Signature parameter s is above half the curve order", 422)


class NullSignerAddressError(AppError):
    def __init__(self) -> None:
        super().__init__(2004, "Signature recovers to the null address", 422)


class SignatureEOAInvalidError(AppError):
    def __init__(self, signer: str) -> None:
        super().__init__(2005, f"Signature does not match signer {signer}", 422)


class MerkleProofInvalidError(AppError):
    def __init__(self) -> None:
        super().__init__(2006, "Merkle proof does not reproduce the signed root", 422)


class MerkleProofTooLargeError(AppError):
    def __init__(self, length: int) -> None:
        super().__init__(2007, f"Merkle proof too large: {length} nodes", 422)


# --- 3xxx: Nonce ---

class NonceInvalidReason(str, Enum):
    GENERATION_MISMATCH = "GENERATION_MISMATCH"
    ALREADY_EXECUTED_OR_CANCELLED = "ALREADY_EXECUTED_OR_CANCELLED"
    SUBSET_CANCELLED = "SUBSET_CANCELLED"


class NonceInvalidError(AppError):
    """Composite nonce failure. ``reason`` is kept for logs and tests only."""

    def __init__(self, reason: NonceInvalidReason) -> None:
        self.reason = reason
        super().__init__(3001, "Order nonce invalid", 422)


class EmptyBatchError(AppError):
    def __init__(self) -> None:
        super().__init__(3002, "Nonce batch must not be empty", 400)


class NothingToIncrementError(AppError):
    def __init__(self) -> None:
        super().__init__(3003, "Neither bid nor ask generation selected", 400)


# --- 4xxx: Order validation ---

class OrderInvalidReason(str, Enum):
    LENGTH_MISMATCH = "LENGTH_MISMATCH"
    ZERO_AMOUNT = "ZERO_AMOUNT"
    AMOUNT_INVALID = "AMOUNT_INVALID"
    DUPLICATE_OR_UNSORTED_IDS = "DUPLICATE_OR_UNSORTED_IDS"
    PRICE_MISMATCH = "PRICE_MISMATCH"
    ITEM_MISMATCH = "ITEM_MISMATCH"
    AMOUNT_MISMATCH = "AMOUNT_MISMATCH"
    INVALID_RANGE = "INVALID_RANGE"
    QUOTE_TYPE_MISMATCH = "QUOTE_TYPE_MISMATCH"
    STRATEGY_SIDE_MISMATCH = "STRATEGY_SIDE_MISMATCH"
    DISCOUNT_TOO_HIGH = "DISCOUNT_TOO_HIGH"
    PARAMETERS_INVALID = "PARAMETERS_INVALID"
    MIN_NET_RATIO_INVALID = "MIN_NET_RATIO_INVALID"


class OrderInvalidError(AppError):
    def __init__(self, reason: OrderInvalidReason, detail: str = "") -> None:
        self.reason = reason
        message = f"Order invalid: {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(4001, message, 422)


class BidTooLowError(AppError):
    def __init__(self, bid: int, required: int) -> None:
        super().__init__(4002, f"Bid too low: offered {bid}, required {required}", 422)


class OutsideOfTimeRangeError(AppError):
    def __init__(self, now: int, start_time: int, end_time: int) -> None:
        super().__init__(
            4003, f"Time {now} outside of order window [{start_time}, {end_time})", 422
        )


class WrongCurrencyError(AppError):
    def __init__(self, currency: str) -> None:
        super().__init__(4004, f"Currency not whitelisted: {currency}", 422)


class StrategyNotActiveError(AppError):
    def __init__(self, strategy_id: int) -> None:
        super().__init__(4005, f"Strategy not active: {strategy_id}", 422)


class NetProceedsTooLowError(AppError):
    def __init__(self, net: int, minimum: int) -> None:
        super().__init__(4006, f"Net proceeds {net} below maker minimum {minimum}", 422)


# --- 5xxx: Oracle ---

class PriceStaleError(AppError):
    def __init__(self, age: int, max_latency: int) -> None:
        super().__init__(5001, f"Oracle price stale: {age}s old, max {max_latency}s", 422)


class PriceNonPositiveError(AppError):
    def __init__(self, answer: int) -> None:
        super().__init__(5002, f"Oracle price not positive: {answer}", 422)


class PriceFeedUnavailableError(AppError):
    def __init__(self, key: str) -> None:
        super().__init__(5003, f"No price feed for {key}", 422)


# --- 6xxx: Configuration ---

class StrategyProtocolFeeTooHighError(AppError):
    def __init__(self, fee_bp: int, limit_bp: int) -> None:
        super().__init__(6001, f"Protocol fee {fee_bp}bp exceeds limit {limit_bp}bp", 422)


class StrategyNotFoundError(AppError):
    def __init__(self, strategy_id: int) -> None:
        super().__init__(6002, f"Strategy not found: {strategy_id}", 404)


class StrategyImplementationInvalidError(AppError):
    def __init__(self, implementation: str) -> None:
        super().__init__(6003, f"Unknown strategy implementation: {implementation}", 422)


class LatencyToleranceTooHighError(AppError):
    def __init__(self, latency: int, limit: int) -> None:
        super().__init__(6004, f"Oracle latency {latency}s exceeds limit {limit}s", 422)


class LatencyToleranceNegativeError(AppError):
    def __init__(self, latency: int) -> None:
        super().__init__(6005, f"Oracle latency {latency}s must not be negative", 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
