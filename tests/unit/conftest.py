"""Unit-test fixtures: in-memory repositories, a savepoint-aware fake session,
deterministic wallets and a fully wired MatchingEngine.
"""

import copy
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import replace
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest
from eth_keys import keys
from eth_utils import to_checksum_address

from src.px_clearing.domain.models import TransferInstruction
from src.px_clearing.infrastructure.royalty import StaticRoyaltyRegistry
from src.px_common.enums import AssetType, QuoteType
from src.px_common.errors import InternalError
from src.px_matching.engine.engine import MatchingEngine
from src.px_nonce.domain.models import ORDER_NONCE_EXECUTED, UserNonceState
from src.px_order.domain.models import MakerOrder, TakerOrder
from src.px_signature.domain.hashing import Eip712Domain
from src.px_strategy.domain.models import StrategyRecord
from src.px_strategy.infrastructure.oracle import OracleConfig, PriceFeedRegistry

NOW = 1_700_000_000
ONE = 10**18

MAKER_KEY = keys.PrivateKey(b"\x11" * 32)
TAKER_KEY = keys.PrivateKey(b"\x22" * 32)
MAKER = MAKER_KEY.public_key.to_checksum_address()
TAKER = TAKER_KEY.public_key.to_checksum_address()
COLLECTION = to_checksum_address("0x" + "c0" * 20)
CURRENCY = to_checksum_address("0x" + "ee" * 20)
FEE_RECIPIENT = to_checksum_address("0x" + "fe" * 20)
ROYALTY_RECIPIENT = to_checksum_address("0x" + "a1" * 20)


def sign_digest(key: keys.PrivateKey, digest: bytes) -> bytes:
    """65-byte r ‖ s ‖ v signature with v in {27, 28}."""
    sig = key.sign_msg_hash(digest)
    return sig.r.to_bytes(32, "big") + sig.s.to_bytes(32, "big") + bytes([sig.v + 27])


# ---------------------------------------------------------------------------
# In-memory repositories
# ---------------------------------------------------------------------------


class FakeNonceRepository:
    def __init__(self) -> None:
        self.generations: dict[str, tuple[int, int]] = {}
        self.order_nonces: dict[tuple[str, int], str] = {}
        self.subsets: set[tuple[str, int]] = set()

    async def get_generations(self, user: str, db: Any) -> UserNonceState:
        bid, ask = self.generations.get(user, (0, 0))
        return UserNonceState(user=user, bid_nonce=bid, ask_nonce=ask)

    async def increment_generations(
        self, user: str, bid: bool, ask: bool, db: Any
    ) -> UserNonceState:
        bid_nonce, ask_nonce = self.generations.get(user, (0, 0))
        self.generations[user] = (bid_nonce + int(bid), ask_nonce + int(ask))
        return await self.get_generations(user, db)

    async def get_order_nonce_status(
        self, user: str, order_nonce: int, db: Any, for_update: bool = False
    ) -> str | None:
        return self.order_nonces.get((user, order_nonce))

    async def set_order_nonce_status(
        self, user: str, order_nonce: int, status: str, db: Any
    ) -> None:
        if self.order_nonces.get((user, order_nonce)) == ORDER_NONCE_EXECUTED:
            return
        self.order_nonces[(user, order_nonce)] = status

    async def claim_order_nonce(
        self, user: str, order_nonce: int, order_hash: str, status: str, db: Any
    ) -> bool:
        if self.order_nonces.get((user, order_nonce), order_hash) != order_hash:
            return False
        self.order_nonces[(user, order_nonce)] = status
        return True

    async def is_subset_cancelled(self, user: str, subset_nonce: int, db: Any) -> bool:
        return (user, subset_nonce) in self.subsets

    async def cancel_subset_nonces(self, user: str, subset_nonces: list[int], db: Any) -> None:
        self.subsets.update((user, n) for n in subset_nonces)


class FakeStrategyRepository:
    def __init__(self) -> None:
        self.records: dict[int, StrategyRecord] = {}

    async def add(
        self,
        has_royalties: bool,
        protocol_fee_bp: int,
        max_protocol_fee_bp: int,
        implementation: str,
        db: Any,
    ) -> StrategyRecord:
        record = StrategyRecord(
            strategy_id=len(self.records),
            is_active=True,
            has_royalties=has_royalties,
            protocol_fee_bp=protocol_fee_bp,
            max_protocol_fee_bp=max_protocol_fee_bp,
            implementation=implementation,
        )
        self.records[record.strategy_id] = record
        return record

    async def update(
        self, strategy_id: int, has_royalties: bool, protocol_fee_bp: int, is_active: bool, db: Any
    ) -> None:
        self.records[strategy_id] = replace(
            self.records[strategy_id],
            has_royalties=has_royalties,
            protocol_fee_bp=protocol_fee_bp,
            is_active=is_active,
        )

    async def get_by_id(self, strategy_id: int, db: Any) -> StrategyRecord | None:
        return self.records.get(strategy_id)

    async def list_all(self, db: Any) -> list[StrategyRecord]:
        return [self.records[k] for k in sorted(self.records)]


class FakeCurrencyRepository:
    def __init__(self, allowed: set[str] | None = None) -> None:
        self.allowed: set[str] = set(allowed or ())

    async def is_allowed(self, currency: str, db: Any) -> bool:
        return currency in self.allowed

    async def set_status(self, currency: str, is_allowed: bool, db: Any) -> None:
        if is_allowed:
            self.allowed.add(currency)
        else:
            self.allowed.discard(currency)


class RecordingTransferManager:
    """Collects transfer legs; ``fail_on`` makes the n-th transfer raise."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, TransferInstruction]] = []
        self.fail_on: int | None = None

    async def transfer(self, order_hash: str, instruction: TransferInstruction, db: Any) -> None:
        if self.fail_on is not None and len(self.sent) == self.fail_on:
            raise InternalError("transfer rejected")
        self.sent.append((order_hash, instruction))


class FakeSession:
    """AsyncSession stand-in whose ``begin_nested`` restores tracked fakes on error."""

    def __init__(self, tracked: list[Any]) -> None:
        self._tracked = tracked
        self.execute = AsyncMock()
        self.commit = AsyncMock()
        self.rollback = AsyncMock()

    @asynccontextmanager
    async def begin_nested(self) -> AsyncIterator[None]:
        snapshot = [copy.deepcopy(obj.__dict__) for obj in self._tracked]
        try:
            yield
        except BaseException:
            for obj, state in zip(self._tracked, snapshot):
                obj.__dict__.clear()
                obj.__dict__.update(state)
            raise


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def domain() -> Eip712Domain:
    return Eip712Domain("PeerExchange", "1", 1, "0x0000000000000000000000000000000000000e01")


@pytest.fixture
def nonce_repo() -> FakeNonceRepository:
    return FakeNonceRepository()


@pytest.fixture
def strategy_repo() -> FakeStrategyRepository:
    repo = FakeStrategyRepository()
    repo.records[0] = StrategyRecord(
        strategy_id=0,
        is_active=True,
        has_royalties=True,
        protocol_fee_bp=200,
        max_protocol_fee_bp=5000,
        implementation="standard",
    )
    return repo


@pytest.fixture
def currency_repo() -> FakeCurrencyRepository:
    return FakeCurrencyRepository({CURRENCY})


@pytest.fixture
def transfers() -> RecordingTransferManager:
    return RecordingTransferManager()


@pytest.fixture
def royalties() -> StaticRoyaltyRegistry:
    registry = StaticRoyaltyRegistry()
    registry.set_royalty(COLLECTION, ROYALTY_RECIPIENT, 100)
    return registry


@pytest.fixture
def feeds() -> PriceFeedRegistry:
    return PriceFeedRegistry()


@pytest.fixture
def session(
    nonce_repo: FakeNonceRepository, transfers: RecordingTransferManager
) -> FakeSession:
    return FakeSession([nonce_repo, transfers])


@pytest.fixture
def make_session() -> Callable[..., FakeSession]:
    """Extra sessions, e.g. one per simulated worker; untracked unless given fakes."""

    def _make(*tracked: Any) -> FakeSession:
        return FakeSession(list(tracked))

    return _make


@pytest.fixture
def engine(
    domain: Eip712Domain,
    nonce_repo: FakeNonceRepository,
    strategy_repo: FakeStrategyRepository,
    currency_repo: FakeCurrencyRepository,
    royalties: StaticRoyaltyRegistry,
    transfers: RecordingTransferManager,
    feeds: PriceFeedRegistry,
) -> MatchingEngine:
    return MatchingEngine(
        domain=domain,
        nonce_repo=nonce_repo,
        strategy_repo=strategy_repo,
        currency_repo=currency_repo,
        royalties=royalties,
        transfers=transfers,
        feeds=feeds,
        oracle=OracleConfig(max_latency=3600),
        protocol_fee_recipient=FEE_RECIPIENT,
        clock=lambda: NOW,
    )


@pytest.fixture
def make_maker() -> Callable[..., MakerOrder]:
    def _make(**overrides: Any) -> MakerOrder:
        fields: dict[str, Any] = {
            "quote_type": QuoteType.BID,
            "global_nonce": 0,
            "subset_nonce": 0,
            "order_nonce": 0,
            "strategy_id": 0,
            "asset_type": AssetType.SINGLE_UNIT,
            "collection": COLLECTION,
            "currency": CURRENCY,
            "signer": MAKER,
            "start_time": NOW - 60,
            "end_time": NOW + 3600,
            "price": ONE,
            "item_ids": (7,),
            "amounts": (1,),
        }
        fields.update(overrides)
        return MakerOrder(**fields)

    return _make


@pytest.fixture
def make_taker() -> Callable[..., TakerOrder]:
    def _make(**overrides: Any) -> TakerOrder:
        fields: dict[str, Any] = {
            "quote_type": QuoteType.ASK,
            "recipient": TAKER,
            "price": ONE,
            "item_ids": (7,),
            "amounts": (1,),
        }
        fields.update(overrides)
        return TakerOrder(**fields)

    return _make


@pytest.fixture
def sign(domain: Eip712Domain) -> Callable[..., bytes]:
    def _sign(maker: MakerOrder, key: keys.PrivateKey = MAKER_KEY) -> bytes:
        return sign_digest(key, domain.maker_digest(maker))

    return _sign


@pytest.fixture
def ctx() -> SimpleNamespace:
    """Constants shared by the fixtures above (wallets, clock, amounts)."""
    return SimpleNamespace(
        now=NOW,
        one=ONE,
        maker=MAKER,
        maker_key=MAKER_KEY,
        taker=TAKER,
        taker_key=TAKER_KEY,
        collection=COLLECTION,
        currency=CURRENCY,
        fee_recipient=FEE_RECIPIENT,
        royalty_recipient=ROYALTY_RECIPIENT,
        sign_digest=sign_digest,
    )
