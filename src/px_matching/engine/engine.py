"""MatchingEngine — validates, authenticates and settles one (maker, taker) pair.

Every settlement runs inside one SAVEPOINT: the order-nonce flip and the
transfer legs commit or roll back together. The order-nonce row is read
FOR UPDATE and flipped with a compare-and-set, so concurrent workers settle
a signed order at most once. Within one process, settlements for signers
sharing a lock stripe are also serialized.
The application layer owns the outer commit.
"""
import asyncio
import logging
from collections.abc import Callable
from typing import Any

from eth_utils import to_checksum_address
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.px_clearing.domain.fee import check_min_net_proceeds, split_fees
from src.px_clearing.domain.models import FeeSplit, RoyaltyQuote, TransferInstruction
from src.px_clearing.infrastructure.events import write_event
from src.px_clearing.infrastructure.royalty import RoyaltyManager, StaticRoyaltyRegistry
from src.px_clearing.infrastructure.transfer_outbox import OutboxTransferManager, TransferManager
from src.px_common.datetime_utils import unix_now
from src.px_common.enums import EventType, QuoteType, TransferLeg
from src.px_common.errors import (
    AppError,
    NonceInvalidError,
    NonceInvalidReason,
    OrderInvalidError,
    OrderInvalidReason,
    StrategyNotActiveError,
    WrongCurrencyError,
)
from src.px_currency.domain.repository import CurrencyRepositoryProtocol
from src.px_currency.infrastructure.persistence import CurrencyRepository
from src.px_matching.domain.models import ExecutionReport
from src.px_nonce.domain.repository import NonceRepositoryProtocol
from src.px_nonce.domain.rules import check_maker_nonces, status_after_fill
from src.px_nonce.infrastructure.persistence import NonceRepository
from src.px_order.domain.models import MakerOrder, MerkleTree, TakerOrder
from src.px_order.domain.validation import (
    check_maker_structure,
    check_quote_type,
    check_time_window,
)
from src.px_signature.domain.hashing import Eip712Domain, hash_maker
from src.px_signature.domain.merkle import verify_proof
from src.px_signature.domain.verifier import SignatureVerifier
from src.px_strategy.domain.models import SettlementResult, StrategyRecord
from src.px_strategy.domain.repository import StrategyRepositoryProtocol
from src.px_strategy.infrastructure.oracle import OracleConfig, PriceFeedRegistry
from src.px_strategy.infrastructure.persistence import StrategyRepository
from src.px_strategy.strategies.base import ExecutionStrategy
from src.px_strategy.strategies.catalog import StrategyCatalog

logger = logging.getLogger(__name__)

_SIGNER_LOCK_STRIPES = 64


def default_domain() -> Eip712Domain:
    return Eip712Domain(
        name=settings.PROTOCOL_NAME,
        version=settings.PROTOCOL_VERSION,
        chain_id=settings.CHAIN_ID,
        verifying_contract=settings.EXCHANGE_ADDRESS,
    )


class MatchingEngine:
    def __init__(
        self,
        domain: Eip712Domain | None = None,
        nonce_repo: NonceRepositoryProtocol | None = None,
        strategy_repo: StrategyRepositoryProtocol | None = None,
        currency_repo: CurrencyRepositoryProtocol | None = None,
        verifier: SignatureVerifier | None = None,
        royalties: RoyaltyManager | None = None,
        transfers: TransferManager | None = None,
        feeds: PriceFeedRegistry | None = None,
        oracle: OracleConfig | None = None,
        protocol_fee_recipient: str | None = None,
        clock: Callable[[], int] = unix_now,
    ) -> None:
        self.domain = domain or default_domain()
        self.nonces: NonceRepositoryProtocol = nonce_repo or NonceRepository()
        self.strategies: StrategyRepositoryProtocol = strategy_repo or StrategyRepository()
        self.currencies: CurrencyRepositoryProtocol = currency_repo or CurrencyRepository()
        self.verifier = verifier or SignatureVerifier()
        self.royalties: RoyaltyManager = royalties or StaticRoyaltyRegistry()
        self.transfers: TransferManager = transfers or OutboxTransferManager()
        self.catalog = StrategyCatalog(
            self, feeds, oracle or OracleConfig(max_latency=settings.MAX_ORACLE_LATENCY)
        )
        self.protocol_fee_recipient = to_checksum_address(
            protocol_fee_recipient or settings.PROTOCOL_FEE_RECIPIENT
        )
        self._clock = clock
        self._signer_locks = [asyncio.Lock() for _ in range(_SIGNER_LOCK_STRIPES)]

    def _lock_for(self, signer: str) -> asyncio.Lock:
        return self._signer_locks[int(to_checksum_address(signer), 16) % _SIGNER_LOCK_STRIPES]

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def execute_taker_bid(
        self,
        sender: str,
        taker: TakerOrder,
        maker: MakerOrder,
        signature: bytes,
        db: AsyncSession,
        merkle_tree: MerkleTree | None = None,
        affiliate: str | None = None,
    ) -> ExecutionReport:
        """Sender buys from a maker ask."""
        return await self._execute(
            QuoteType.BID, sender, taker, maker, signature, db, merkle_tree, affiliate
        )

    async def execute_taker_ask(
        self,
        sender: str,
        taker: TakerOrder,
        maker: MakerOrder,
        signature: bytes,
        db: AsyncSession,
        merkle_tree: MerkleTree | None = None,
        affiliate: str | None = None,
    ) -> ExecutionReport:
        """Sender sells into a maker bid."""
        return await self._execute(
            QuoteType.ASK, sender, taker, maker, signature, db, merkle_tree, affiliate
        )

    async def check_maker_order(
        self,
        maker: MakerOrder,
        signature: bytes,
        db: AsyncSession,
        merkle_tree: MerkleTree | None = None,
    ) -> list[int]:
        """Pre-flight: error codes that would stop ``maker`` from executing now.

        Read-only and never raises for a domain failure. An empty list means
        the maker order is executable against a matching taker.
        """
        now = self._clock()
        order_hash = self._order_hash(maker)
        codes: list[int] = []

        def collect(check: Callable[[], Any]) -> None:
            try:
                check()
            except AppError as exc:
                codes.append(exc.code)

        collect(lambda: check_maker_structure(maker))
        collect(lambda: check_time_window(maker, now))
        try:
            await self._check_currency(maker, db)
        except AppError as exc:
            codes.append(exc.code)
        collect(lambda: self._check_signature(maker, signature, merkle_tree))
        try:
            await self._check_nonces(maker, order_hash, db)
        except AppError as exc:
            codes.append(exc.code)
        try:
            _, strategy = await self._resolve_strategy(maker, db)
        except AppError as exc:
            codes.append(exc.code)
        else:
            result = strategy.validate(maker)
            if not result.is_valid and result.error_code is not None:
                codes.append(result.error_code)
        return codes

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    async def _execute(
        self,
        taker_side: QuoteType,
        sender: str,
        taker: TakerOrder,
        maker: MakerOrder,
        signature: bytes,
        db: AsyncSession,
        merkle_tree: MerkleTree | None,
        affiliate: str | None,
    ) -> ExecutionReport:
        lock = self._lock_for(maker.signer)
        async with lock:
            try:
                async with db.begin_nested():
                    report = await self._execute_inner(
                        taker_side, sender, taker, maker, signature, db, merkle_tree, affiliate
                    )
            except AppError as exc:
                logger.warning(
                    "Taker %s rejected: signer=%s order_nonce=%d code=%d %s",
                    taker_side.value,
                    maker.signer,
                    maker.order_nonce,
                    exc.code,
                    exc.message,
                )
                raise
        logger.info(
            "Taker %s settled: order=%s strategy=%d price=%d protocol_fee=%d royalty=%d",
            taker_side.value,
            report.order_hash,
            report.strategy_id,
            report.settlement.price,
            report.fees.protocol_fee,
            report.fees.royalty_fee,
        )
        return report

    async def _execute_inner(
        self,
        taker_side: QuoteType,
        sender: str,
        taker: TakerOrder,
        maker: MakerOrder,
        signature: bytes,
        db: AsyncSession,
        merkle_tree: MerkleTree | None,
        affiliate: str | None,
    ) -> ExecutionReport:
        now = self._clock()
        sender = to_checksum_address(sender)
        order_hash = self._order_hash(maker)

        # 1-3. Shape, timing, currency
        check_maker_structure(maker)
        check_quote_type(maker, taker_side.opposite)
        check_time_window(maker, now)
        await self._check_currency(maker, db)

        # 4. Authentication
        self._check_signature(maker, signature, merkle_tree)

        # 5. Replay protection
        await self._check_nonces(maker, order_hash, db, for_update=True)

        # 6-7. Strategy decides what executes
        record, strategy = await self._resolve_strategy(maker, db)
        settlement = strategy.execute_with_taker(self, taker, maker, now)

        # 8. Nonce flip precedes any transfer
        status = status_after_fill(settlement.is_nonce_invalidated, order_hash)
        if not await self.nonces.claim_order_nonce(
            maker.signer, maker.order_nonce, order_hash, status, db
        ):
            raise NonceInvalidError(NonceInvalidReason.ALREADY_EXECUTED_OR_CANCELLED)

        # 9. Fees
        royalty: RoyaltyQuote | None = None
        if record.has_royalties:
            royalty = self.royalties.royalty_info(maker.collection, settlement.price)
        fees = split_fees(settlement.price, record.protocol_fee_bp, royalty)
        if not maker.is_bid:
            check_min_net_proceeds(fees, settlement.price, maker.min_net_ratio_bp)

        # 10. Transfers
        if taker_side is QuoteType.BID:
            buyer, seller = sender, to_checksum_address(maker.signer)
            asset_recipient, proceeds_recipient = to_checksum_address(taker.recipient), seller
        else:
            buyer, seller = to_checksum_address(maker.signer), sender
            asset_recipient, proceeds_recipient = buyer, to_checksum_address(taker.recipient)

        transfers = self._build_transfers(
            maker, settlement, fees, buyer, seller, asset_recipient, proceeds_recipient
        )
        for instruction in transfers:
            await self.transfers.transfer(order_hash, instruction, db)

        await write_event(
            EventType.TAKER_BID if taker_side is QuoteType.BID else EventType.TAKER_ASK,
            sender,
            {
                "order_hash": order_hash,
                "signer": maker.signer,
                "order_nonce": maker.order_nonce,
                "is_nonce_invalidated": settlement.is_nonce_invalidated,
                "strategy_id": maker.strategy_id,
                "collection": maker.collection,
                "currency": maker.currency,
                "item_ids": list(settlement.item_ids),
                "amounts": list(settlement.amounts),
                "price": settlement.price,
                "protocol_fee": fees.protocol_fee,
                "royalty_fee": fees.royalty_fee,
                "royalty_recipient": fees.royalty_recipient,
                "affiliate": affiliate,
            },
            db,
        )

        return ExecutionReport(
            order_hash=order_hash,
            quote_type=taker_side,
            strategy_id=maker.strategy_id,
            buyer=buyer,
            seller=seller,
            settlement=settlement,
            fees=fees,
            transfers=tuple(transfers),
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    @staticmethod
    def _order_hash(maker: MakerOrder) -> str:
        return "0x" + hash_maker(maker).hex()

    async def _check_currency(self, maker: MakerOrder, db: AsyncSession) -> None:
        if not await self.currencies.is_allowed(to_checksum_address(maker.currency), db):
            raise WrongCurrencyError(maker.currency)

    def _check_signature(
        self, maker: MakerOrder, signature: bytes, merkle_tree: MerkleTree | None
    ) -> None:
        if merkle_tree is None:
            digest = self.domain.maker_digest(maker)
        else:
            verify_proof(hash_maker(maker), merkle_tree.root, merkle_tree.proof)
            digest = self.domain.merkle_digest(merkle_tree.root)
        self.verifier.check(maker.signer, digest, signature)

    async def _check_nonces(
        self, maker: MakerOrder, order_hash: str, db: AsyncSession, for_update: bool = False
    ) -> None:
        state = await self.nonces.get_generations(maker.signer, db)
        status = await self.nonces.get_order_nonce_status(
            maker.signer, maker.order_nonce, db, for_update=for_update
        )
        subset_cancelled = await self.nonces.is_subset_cancelled(
            maker.signer, maker.subset_nonce, db
        )
        check_maker_nonces(maker, state, status, subset_cancelled, order_hash)

    async def _resolve_strategy(
        self, maker: MakerOrder, db: AsyncSession
    ) -> tuple[StrategyRecord, ExecutionStrategy]:
        record = await self.strategies.get_by_id(maker.strategy_id, db)
        if record is None or not record.is_active:
            raise StrategyNotActiveError(maker.strategy_id)
        strategy = self.catalog.resolve(record.implementation)
        if not strategy.supports(maker.quote_type):
            raise OrderInvalidError(
                OrderInvalidReason.STRATEGY_SIDE_MISMATCH,
                f"{record.implementation} does not accept maker {maker.quote_type.value}",
            )
        return record, strategy

    def _build_transfers(
        self,
        maker: MakerOrder,
        settlement: SettlementResult,
        fees: FeeSplit,
        buyer: str,
        seller: str,
        asset_recipient: str,
        proceeds_recipient: str,
    ) -> list[TransferInstruction]:
        transfers = [
            TransferInstruction(
                leg=TransferLeg.ASSET,
                from_address=seller,
                to_address=asset_recipient,
                collection=maker.collection,
                asset_type=maker.asset_type,
                item_ids=settlement.item_ids,
                amounts=settlement.amounts,
            )
        ]
        currency_legs = [
            (TransferLeg.SELLER_PROCEEDS, proceeds_recipient, fees.net_proceeds),
            (TransferLeg.PROTOCOL_FEE, self.protocol_fee_recipient, fees.protocol_fee),
            (TransferLeg.ROYALTY_FEE, fees.royalty_recipient, fees.royalty_fee),
        ]
        for leg, to_address, amount in currency_legs:
            if amount == 0 or to_address is None:
                continue
            transfers.append(
                TransferInstruction(
                    leg=leg,
                    from_address=buyer,
                    to_address=to_address,
                    currency=maker.currency,
                    amount=amount,
                )
            )
        return transfers
