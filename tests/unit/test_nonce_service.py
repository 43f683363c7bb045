"""Unit tests for NonceService (in-memory repository, mocked session)."""
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from src.px_common.errors import EmptyBatchError, NothingToIncrementError
from src.px_nonce.application.service import NonceService
from src.px_nonce.domain.models import ORDER_NONCE_EXECUTED


@pytest.fixture
def mock_db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(nonce_repo: Any) -> NonceService:
    return NonceService(repo=nonce_repo)


class TestViewGenerations:
    async def test_unknown_user_starts_at_zero(
        self, service: NonceService, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        state = await service.view_generations(ctx.maker, mock_db)
        assert (state.bid_nonce, state.ask_nonce) == (0, 0)


class TestCancelOrderNonces:
    async def test_empty_batch_rejected(
        self, service: NonceService, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        with pytest.raises(EmptyBatchError):
            await service.cancel_order_nonces(ctx.maker, [], mock_db)
        mock_db.commit.assert_not_awaited()

    async def test_nonces_flagged_and_committed(
        self, service: NonceService, nonce_repo: Any, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        result = await service.cancel_order_nonces(ctx.maker, [1, 2**256 - 1], mock_db)
        assert result == [1, 2**256 - 1]
        assert nonce_repo.order_nonces[(ctx.maker, 1)] == ORDER_NONCE_EXECUTED
        assert nonce_repo.order_nonces[(ctx.maker, 2**256 - 1)] == ORDER_NONCE_EXECUTED
        mock_db.commit.assert_awaited_once()

    async def test_cancel_is_idempotent(
        self, service: NonceService, nonce_repo: Any, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        await service.cancel_order_nonces(ctx.maker, [5], mock_db)
        await service.cancel_order_nonces(ctx.maker, [5], mock_db)
        assert nonce_repo.order_nonces == {(ctx.maker, 5): ORDER_NONCE_EXECUTED}

    async def test_cancel_overrides_partial_binding(
        self, service: NonceService, nonce_repo: Any, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        nonce_repo.order_nonces[(ctx.maker, 9)] = "0x" + "ab" * 32
        await service.cancel_order_nonces(ctx.maker, [9], mock_db)
        assert nonce_repo.order_nonces[(ctx.maker, 9)] == ORDER_NONCE_EXECUTED

    async def test_event_written(
        self, service: NonceService, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        await service.cancel_order_nonces(ctx.maker, [1], mock_db)
        params = mock_db.execute.await_args.args[1]
        assert params["event_type"] == "ORDER_NONCES_CANCELLED"

    async def test_failure_rolls_back(
        self, nonce_repo: Any, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        nonce_repo.set_order_nonce_status = AsyncMock(side_effect=RuntimeError("db down"))
        service = NonceService(repo=nonce_repo)
        with pytest.raises(RuntimeError):
            await service.cancel_order_nonces(ctx.maker, [1], mock_db)
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()


class TestCancelSubsetNonces:
    async def test_empty_batch_rejected(
        self, service: NonceService, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        with pytest.raises(EmptyBatchError):
            await service.cancel_subset_nonces(ctx.maker, [], mock_db)

    async def test_subsets_cancelled_idempotently(
        self, service: NonceService, nonce_repo: Any, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        await service.cancel_subset_nonces(ctx.maker, [3, 4], mock_db)
        await service.cancel_subset_nonces(ctx.maker, [3], mock_db)
        assert nonce_repo.subsets == {(ctx.maker, 3), (ctx.maker, 4)}


class TestBumpGenerations:
    async def test_nothing_selected_rejected(
        self, service: NonceService, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        with pytest.raises(NothingToIncrementError):
            await service.bump_generations(ctx.maker, False, False, mock_db)

    async def test_bid_only(
        self, service: NonceService, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        state = await service.bump_generations(ctx.maker, True, False, mock_db)
        assert (state.bid_nonce, state.ask_nonce) == (1, 0)

    async def test_both_sides(
        self, service: NonceService, mock_db: AsyncMock, ctx: SimpleNamespace
    ) -> None:
        await service.bump_generations(ctx.maker, True, True, mock_db)
        state = await service.bump_generations(ctx.maker, True, True, mock_db)
        assert (state.bid_nonce, state.ask_nonce) == (2, 2)
        assert mock_db.commit.await_count == 2
