"""ORM reference models must stay in step with the raw-SQL schema and domain enums."""
from sqlalchemy import Numeric, String

from src.px_clearing.infrastructure.db_models import ExchangeEventORM, TransferInstructionORM
from src.px_common.database import Base
from src.px_common.enums import AssetType, EventType, TransferLeg
from src.px_currency.infrastructure.db_models import CurrencyORM
from src.px_nonce.infrastructure.db_models import OrderNonceORM, SubsetNonceORM, UserNonceORM
from src.px_strategy.infrastructure.db_models import StrategyORM

UINT256_DIGITS = 78  # len(str(2**256 - 1))


def test_all_tables_registered() -> None:
    assert set(Base.metadata.tables) >= {
        "user_nonces",
        "order_nonces",
        "subset_nonces",
        "strategies",
        "currencies",
        "transfer_instructions",
        "exchange_events",
    }


def test_uint256_columns_hold_full_range() -> None:
    assert len(str(2**256 - 1)) == UINT256_DIGITS
    for column in (
        UserNonceORM.__table__.c.bid_nonce,
        UserNonceORM.__table__.c.ask_nonce,
        OrderNonceORM.__table__.c.order_nonce,
        SubsetNonceORM.__table__.c.subset_nonce,
        TransferInstructionORM.__table__.c.amount,
    ):
        assert isinstance(column.type, Numeric)
        assert column.type.precision == UINT256_DIGITS
        assert column.type.scale == 0


def test_order_nonce_status_fits_order_hash() -> None:
    status = OrderNonceORM.__table__.c.status.type
    assert isinstance(status, String)
    assert status.length == len("0x" + "00" * 32)


def test_enum_values_fit_their_columns() -> None:
    leg = TransferInstructionORM.__table__.c.leg.type.length
    asset = TransferInstructionORM.__table__.c.asset_type.type.length
    event = ExchangeEventORM.__table__.c.event_type.type.length
    assert all(len(v.value) <= leg for v in TransferLeg)
    assert all(len(v.value) <= asset for v in AssetType)
    assert all(len(v.value) <= event for v in EventType)


def test_primary_keys() -> None:
    assert [c.name for c in StrategyORM.__table__.primary_key] == ["id"]
    assert [c.name for c in CurrencyORM.__table__.primary_key] == ["address"]
    assert [c.name for c in OrderNonceORM.__table__.primary_key] == ["user_address", "order_nonce"]
