"""004: create transfer_instructions outbox

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transfer_instructions (
            id              BIGSERIAL       PRIMARY KEY,
            order_hash      VARCHAR(66)     NOT NULL,
            leg             VARCHAR(20)     NOT NULL,
            from_address    VARCHAR(42)     NOT NULL,
            to_address      VARCHAR(42)     NOT NULL,
            collection      VARCHAR(42),
            asset_type      VARCHAR(20),
            item_ids        NUMERIC(78, 0)[] NOT NULL DEFAULT '{}',
            amounts         NUMERIC(78, 0)[] NOT NULL DEFAULT '{}',
            currency        VARCHAR(42),
            amount          NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transfer_leg CHECK (
                leg IN ('ASSET', 'SELLER_PROCEEDS', 'PROTOCOL_FEE', 'ROYALTY_FEE')
            ),
            CONSTRAINT ck_transfer_asset_type CHECK (
                asset_type IS NULL OR asset_type IN ('SINGLE_UNIT', 'MULTI_UNIT')
            ),
            CONSTRAINT ck_transfer_amount_non_negative CHECK (amount >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_transfer_instructions_order ON transfer_instructions (order_hash);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transfer_instructions CASCADE;")
