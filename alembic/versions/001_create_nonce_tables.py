"""001: create nonce tables

Revision ID: 001
Revises: 
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE user_nonces (
            user_address    VARCHAR(42)     PRIMARY KEY,
            bid_nonce       NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            ask_nonce       NUMERIC(78, 0)  NOT NULL DEFAULT 0,
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_user_nonces_non_negative CHECK (bid_nonce >= 0 AND ask_nonce >= 0)
        );
    """)
    op.execute("""
        CREATE TABLE order_nonces (
            user_address    VARCHAR(42)     NOT NULL,
            order_nonce     NUMERIC(78, 0)  NOT NULL,
            status          VARCHAR(66)     NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (user_address, order_nonce)
        );
    """)
    op.execute("""
        CREATE TABLE subset_nonces (
            user_address    VARCHAR(42)     NOT NULL,
            subset_nonce    NUMERIC(78, 0)  NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (user_address, subset_nonce)
        );
    """)
    op.execute(
        "COMMENT ON COLUMN order_nonces.status IS "
        "'EXECUTED marker (terminal) or hash of the order partially consuming the nonce';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS subset_nonces CASCADE;")
    op.execute("DROP TABLE IF EXISTS order_nonces CASCADE;")
    op.execute("DROP TABLE IF EXISTS user_nonces CASCADE;")
