"""002: create strategies table and seed the standard sale strategy

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE strategies (
            id                  INTEGER         PRIMARY KEY,
            is_active           BOOLEAN         NOT NULL DEFAULT TRUE,
            has_royalties       BOOLEAN         NOT NULL,
            protocol_fee_bp     SMALLINT        NOT NULL,
            max_protocol_fee_bp SMALLINT        NOT NULL,
            implementation      VARCHAR(40)     NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_strategies_id_non_negative CHECK (id >= 0),
            CONSTRAINT ck_strategies_fee_caps
                CHECK (protocol_fee_bp >= 0 AND protocol_fee_bp <= max_protocol_fee_bp)
        );
    """)
    op.execute("""
        INSERT INTO strategies
            (id, is_active, has_royalties, protocol_fee_bp, max_protocol_fee_bp, implementation)
        VALUES (0, TRUE, TRUE, 200, 5000, 'standard');
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS strategies CASCADE;")
