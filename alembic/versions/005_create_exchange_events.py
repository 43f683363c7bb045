"""005: create exchange_events audit log

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE exchange_events (
            id              BIGSERIAL       PRIMARY KEY,
            event_type      VARCHAR(40)     NOT NULL,
            user_address    VARCHAR(42)     NOT NULL,
            payload         JSONB           NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("CREATE INDEX idx_exchange_events_user ON exchange_events (user_address, created_at);")
    op.execute("CREATE INDEX idx_exchange_events_type ON exchange_events (event_type);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS exchange_events CASCADE;")
