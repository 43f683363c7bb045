"""DB helper for exchange_events — the append-only audit log.

Called within the caller's transaction, so a rolled-back settlement or
cancellation leaves no event behind.
"""
import json

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.px_common.enums import EventType

_INSERT_EVENT_SQL = text("""
    INSERT INTO exchange_events (event_type, user_address, payload)
    VALUES (:event_type, :user_address, :payload)
""")


async def write_event(
    event_type: EventType,
    user_address: str,
    payload: dict[str, object],
    db: AsyncSession,
) -> None:
    """Insert one row into exchange_events.

    Values json cannot encode natively (enums, bytes) are stored via str().
    """
    await db.execute(
        _INSERT_EVENT_SQL,
        {
            "event_type": event_type.value,
            "user_address": user_address,
            "payload": json.dumps(payload, default=str),
        },
    )
