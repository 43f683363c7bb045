"""Transfer collaborator.

The default manager does not move anything itself: it appends each leg to
``transfer_instructions`` inside the settlement transaction, where a
downstream executor picks it up once committed.
"""
from typing import Protocol

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.px_clearing.domain.models import TransferInstruction

_INSERT_TRANSFER_SQL = text("""
    INSERT INTO transfer_instructions
        (order_hash, leg, from_address, to_address, collection, asset_type,
         item_ids, amounts, currency, amount)
    VALUES (:order_hash, :leg, :from_address, :to_address, :collection, :asset_type,
            :item_ids, :amounts, :currency, :amount)
""")


class TransferManager(Protocol):
    async def transfer(
        self, order_hash: str, instruction: TransferInstruction, db: AsyncSession
    ) -> None: ...


class OutboxTransferManager:
    async def transfer(
        self, order_hash: str, instruction: TransferInstruction, db: AsyncSession
    ) -> None:
        await db.execute(
            _INSERT_TRANSFER_SQL,
            {
                "order_hash": order_hash,
                "leg": instruction.leg.value,
                "from_address": instruction.from_address,
                "to_address": instruction.to_address,
                "collection": instruction.collection,
                "asset_type": instruction.asset_type.value if instruction.asset_type else None,
                "item_ids": list(instruction.item_ids),
                "amounts": list(instruction.amounts),
                "currency": instruction.currency,
                "amount": instruction.amount,
            },
        )
