"""Inventory adjuster backed by the shared database's inventory_item table"""

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from bijoux_ledger.domain.exceptions import InventoryAdjustmentError
from bijoux_ledger.infrastructure.database.models import InventoryItemRow


class SqlInventoryAdjuster:
    """Decrements stock in its own transaction, independent of the settlement"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def decrement_stock(self, item_name: str, quantity: int) -> None:
        """
        Conditional decrement: only succeeds when enough units remain.

        Names match case-insensitively; the first matching row is used.
        """
        if quantity <= 0:
            raise InventoryAdjustmentError(f"Quantity must be positive, got {quantity}")

        db: Session = self.session_factory()
        try:
            item = (
                db.query(InventoryItemRow)
                .filter(func.lower(InventoryItemRow.name) == item_name.strip().lower())
                .order_by(InventoryItemRow.id)
                .first()
            )
            if item is None:
                raise InventoryAdjustmentError(f"Unknown inventory item {item_name!r}")

            updated = (
                db.query(InventoryItemRow)
                .filter(InventoryItemRow.id == item.id, InventoryItemRow.quantity_on_hand >= quantity)
                .update(
                    {InventoryItemRow.quantity_on_hand: InventoryItemRow.quantity_on_hand - quantity},
                    synchronize_session=False,
                )
            )
            if updated != 1:
                raise InventoryAdjustmentError(
                    f"Not enough stock of {item_name!r} to remove {quantity}"
                )
            db.commit()

        except SQLAlchemyError as e:
            db.rollback()
            raise InventoryAdjustmentError(f"Inventory storage error: {e}") from e
        except InventoryAdjustmentError:
            db.rollback()
            raise
        finally:
            db.close()
