"""Inventory adjustment contract used by the settlement engine"""

from typing import Protocol


class InventoryAdjuster(Protocol):
    """Narrow view of the inventory catalog: decrement stock by item name"""

    def decrement_stock(self, item_name: str, quantity: int) -> None:
        """
        Remove ``quantity`` units of ``item_name`` from stock.

        Raises:
            InventoryAdjustmentError: Item unknown, not enough stock, or catalog unavailable
        """
        ...


class NullInventoryAdjuster:
    """Used when no catalog is configured; every decrement is a no-op"""

    def decrement_stock(self, item_name: str, quantity: int) -> None:
        return None
