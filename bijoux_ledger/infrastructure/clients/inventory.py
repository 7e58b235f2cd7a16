"""Inventory catalog HTTP client for stock decrements"""

import time
import httpx
from bijoux_ledger.domain.exceptions import InventoryAdjustmentError
from bijoux_ledger.config import settings


class InventoryClient:
    """Client for an external inventory catalog service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int = 3,
        backoff_base: float = 0.2,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url or settings.inventory_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.transport = transport

    def decrement_stock(self, item_name: str, quantity: int) -> None:
        """
        Ask the catalog to remove ``quantity`` units of ``item_name``.

        Retry strategy:
        - Only connection failures are retried (the request never reached the
          catalog, so a retry cannot decrement twice)
        - Exponential backoff: base, 2*base, 4*base

        Raises:
            InventoryAdjustmentError: On timeout, HTTP status or transport errors, or exhausted retries
        """
        attempt = 0
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    response = client.post(
                        f"{self.base_url}/inventory/decrement",
                        json={"item_name": item_name, "quantity": quantity},
                    )
                    response.raise_for_status()
                    return

                except httpx.ConnectError as e:
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise InventoryAdjustmentError(
                            f"Inventory catalog unreachable after {attempt} attempts"
                        ) from e
                    time.sleep(self.backoff_base * (2 ** (attempt - 1)))

                except httpx.TimeoutException as e:
                    raise InventoryAdjustmentError(f"Inventory catalog timeout after {self.timeout}s") from e
                except httpx.HTTPStatusError as e:
                    raise InventoryAdjustmentError(
                        f"Inventory catalog rejected decrement of {item_name!r}: {e.response.status_code}"
                    ) from e
                except httpx.HTTPError as e:
                    raise InventoryAdjustmentError(f"Inventory catalog request failed: {e!r}") from e
