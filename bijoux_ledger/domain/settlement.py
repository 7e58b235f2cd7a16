"""Settlement arithmetic for customer debt payments"""

from bijoux_ledger.domain.models import SettlementOutcome
from bijoux_ledger.domain.money import require_positive


def compute_settlement(amount_owed_cents: int, payment_cents: int) -> SettlementOutcome:
    """
    Apply a payment to an outstanding balance.

    Rules:
    - Payment must be positive
    - Any payment >= balance settles the debt; remainder is clamped to 0
    - Collected amount is the payment itself, overshoot included

    Example:
        owed 500000, paid 700000 -> remaining 0, settled, collected 700000
    """
    require_positive(payment_cents, "payment")

    remaining = amount_owed_cents - payment_cents
    if remaining <= 0:
        return SettlementOutcome(remaining_cents=0, fully_settled=True, collected_cents=payment_cents)

    return SettlementOutcome(remaining_cents=remaining, fully_settled=False, collected_cents=payment_cents)
