"""Customer message templates (pure, no transport)"""

import re
from dataclasses import dataclass
from typing import Dict, Optional

from bijoux_ledger.domain.money import format_currency

COUNTRY_CODE = "250"


@dataclass(frozen=True)
class MessageCatalog:
    """Locale-specific phrasing. Placeholders: {items}, {amount}"""

    debt_confirmation: str
    debt_reminder: str
    cash_acknowledgment: str
    remaining_balance: str
    currency_label: str = "FRW"


KINYARWANDA = MessageCatalog(
    debt_confirmation="Muraho mufashe {items} amafaranga muzishyura ni {amount}. MERCI BEAUCOUP CHER CLIENT",
    debt_reminder="Muraho, mwampaye kuri {items} amafaranga muzishyura ni {amount}",
    cash_acknowledgment="Muraho neza! Wampaye kuri cash nshuti. Merci!!",
    remaining_balance="Amafaranga asigaye ni {amount}.",
)

ENGLISH = MessageCatalog(
    debt_confirmation="Hello, you took {items}. The amount to pay is {amount}. Thank you, dear customer!",
    debt_reminder="Hello, a reminder about {items}: the amount to pay is {amount}",
    cash_acknowledgment="Hello! Thank you for paying in cash. Merci!!",
    remaining_balance="Remaining balance: {amount}.",
)

CATALOGS: Dict[str, MessageCatalog] = {"rw": KINYARWANDA, "en": ENGLISH}


def get_catalog(locale: str) -> MessageCatalog:
    """Catalog for a locale code, Kinyarwanda when unknown"""
    return CATALOGS.get(locale, KINYARWANDA)


def compose_debt_confirmation(items: str, amount_cents: int, catalog: MessageCatalog = KINYARWANDA) -> str:
    """Message sent right after a debt is recorded"""
    return catalog.debt_confirmation.format(
        items=items, amount=format_currency(amount_cents, catalog.currency_label)
    )


def compose_debt_reminder(items: str, amount_cents: int, catalog: MessageCatalog = KINYARWANDA) -> str:
    """Reminder for an outstanding balance"""
    return catalog.debt_reminder.format(
        items=items, amount=format_currency(amount_cents, catalog.currency_label)
    )


def compose_thank_you(
    template: str,
    remaining_cents: Optional[int] = None,
    catalog: MessageCatalog = KINYARWANDA,
) -> str:
    """
    Thank-you text after a payment.

    A full settlement (no remainder) returns the template untouched; a partial
    payment appends the remaining balance so the customer knows what is left.
    """
    if not remaining_cents:
        return template
    balance = catalog.remaining_balance.format(
        amount=format_currency(remaining_cents, catalog.currency_label)
    )
    return f"{template} {balance}"


def compose_cash_acknowledgment(catalog: MessageCatalog = KINYARWANDA) -> str:
    return catalog.cash_acknowledgment


def normalize_phone(phone: str) -> str:
    """
    Convert a local number to the international form used by chat apps.

    "078 123 4567" -> "250781234567"; numbers already prefixed are kept.
    """
    digits = re.sub(r"[\s\-()+]", "", phone)
    if digits.startswith("0"):
        digits = COUNTRY_CODE + digits[1:]
    if not digits.startswith(COUNTRY_CODE):
        digits = COUNTRY_CODE + digits
    return digits
