"""Domain-specific exceptions

Each exception carries a ``user_message`` in the shop's language so the
presentation layer can show something actionable instead of a generic error.
"""


class DomainException(Exception):
    """Base exception for domain layer"""

    user_message = "Habaye ikosa. Ongera ugerageze."


class InvalidAmountError(DomainException):
    """Payment or debt amount is zero, negative or malformed"""

    user_message = "Andika umubare w'amafaranga yemewe"


class InvalidCostError(DomainException):
    """Cost basis is negative"""

    user_message = "Igiciro cyo kugura ntigishobora kuba munsi ya zeru"


class InvalidRecordError(DomainException):
    """Required text field (customer name, item name) is missing"""

    user_message = "Andika izina"


class DebtNotFoundError(DomainException):
    """Debt id does not reference an existing record"""

    user_message = "Ideni ntiribonetse"


class AlreadySettledError(DomainException):
    """Debt is already fully paid"""

    user_message = "Iri deni ryamaze kwishyurwa"


class ConcurrentModificationError(DomainException):
    """Conditional update lost a race; caller should retry with fresh state"""

    user_message = "Ideni ryahinduwe n'undi. Ongera ugerageze."


class MissingContactError(DomainException):
    """Customer has no phone number, so no message can be drafted"""

    user_message = "Umukiriya nta numero afite"


class StorageFailureError(DomainException):
    """Persistence layer is unavailable or rejected the write"""

    user_message = "Ububiko ntibubonetse. Ongera ugerageze nyuma."


class InventoryAdjustmentError(DomainException):
    """Inventory collaborator failed to decrement stock"""

    user_message = "Ububiko bwa bijoux ntibwahinduwe"
