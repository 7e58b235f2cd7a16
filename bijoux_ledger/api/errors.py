"""Mapping from domain exceptions to HTTP responses"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Type
from fastapi import HTTPException

from bijoux_ledger.domain.exceptions import (
    AlreadySettledError,
    ConcurrentModificationError,
    DebtNotFoundError,
    DomainException,
    InvalidAmountError,
    InvalidCostError,
    InvalidRecordError,
    MissingContactError,
    StorageFailureError,
)

STATUS_BY_EXCEPTION: Dict[Type[DomainException], int] = {
    InvalidAmountError: 422,
    InvalidCostError: 422,
    InvalidRecordError: 422,
    MissingContactError: 422,
    DebtNotFoundError: 404,
    AlreadySettledError: 409,
    ConcurrentModificationError: 409,
    StorageFailureError: 503,
}


def status_for(error: DomainException) -> int:
    for exc_type in type(error).__mro__:
        if exc_type in STATUS_BY_EXCEPTION:
            return STATUS_BY_EXCEPTION[exc_type]
    return 500


@contextmanager
def domain_errors(request_id: str) -> Iterator[None]:
    """
    Translate domain failures into HTTP errors with an actionable message.

    Response detail: {"error": <exception name>, "message": <user message>}
    """
    try:
        yield

    except DomainException as e:
        status = status_for(e)
        log = logging.error if status >= 500 else logging.warning
        log(f"{type(e).__name__}: {e}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=status,
            detail={"error": type(e).__name__, "message": e.user_message},
        ) from e

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error") from e
