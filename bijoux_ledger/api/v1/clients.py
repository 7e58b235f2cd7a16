"""/v1/clients - customer contacts without a debt"""

from typing import List
from fastapi import APIRouter, Depends

from bijoux_ledger.api.dependencies import get_debt_service, get_request_id
from bijoux_ledger.api.errors import domain_errors
from bijoux_ledger.api.v1.schemas import ClientSchema, ContactRequest, DeletedResponse
from bijoux_ledger.domain.models import DebtRecord
from bijoux_ledger.services.debts import DebtService

router = APIRouter()


def _client(record: DebtRecord) -> ClientSchema:
    return ClientSchema(
        id=record.id,
        name=record.customer_name,
        phone=record.phone,
        created_at=record.created_at,
    )


@router.post("/clients", response_model=ClientSchema)
def save_client(
    request_body: ContactRequest,
    request_id: str = Depends(get_request_id),
    service: DebtService = Depends(get_debt_service),
):
    """Add a client, or update the phone number of an existing one"""
    with domain_errors(request_id):
        record = service.record_contact(request_body.name, request_body.phone)
    return _client(record)


@router.get("/clients", response_model=List[ClientSchema])
def list_clients(
    request_id: str = Depends(get_request_id),
    service: DebtService = Depends(get_debt_service),
):
    with domain_errors(request_id):
        records = service.list_clients()
    return [_client(r) for r in records]


@router.delete("/clients/{name}", response_model=DeletedResponse)
def delete_client(
    name: str,
    request_id: str = Depends(get_request_id),
    service: DebtService = Depends(get_debt_service),
):
    """Remove contact-only entries; debts under the same name are kept"""
    with domain_errors(request_id):
        deleted = service.delete_contact(name)
    return DeletedResponse(deleted=deleted)
