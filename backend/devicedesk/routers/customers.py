"""Customer API, including a customer's repair history."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from .. import schemas
from ..services.history import customer_tickets
from ..services.lifecycle import save_customer
from ..services.listing import filter_customers, paginate
from ..services.views import NameResolver
from ..session import require_session
from ..store import EntityStore, get_store

router = APIRouter(prefix="/customers", tags=["Customers"], dependencies=[Depends(require_session)])


@router.get("/", response_model=schemas.Page[schemas.Customer])
def list_customers(
    request: Request,
    search: Optional[str] = Query(None),
    organization_id: Optional[str] = Query(None, alias="organization"),
    page: int = Query(1, ge=1),
    store: EntityStore = Depends(get_store),
):
    customers = store.customers.list()
    if organization_id:
        customers = [customer for customer in customers if customer.organization_id == organization_id]
    resolver = NameResolver((), store.organizations.list())
    matched = filter_customers(customers, resolver, search)
    return paginate(matched, page, request.app.state.settings.page_size)


@router.post("/", response_model=schemas.Customer, status_code=status.HTTP_201_CREATED)
def create_customer(payload: schemas.CustomerIn, store: EntityStore = Depends(get_store)):
    return save_customer(store, payload)


@router.get("/{customer_id}", response_model=schemas.Customer)
def get_customer(customer_id: str, store: EntityStore = Depends(get_store)):
    customer = store.customers.get(customer_id)
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


@router.get("/{customer_id}/tickets", response_model=List[schemas.RepairTicket])
def list_customer_tickets(customer_id: str, store: EntityStore = Depends(get_store)):
    return customer_tickets(customer_id, store.tickets.list())


@router.put("/{customer_id}", response_model=schemas.Customer)
def update_customer(customer_id: str, payload: schemas.CustomerIn, store: EntityStore = Depends(get_store)):
    return save_customer(store, payload, customer_id)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(customer_id: str, store: EntityStore = Depends(get_store)):
    store.customers.delete(customer_id)
