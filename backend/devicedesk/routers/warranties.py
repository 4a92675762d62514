"""Warranty ticket API (devices sent to a manufacturer service center)."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response

from .. import schemas
from ..services.export import export_filename, warranty_tickets_csv
from ..services.lifecycle import save_warranty_ticket
from ..services.listing import filter_warranty_tickets, paginate
from ..services.views import NameResolver
from ..session import require_session
from ..store import EntityStore, get_store

router = APIRouter(prefix="/warranties", tags=["Warranties"], dependencies=[Depends(require_session)])


@router.get("/", response_model=schemas.Page[schemas.WarrantyTicket])
def list_warranties(
    request: Request,
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    store: EntityStore = Depends(get_store),
):
    resolver = NameResolver((), store.organizations.list())
    matched = filter_warranty_tickets(store.warranties.list(), resolver, search, status_filter)
    return paginate(matched, page, request.app.state.settings.page_size)


@router.get("/export")
def export_warranties(store: EntityStore = Depends(get_store)):
    resolver = NameResolver((), store.organizations.list())
    content = warranty_tickets_csv(store.warranties.list(), resolver)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename("warranty_report")}"'},
    )


@router.post("/", response_model=schemas.WarrantyTicket, status_code=status.HTTP_201_CREATED)
def create_warranty(payload: schemas.WarrantyTicketIn, store: EntityStore = Depends(get_store)):
    return save_warranty_ticket(store, payload)


@router.get("/{ticket_id}", response_model=schemas.WarrantyTicket)
def get_warranty(ticket_id: str, store: EntityStore = Depends(get_store)):
    ticket = store.warranties.get(ticket_id)
    if not ticket:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Warranty ticket not found")
    return ticket


@router.put("/{ticket_id}", response_model=schemas.WarrantyTicket)
def update_warranty(ticket_id: str, payload: schemas.WarrantyTicketIn, store: EntityStore = Depends(get_store)):
    return save_warranty_ticket(store, payload, ticket_id)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_warranty(ticket_id: str, store: EntityStore = Depends(get_store)):
    store.warranties.delete(ticket_id)
