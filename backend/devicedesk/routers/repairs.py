"""Repair ticket API."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response

from .. import schemas
from ..services.export import export_filename, repair_tickets_csv
from ..services.history import history_peers, history_title
from ..services.lifecycle import save_repair_ticket
from ..services.listing import filter_repair_tickets, paginate
from ..services.views import NameResolver
from ..session import require_session
from ..store import EntityStore, get_store

router = APIRouter(prefix="/repairs", tags=["Repairs"], dependencies=[Depends(require_session)])


def _resolver(store: EntityStore) -> NameResolver:
    return NameResolver(store.customers.list(), store.organizations.list())


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/", response_model=schemas.Page[schemas.RepairTicket])
def list_repairs(
    request: Request,
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    store: EntityStore = Depends(get_store),
):
    matched = filter_repair_tickets(store.tickets.list(), _resolver(store), search, status_filter)
    return paginate(matched, page, request.app.state.settings.page_size)


@router.get("/export")
def export_repairs(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    store: EntityStore = Depends(get_store),
):
    resolver = _resolver(store)
    matched = filter_repair_tickets(store.tickets.list(), resolver, search, status_filter)
    return _csv_response(repair_tickets_csv(matched, resolver), export_filename("repairs"))


@router.post("/", response_model=schemas.RepairTicket, status_code=status.HTTP_201_CREATED)
def create_repair(payload: schemas.RepairTicketIn, store: EntityStore = Depends(get_store)):
    return save_repair_ticket(store, payload)


@router.get("/{ticket_id}", response_model=schemas.RepairTicket)
def get_repair(ticket_id: str, store: EntityStore = Depends(get_store)):
    ticket = store.tickets.get(ticket_id)
    if not ticket:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ticket not found")
    return ticket


@router.get("/{ticket_id}/history", response_model=schemas.HistoryOut)
def repair_history(ticket_id: str, store: EntityStore = Depends(get_store)):
    tickets = store.tickets.list()
    ticket = next((item for item in tickets if item.id == ticket_id), None)
    if not ticket:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ticket not found")
    return schemas.HistoryOut(title=history_title(ticket, _resolver(store)), tickets=history_peers(ticket, tickets))


@router.put("/{ticket_id}", response_model=schemas.RepairTicket)
def update_repair(ticket_id: str, payload: schemas.RepairTicketIn, store: EntityStore = Depends(get_store)):
    return save_repair_ticket(store, payload, ticket_id)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_repair(ticket_id: str, store: EntityStore = Depends(get_store)):
    store.tickets.delete(ticket_id)
