"""Organization API."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from .. import schemas
from ..services.lifecycle import save_organization
from ..services.listing import filter_organizations, paginate
from ..session import require_session
from ..store import EntityStore, get_store

router = APIRouter(prefix="/organizations", tags=["Organizations"], dependencies=[Depends(require_session)])


@router.get("/", response_model=schemas.Page[schemas.Organization])
def list_organizations(
    request: Request,
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    store: EntityStore = Depends(get_store),
):
    matched = filter_organizations(store.organizations.list(), search)
    return paginate(matched, page, request.app.state.settings.page_size)


@router.post("/", response_model=schemas.Organization, status_code=status.HTTP_201_CREATED)
def create_organization(payload: schemas.OrganizationIn, store: EntityStore = Depends(get_store)):
    return save_organization(store, payload)


@router.get("/{organization_id}", response_model=schemas.Organization)
def get_organization(organization_id: str, store: EntityStore = Depends(get_store)):
    organization = store.organizations.get(organization_id)
    if not organization:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found")
    return organization


@router.put("/{organization_id}", response_model=schemas.Organization)
def update_organization(
    organization_id: str, payload: schemas.OrganizationIn, store: EntityStore = Depends(get_store)
):
    return save_organization(store, payload, organization_id)


@router.delete("/{organization_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_organization(organization_id: str, store: EntityStore = Depends(get_store)):
    store.organizations.delete(organization_id)
