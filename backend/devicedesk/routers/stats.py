"""Dashboard and failure statistics."""

from typing import List

from fastapi import APIRouter, Depends, Query

from .. import schemas
from ..services.views import dashboard_summary, failure_statistics, monthly_trend
from ..session import require_session
from ..store import EntityStore, get_store

router = APIRouter(prefix="/stats", tags=["Stats"], dependencies=[Depends(require_session)])


@router.get("/dashboard", response_model=schemas.DashboardOut)
def dashboard_stats(store: EntityStore = Depends(get_store)):
    return dashboard_summary(
        store.tickets.list(), store.warranties.list(), store.customers.list(), store.organizations.list()
    )


@router.get("/devices", response_model=schemas.FailureStatsOut)
def device_stats(store: EntityStore = Depends(get_store)):
    return failure_statistics(store.tickets.list())


@router.get("/trend", response_model=List[schemas.LabelCount])
def trend_stats(months: int = Query(6, ge=1, le=24), store: EntityStore = Depends(get_store)):
    return monthly_trend(store.tickets.list(), months)
