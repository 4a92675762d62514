"""FastAPI entrypoint with API + lightweight dashboard."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Form, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .config import Settings, get_settings
from .constants import RepairStatus
from .errors import EntityNotFound, IntegrityViolation, StoreWriteError, TicketValidationError
from .routers import customers, organizations, repairs, session, shipping, stats, warranties
from .services.views import dashboard_summary, failure_statistics, monthly_trend
from .session import SessionContext, get_session
from .store import EntityStore, LocalStorage, build_store, get_store

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TicketValidationError)
    async def validation_failed(request: Request, exc: TicketValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message, "fields": exc.fields})

    @app.exception_handler(EntityNotFound)
    async def entity_not_found(request: Request, exc: EntityNotFound):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(IntegrityViolation)
    async def integrity_violation(request: Request, exc: IntegrityViolation):
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.exception_handler(StoreWriteError)
    async def write_failed(request: Request, exc: StoreWriteError):
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)})


def create_app(settings: Optional[Settings] = None, storage: Optional[LocalStorage] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)

    storage = storage or LocalStorage(settings.local_store_path)
    store = build_store(settings, storage)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        store.close()

    app = FastAPI(title=settings.app_name, version="1.0.0", lifespan=lifespan)
    session_context = SessionContext(storage, offline=store.backend == "local")
    session_context.restore()

    app.state.settings = settings
    app.state.store = store
    app.state.session = session_context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if STATIC_DIR.exists():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    _register_error_handlers(app)

    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "ok", "environment": settings.environment, "backend": store.backend}

    @app.get("/", response_class=HTMLResponse, tags=["Dashboard"])
    def dashboard(
        request: Request,
        context: SessionContext = Depends(get_session),
        store: EntityStore = Depends(get_store),
    ):
        if context.current is None:
            return RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)

        tickets = store.tickets.list()
        summary = dashboard_summary(tickets, store.warranties.list(), store.customers.list(), store.organizations.list())
        failures = failure_statistics(tickets)
        trend = monthly_trend(tickets)

        page = {
            "request": request,
            "user": context.current.email,
            "offline": context.offline,
            "summary": summary,
            "failures": failures,
            "stats": {
                "total": summary.total,
                "processing": next(
                    (item.count for item in summary.by_status if item.label == RepairStatus.PROCESSING.value), 0
                ),
                "completion_rate": f"{summary.completion_rate}%",
            },
            "charts": {
                "status": {
                    "labels": [item.label for item in summary.by_status],
                    "counts": [item.count for item in summary.by_status],
                },
                "devices": {
                    "labels": [item.label for item in summary.by_device],
                    "counts": [item.count for item in summary.by_device],
                },
                "trend": {"labels": [item.label for item in trend], "counts": [item.count for item in trend]},
            },
            "now": datetime.now().strftime("%Y-%m-%d %H:%M"),
        }
        return templates.TemplateResponse(request, "dashboard.html", page)

    @app.get("/login", response_class=HTMLResponse, tags=["Dashboard"])
    def login_page(request: Request, context: SessionContext = Depends(get_session)):
        return templates.TemplateResponse(request, "login.html", {"request": request, "offline": context.offline})

    @app.post("/login", tags=["Dashboard"])
    def login_form(email: str = Form(..., min_length=3, max_length=200), context: SessionContext = Depends(get_session)):
        context.sign_in(email)
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)

    @app.post("/logout", tags=["Dashboard"])
    def logout(context: SessionContext = Depends(get_session)):
        context.sign_out()
        return RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)

    app.include_router(session.router)
    app.include_router(organizations.router)
    app.include_router(customers.router)
    app.include_router(repairs.router)
    app.include_router(warranties.router)
    app.include_router(stats.router)
    app.include_router(shipping.router)

    logger.info("%s started with the %s backend", settings.app_name, store.backend)
    return app


app = create_app()
