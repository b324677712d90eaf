"""REST API for the CRM dashboard: customers, tickets and metrics."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import API_HOST, API_PORT, CORS_ORIGINS, LOG_LEVEL, SEED_DEMO_DATA
from app.crm_store import CrmStore, seed_demo_data
from app.errors import AppError, BadRequestError, to_body
from app.models import (
    ApiResponse,
    CreateCustomerInput,
    CreateTicketInput,
    Customer,
    CustomerPayload,
    DashboardMetrics,
    Ticket,
    TicketPayload,
)

logger = logging.getLogger(__name__)

SATISFACTION_MIN = 0.0
SATISFACTION_MAX = 5.0

router = APIRouter(prefix="/crm")


def get_store(request: Request) -> CrmStore:
    """The app's single CrmStore."""
    return request.app.state.store


def clamp_satisfaction(value: Optional[float]) -> float:
    """Missing counts as 0; anything outside [0, 5] is pulled to the nearest bound."""
    return min(max(float(value or 0), SATISFACTION_MIN), SATISFACTION_MAX)


@router.get("/customers", response_model=ApiResponse[list[Customer]])
def list_customers(store: CrmStore = Depends(get_store)) -> ApiResponse[list[Customer]]:
    """All customers, newest first."""
    return ApiResponse[list[Customer]](content=store.list_customers())


@router.post("/customers", response_model=ApiResponse[Customer])
def create_customer(payload: CustomerPayload, store: CrmStore = Depends(get_store)) -> ApiResponse[Customer]:
    """Create a customer. name, company, email, segment and status are required; satisfaction is clamped to [0, 5]."""
    if not (payload.name and payload.company and payload.email and payload.segment and payload.status):
        raise BadRequestError("Missing required fields when creating customer.")
    customer = store.create_customer(
        CreateCustomerInput(
            name=payload.name,
            company=payload.company,
            email=payload.email,
            segment=payload.segment,
            status=payload.status,
            satisfaction=clamp_satisfaction(payload.satisfaction),
            notes=payload.notes,
        )
    )
    return ApiResponse[Customer](content=customer)


@router.get("/tickets", response_model=ApiResponse[list[Ticket]])
def list_tickets(store: CrmStore = Depends(get_store)) -> ApiResponse[list[Ticket]]:
    """All tickets, newest first."""
    return ApiResponse[list[Ticket]](content=store.list_tickets())


@router.post("/tickets", response_model=ApiResponse[Ticket])
def create_ticket(payload: TicketPayload, store: CrmStore = Depends(get_store)) -> ApiResponse[Ticket]:
    """
    Open a ticket. customerId, subject, priority, channel and slaHours are required
    (slaHours of 0 is rejected too). Status defaults to open.
    """
    if not (payload.customer_id and payload.subject and payload.priority and payload.channel and payload.sla_hours):
        raise BadRequestError("Missing required fields when opening ticket.")
    ticket = store.create_ticket(
        CreateTicketInput(
            customer_id=payload.customer_id,
            subject=payload.subject,
            priority=payload.priority,
            channel=payload.channel,
            sla_hours=float(payload.sla_hours),
            status=payload.status,
        )
    )
    return ApiResponse[Ticket](content=ticket)


@router.get("/metrics", response_model=ApiResponse[DashboardMetrics])
def get_metrics(store: CrmStore = Depends(get_store)) -> ApiResponse[DashboardMetrics]:
    """Dashboard snapshot, recomputed on every call."""
    return ApiResponse[DashboardMetrics](content=store.get_dashboard_metrics())


def create_app(store: Optional[CrmStore] = None) -> FastAPI:
    """
    Build the API around `store`.
    When no store is given a fresh one is created (seeded with demo data if SEED_DEMO_DATA).
    """
    if store is None:
        store = CrmStore()
        if SEED_DEMO_DATA:
            seed_demo_data(store)

    application = FastAPI(
        title="CRM Dashboard API",
        description="In-memory customers and support tickets with dashboard metrics.",
        version="0.1.0",
    )
    application.state.store = store

    application.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @application.exception_handler(AppError)
    async def app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
        logger.info("Rejected request: %s", exc.message)
        return JSONResponse(status_code=exc.status_code, content=to_body(exc))

    @application.get("/health")
    def health() -> dict:
        """Health check."""
        return {"status": "ok"}

    application.include_router(router)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.info("API starting on %s:%d.", API_HOST, API_PORT)
    uvicorn.run(app, host=API_HOST, port=API_PORT)
