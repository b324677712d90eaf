"""Data models for the CRM: customers, tickets and dashboard metrics."""

from datetime import datetime
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON (either accepted on input)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomerSegment(str, Enum):
    """Customer tier."""

    ENTERPRISE = "enterprise"
    SCALE_UP = "scale-up"
    SMB = "smb"


class CustomerStatus(str, Enum):
    ACTIVE = "active"
    CHURN_RISK = "churn-risk"
    ONBOARDING = "onboarding"


class TicketPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TicketStatus(str, Enum):
    OPEN = "open"
    PENDING = "pending"
    RESOLVED = "resolved"


class TicketChannel(str, Enum):
    EMAIL = "email"
    CHAT = "chat"
    PHONE = "phone"


# --- Entities ---


class Customer(CamelModel):
    """A customer account."""

    id: str = Field(..., description="Unique customer identifier (uuid4)")
    name: str
    company: str
    email: str
    segment: CustomerSegment
    status: CustomerStatus
    satisfaction: float = Field(..., description="Satisfaction score, expected 0-5 (not enforced)")
    last_contact: datetime = Field(..., description="When the customer was last contacted (UTC)")
    notes: Optional[str] = None


class Ticket(CamelModel):
    """A support ticket. customer_id is not checked against the customer list."""

    id: str = Field(..., description="Unique ticket identifier (uuid4)")
    customer_id: str
    subject: str
    priority: TicketPriority
    status: TicketStatus
    sla_hours: float = Field(..., description="Resolution window in hours from creation")
    channel: TicketChannel
    created_at: datetime
    resolved_at: Optional[datetime] = None


# --- Dashboard metrics (computed view, recomputed on every request) ---


class MetricSlice(CamelModel):
    """One labelled value of a chart: a percentage (one decimal) or a count."""

    label: str
    value: float


class DashboardKpis(CamelModel):
    average_satisfaction: float = Field(..., description="Mean satisfaction, two decimals")
    open_tickets: float = Field(..., description="Open tickets as a percentage of all tickets")
    delayed_tickets: int = Field(..., description="Number of tickets past their SLA deadline", ge=0)
    resolution_rate: float = Field(..., description="Resolved tickets as a percentage of all tickets")


class DashboardMetrics(CamelModel):
    """Snapshot shown on the dashboard."""

    kpis: DashboardKpis
    satisfaction_breakdown: list[MetricSlice]
    sla_performance: list[MetricSlice]
    backlog: list[MetricSlice]


# --- Store inputs (already validated by the API layer) ---


class CreateCustomerInput(CamelModel):
    name: str
    company: str
    email: str
    segment: CustomerSegment
    status: CustomerStatus
    satisfaction: float
    notes: Optional[str] = None


class CreateTicketInput(CamelModel):
    customer_id: str
    subject: str
    priority: TicketPriority
    channel: TicketChannel
    sla_hours: float
    status: Optional[TicketStatus] = Field(None, description="Defaults to open when omitted")


# --- Request bodies (required fields are checked by the route, not by pydantic) ---


class CustomerPayload(CamelModel):
    """Body of POST /crm/customers."""

    name: Optional[str] = None
    company: Optional[str] = None
    email: Optional[str] = None
    segment: Optional[CustomerSegment] = None
    status: Optional[CustomerStatus] = None
    satisfaction: Optional[FiniteFloat] = None
    notes: Optional[str] = None


class TicketPayload(CamelModel):
    """Body of POST /crm/tickets."""

    customer_id: Optional[str] = None
    subject: Optional[str] = None
    priority: Optional[TicketPriority] = None
    channel: Optional[TicketChannel] = None
    sla_hours: Optional[FiniteFloat] = None
    status: Optional[TicketStatus] = None


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform response envelope: HTTP status code plus content."""

    status: int = Field(default=200, description="HTTP status code")
    content: T
