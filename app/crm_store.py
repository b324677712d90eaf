"""
In-memory CRM store: owns the customer and ticket lists (newest first).

Nothing is persisted; the data lives as long as the store instance. The API
keeps a single instance on app.state and hands it to route handlers.
"""

import logging
from collections import deque
from datetime import datetime, timedelta, timezone
from typing import Callable, Deque, List, Optional
from uuid import uuid4

from app.metrics import build_dashboard
from app.models import (
    CreateCustomerInput,
    CreateTicketInput,
    Customer,
    CustomerSegment,
    CustomerStatus,
    DashboardMetrics,
    Ticket,
    TicketChannel,
    TicketPriority,
    TicketStatus,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CrmStore:
    """Customers and tickets held in insertion order, most recent first."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        # appendleft keeps the newest record at index 0
        self._customers: Deque[Customer] = deque()
        self._tickets: Deque[Ticket] = deque()

    def now(self) -> datetime:
        return self._clock()

    def list_customers(self) -> List[Customer]:
        """Snapshot of all customers, newest first."""
        return list(self._customers)

    def list_tickets(self) -> List[Ticket]:
        """Snapshot of all tickets, newest first."""
        return list(self._tickets)

    def create_customer(self, data: CreateCustomerInput) -> Customer:
        """Assign an id, stamp last contact with the current time and put the customer first."""
        customer = Customer(
            id=str(uuid4()),
            last_contact=self.now(),
            **data.model_dump(),
        )
        self._customers.appendleft(customer)
        logger.info("Customer %s created (%s, %s).", customer.id, customer.company, customer.segment.value)
        return customer

    def create_ticket(self, data: CreateTicketInput) -> Ticket:
        """Assign an id, default the status to open, stamp creation time and put the ticket first."""
        fields = data.model_dump(exclude={"status"})
        ticket = Ticket(
            id=str(uuid4()),
            status=data.status or TicketStatus.OPEN,
            created_at=self.now(),
            **fields,
        )
        self._tickets.appendleft(ticket)
        logger.info(
            "Ticket %s created for customer %s (priority=%s, sla=%sh).",
            ticket.id, ticket.customer_id, ticket.priority.value, ticket.sla_hours,
        )
        return ticket

    def get_dashboard_metrics(self, now: Optional[datetime] = None) -> DashboardMetrics:
        """Compute the dashboard snapshot from the current lists."""
        return build_dashboard(self.list_customers(), self.list_tickets(), now or self.now())

    def load(self, customers: List[Customer], tickets: List[Ticket]) -> None:
        """Append existing records (already in newest-first order) after the current ones."""
        self._customers.extend(customers)
        self._tickets.extend(tickets)


def seed_demo_data(store: CrmStore, now: Optional[datetime] = None) -> None:
    """Load the demo customers and their tickets with timestamps relative to now."""
    now = now or store.now()
    customers = [
        Customer(
            id=str(uuid4()),
            name="Ana Souza",
            company="TechGrow",
            email="ana.souza@techgrow.io",
            segment=CustomerSegment.SCALE_UP,
            status=CustomerStatus.ACTIVE,
            satisfaction=4.7,
            last_contact=now,
            notes="Likes to hear about new integrations.",
        ),
        Customer(
            id=str(uuid4()),
            name="Carlos Pereira",
            company="Finvest",
            email="carlos.pereira@finvest.com",
            segment=CustomerSegment.ENTERPRISE,
            status=CustomerStatus.CHURN_RISK,
            satisfaction=3.1,
            last_contact=now - timedelta(days=6),
            notes="Asked for a contract review and an SLA adjustment.",
        ),
        Customer(
            id=str(uuid4()),
            name="Julia Ramos",
            company="LogiX",
            email="julia.ramos@logix.com",
            segment=CustomerSegment.SMB,
            status=CustomerStatus.ONBOARDING,
            satisfaction=4.2,
            last_contact=now - timedelta(days=2),
            notes="Needs a playbook for the sales team.",
        ),
    ]
    tickets = [
        Ticket(
            id=str(uuid4()),
            customer_id=customers[0].id,
            subject="Legacy CRM integration",
            priority=TicketPriority.HIGH,
            status=TicketStatus.PENDING,
            sla_hours=24,
            channel=TicketChannel.EMAIL,
            created_at=now - timedelta(hours=26),
        ),
        Ticket(
            id=str(uuid4()),
            customer_id=customers[1].id,
            subject="Error in the leads report",
            priority=TicketPriority.MEDIUM,
            status=TicketStatus.RESOLVED,
            sla_hours=48,
            channel=TicketChannel.CHAT,
            created_at=now - timedelta(hours=30),
            resolved_at=now - timedelta(hours=4),
        ),
        Ticket(
            id=str(uuid4()),
            customer_id=customers[2].id,
            subject="Training for new users",
            priority=TicketPriority.LOW,
            status=TicketStatus.OPEN,
            sla_hours=72,
            channel=TicketChannel.PHONE,
            created_at=now - timedelta(hours=12),
        ),
    ]
    store.load(customers, tickets)
    logger.info("Seeded %d demo customers and %d demo tickets.", len(customers), len(tickets))
