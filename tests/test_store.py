"""
Unit tests for the in-memory CRM store (no server required).
Run: pytest tests/test_store.py -v
"""

from datetime import timedelta

from app.crm_store import seed_demo_data
from app.models import (
    CreateCustomerInput,
    CreateTicketInput,
    CustomerSegment,
    CustomerStatus,
    TicketChannel,
    TicketPriority,
    TicketStatus,
)

from tests.conftest import NOW


def customer_input(name: str = "Ana", satisfaction: float = 4.0) -> CreateCustomerInput:
    return CreateCustomerInput(
        name=name,
        company="TechGrow",
        email=f"{name.lower()}@techgrow.io",
        segment=CustomerSegment.SCALE_UP,
        status=CustomerStatus.ACTIVE,
        satisfaction=satisfaction,
    )


def ticket_input(subject: str = "Login broken", sla_hours: float = 24, status=None) -> CreateTicketInput:
    return CreateTicketInput(
        customer_id="does-not-exist",
        subject=subject,
        priority=TicketPriority.HIGH,
        channel=TicketChannel.CHAT,
        sla_hours=sla_hours,
        status=status,
    )


class TestCustomers:
    def test_empty_store(self, store):
        assert store.list_customers() == []
        assert store.list_tickets() == []

    def test_create_assigns_id_and_last_contact(self, store):
        customer = store.create_customer(customer_input(satisfaction=9.0))
        assert customer.id
        assert customer.last_contact == NOW
        # No range check in the store
        assert customer.satisfaction == 9.0
        assert customer.notes is None

    def test_ids_are_unique(self, store):
        ids = {store.create_customer(customer_input(f"C{i}")).id for i in range(20)}
        assert len(ids) == 20

    def test_create_prepends(self, store):
        first = store.create_customer(customer_input("First"))
        second = store.create_customer(customer_input("Second"))
        third = store.create_customer(customer_input("Third"))
        assert store.list_customers() == [third, second, first]
        assert store.list_customers()[0] == third

    def test_list_is_idempotent(self, store):
        store.create_customer(customer_input("A"))
        store.create_customer(customer_input("B"))
        assert store.list_customers() == store.list_customers()

    def test_list_is_a_snapshot(self, store):
        store.create_customer(customer_input("A"))
        snapshot = store.list_customers()
        store.create_customer(customer_input("B"))
        assert len(snapshot) == 1
        assert len(store.list_customers()) == 2


class TestTickets:
    def test_status_defaults_to_open(self, store):
        ticket = store.create_ticket(ticket_input())
        assert ticket.status == TicketStatus.OPEN
        assert ticket.created_at == NOW
        assert ticket.resolved_at is None

    def test_explicit_status_kept(self, store):
        ticket = store.create_ticket(ticket_input(status=TicketStatus.PENDING))
        assert ticket.status == TicketStatus.PENDING

    def test_no_customer_reference_check(self, store):
        ticket = store.create_ticket(ticket_input())
        assert ticket.customer_id == "does-not-exist"
        assert store.list_customers() == []

    def test_create_prepends(self, store):
        older = store.create_ticket(ticket_input("older"))
        newer = store.create_ticket(ticket_input("newer"))
        assert [t.subject for t in store.list_tickets()] == ["newer", "older"]
        assert store.list_tickets() == [newer, older]


class TestDashboardMetrics:
    def test_empty_store(self, store):
        metrics = store.get_dashboard_metrics()
        assert metrics.kpis.delayed_tickets == 0
        assert [s.value for s in metrics.sla_performance] == [0.0, 0.0]

    def test_ticket_becomes_late_as_time_passes(self, store, clock):
        store.create_ticket(ticket_input(sla_hours=24))
        assert store.get_dashboard_metrics().kpis.delayed_tickets == 0
        clock.advance(hours=30)
        metrics = store.get_dashboard_metrics()
        assert metrics.kpis.delayed_tickets == 1
        assert [s.value for s in metrics.sla_performance] == [0.0, 100.0]

    def test_explicit_now_overrides_clock(self, store):
        store.create_ticket(ticket_input(sla_hours=24))
        assert store.get_dashboard_metrics(now=NOW + timedelta(hours=25)).kpis.delayed_tickets == 1

    def test_satisfaction_mix(self, store):
        for i, score in enumerate((4.8, 4.0, 2.0)):
            store.create_customer(customer_input(f"C{i}", score))
        metrics = store.get_dashboard_metrics()
        assert [s.value for s in metrics.satisfaction_breakdown] == [33.3, 33.3, 33.3]
        assert metrics.kpis.average_satisfaction == 3.6


class TestSeed:
    def test_demo_data(self, store):
        seed_demo_data(store)
        customers = store.list_customers()
        tickets = store.list_tickets()
        assert [c.name for c in customers] == ["Ana Souza", "Carlos Pereira", "Julia Ramos"]
        assert [t.status for t in tickets] == [TicketStatus.PENDING, TicketStatus.RESOLVED, TicketStatus.OPEN]
        assert {t.customer_id for t in tickets} == {c.id for c in customers}
        assert customers[1].last_contact == NOW - timedelta(days=6)

    def test_demo_metrics(self, store):
        seed_demo_data(store)
        metrics = store.get_dashboard_metrics()
        # 4.7, 3.1, 4.2
        assert metrics.kpis.average_satisfaction == 4.0
        assert [s.value for s in metrics.satisfaction_breakdown] == [33.3, 33.3, 33.3]
        # Only the 24h ticket opened 26h ago is past its deadline
        assert metrics.kpis.delayed_tickets == 1
        assert [s.value for s in metrics.sla_performance] == [66.7, 33.3]
        assert metrics.kpis.resolution_rate == 33.3
        assert metrics.kpis.open_tickets == 33.3

    def test_new_records_go_before_seeded_ones(self, store):
        seed_demo_data(store)
        created = store.create_customer(customer_input("Newest"))
        customers = store.list_customers()
        assert customers[0] == created
        assert [c.name for c in customers[1:]] == ["Ana Souza", "Carlos Pereira", "Julia Ramos"]
