"""
Dashboard metrics aggregator.

Pure functions over the current customer and ticket lists: satisfaction
buckets (promoter / passive / detractor), SLA on-time vs late split, backlog
distribution and the KPI rollup. Nothing here mutates its inputs; the only
outside dependency is "now", which SLA lateness is measured against.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple, Optional, Sequence

from app.models import (
    Customer,
    DashboardKpis,
    DashboardMetrics,
    MetricSlice,
    Ticket,
    TicketStatus,
)

PROMOTER_THRESHOLD = 4.5
PASSIVE_THRESHOLD = 3.5

PROMOTERS = "Promoters"
PASSIVES = "Passives"
DETRACTORS = "Detractors"
ON_TIME = "onTime"
LATE = "late"


class SlaSummary(NamedTuple):
    on_time_pct: float
    late_pct: float
    late_count: int


def round_half_up(value: float, places: int) -> float:
    """
    Round the exact binary value of `value` half away from zero.

    Matches decimal-string formatting (6.25 -> 6.3) rather than Python's
    round-half-even (round(6.25, 1) == 6.2).
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(count: int, total: int) -> float:
    """count / max(total, 1) * 100, one decimal. An empty population gives 0."""
    return round_half_up(count / max(total, 1) * 100, 1)


def satisfaction_breakdown(customers: Sequence[Customer]) -> list[MetricSlice]:
    """Share of promoters (>= 4.5), passives (3.5 to 4.5) and detractors (the rest)."""
    total = len(customers)
    promoters = sum(1 for c in customers if c.satisfaction >= PROMOTER_THRESHOLD)
    passives = sum(1 for c in customers if PASSIVE_THRESHOLD <= c.satisfaction < PROMOTER_THRESHOLD)
    # Remainder, so the three counts always add up to total
    detractors = total - promoters - passives
    return [
        MetricSlice(label=PROMOTERS, value=percentage(promoters, total)),
        MetricSlice(label=PASSIVES, value=percentage(passives, total)),
        MetricSlice(label=DETRACTORS, value=percentage(detractors, total)),
    ]


def is_late(ticket: Ticket, now: datetime) -> bool:
    """
    True when the ticket was (or still is) unresolved past its deadline.

    Unresolved tickets are measured against `now`, so an open ticket already
    past its deadline counts as late.
    """
    effective = ticket.resolved_at if ticket.resolved_at is not None else now
    # sla_hours can be far beyond the datetime range, so compare in hours
    elapsed_hours = (effective - ticket.created_at).total_seconds() / 3600
    return elapsed_hours > ticket.sla_hours


def sla_performance(tickets: Sequence[Ticket], now: Optional[datetime] = None) -> SlaSummary:
    """On-time and late percentages plus the raw late count."""
    now = now or datetime.now(timezone.utc)
    total = len(tickets)
    late_count = sum(1 for t in tickets if is_late(t, now))
    return SlaSummary(
        on_time_pct=percentage(total - late_count, total),
        late_pct=percentage(late_count, total),
        late_count=late_count,
    )


def sla_slices(summary: SlaSummary) -> list[MetricSlice]:
    return [
        MetricSlice(label=ON_TIME, value=summary.on_time_pct),
        MetricSlice(label=LATE, value=summary.late_pct),
    ]


def backlog(tickets: Sequence[Ticket]) -> list[MetricSlice]:
    """
    Share of tickets per status (open, pending, resolved).

    Each share is rounded on its own, so the three may not add up to exactly
    100.0; the difference is left as is.
    """
    total = len(tickets)
    return [
        MetricSlice(
            label=status.value,
            value=percentage(sum(1 for t in tickets if t.status == status), total),
        )
        for status in (TicketStatus.OPEN, TicketStatus.PENDING, TicketStatus.RESOLVED)
    ]


def average_satisfaction(customers: Sequence[Customer]) -> float:
    """Mean satisfaction, two decimals; 0 with no customers."""
    if not customers:
        return 0.0
    return round_half_up(sum(c.satisfaction for c in customers) / len(customers), 2)


def resolution_rate(tickets: Sequence[Ticket]) -> float:
    resolved = sum(1 for t in tickets if t.status == TicketStatus.RESOLVED)
    return percentage(resolved, len(tickets))


def _slice_value(slices: Sequence[MetricSlice], label: str) -> float:
    return next((s.value for s in slices if s.label == label), 0.0)


def build_dashboard(
    customers: Sequence[Customer],
    tickets: Sequence[Ticket],
    now: Optional[datetime] = None,
) -> DashboardMetrics:
    """Assemble the dashboard snapshot from the current customers and tickets."""
    now = now or datetime.now(timezone.utc)
    sla = sla_performance(tickets, now)
    backlog_slices = backlog(tickets)
    kpis = DashboardKpis(
        average_satisfaction=average_satisfaction(customers),
        open_tickets=_slice_value(backlog_slices, TicketStatus.OPEN.value),
        delayed_tickets=sla.late_count,
        resolution_rate=resolution_rate(tickets),
    )
    return DashboardMetrics(
        kpis=kpis,
        satisfaction_breakdown=satisfaction_breakdown(customers),
        sla_performance=sla_slices(sla),
        backlog=backlog_slices,
    )
