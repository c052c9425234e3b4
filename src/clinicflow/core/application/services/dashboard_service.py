from datetime import date
from decimal import Decimal

from clinicflow.core.application.dtos.dashboard_dto import (
    AdminDashboardDTO,
    OccupancyCellDTO,
    ProfessionalOverviewDTO,
)
from clinicflow.core.application.services.state_cache import AggregateStateCache, CacheSnapshot
from clinicflow.core.domain.constants import DAYS_OF_WEEK, SHIFTS, UNKNOWN_PROFESSIONAL


def _same_month(d: date | None, ref: date) -> bool:
    return d is not None and d.year == ref.year and d.month == ref.month


class DashboardService:
    """Indicadores calculados sobre o snapshot em cache (sem I/O)."""

    def __init__(self, cache: AggregateStateCache):
        self.cache = cache

    def admin_summary(self, today: date) -> AdminDashboardDTO:
        snap = self.cache.snapshot
        revenue = sum(
            (p.amount for p in snap.payments if p.is_paid and _same_month(p.paid_date, today)),
            Decimal("0"),
        )
        pending = sum(
            (p.amount for p in snap.payments if not p.is_paid and _same_month(p.due_date, today)),
            Decimal("0"),
        )
        return AdminDashboardDTO(
            month_revenue=revenue,
            month_pending=pending,
            active_loans=sum(1 for l in snap.loans if l.is_active),
            active_professionals=sum(1 for u in snap.users if u.is_active and not u.is_admin),
            occupation_rate=self.occupation_rate(snap),
        )

    @staticmethod
    def occupation_rate(snap: CacheSnapshot) -> int:
        capacity = len(snap.rooms) * len(DAYS_OF_WEEK) * len(SHIFTS)
        if not capacity:
            return 0
        return round(len(snap.allocations) / capacity * 100)

    def occupancy_matrix(
        self,
        room_id: str | None = None,
        day: str | None = None,
        shift: str | None = None,
        status: str = "ALL",
    ) -> list[OccupancyCellDTO]:
        snap = self.cache.snapshot
        by_slot = {a.slot: a for a in snap.allocations}
        names = {u.id: u.name for u in snap.users}

        cells: list[OccupancyCellDTO] = []
        for room in snap.rooms:
            if room_id and room.id != room_id:
                continue
            for d in DAYS_OF_WEEK:
                if day and d != day:
                    continue
                for s in SHIFTS:
                    if shift and s != shift:
                        continue
                    alloc = by_slot.get((room.id, d, s))
                    if status == "OCCUPIED" and alloc is None:
                        continue
                    if status == "AVAILABLE" and alloc is not None:
                        continue
                    cells.append(
                        OccupancyCellDTO(
                            room_id=room.id,
                            room_name=room.name,
                            day=d,
                            shift=s,
                            allocation_id=alloc.id if alloc else None,
                            professional_name=(
                                names.get(alloc.user_id, UNKNOWN_PROFESSIONAL) if alloc else None
                            ),
                        )
                    )
        return cells

    def professional_overview(self, user_id: str) -> ProfessionalOverviewDTO:
        snap = self.cache.snapshot
        return ProfessionalOverviewDTO(
            allocations=[a for a in snap.allocations if a.user_id == user_id],
            active_loans=[l for l in snap.loans if l.user_id == user_id and l.is_active],
            payments=sorted(
                (p for p in snap.payments if p.user_id == user_id),
                key=lambda p: p.due_date,
                reverse=True,
            ),
            patients=[p for p in snap.patients if p.professional_id == user_id],
        )
