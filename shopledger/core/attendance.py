"""Attendance - hours per attendance type and monthly worksheet aggregation.

Invariants:
    - full_day = 8h, half_day = 4h, absent = 0h
    - total working days = full days + 0.5 × half days
    - Records outside the requested month are ignored
"""

from dataclasses import dataclass
from datetime import date
from typing import Hashable, Iterable, Protocol

from shopledger.core.domain_types import AttendanceType

HOURS_BY_ATTENDANCE: dict[AttendanceType, float] = {
    AttendanceType.FULL_DAY: 8.0,
    AttendanceType.HALF_DAY: 4.0,
    AttendanceType.ABSENT: 0.0,
}


class DailyWorkLike(Protocol):
    worker_id: Hashable
    work_date: date
    attendance_type: str


@dataclass
class MonthlyAttendance:
    worker_id: Hashable
    full_days: int = 0
    half_days: int = 0
    leaves: int = 0

    @property
    def total_working_days(self) -> float:
        return self.full_days + self.half_days * 0.5


def hours_for_attendance(attendance_type: AttendanceType | str) -> float:
    return HOURS_BY_ATTENDANCE[AttendanceType(attendance_type)]


def summarize_month(
    worker_ids: Iterable[Hashable],
    records: Iterable[DailyWorkLike],
    year: int,
    month: int,
) -> dict[Hashable, MonthlyAttendance]:
    """Count attendance per worker for one calendar month.

    Every worker in worker_ids gets an entry, even with no records.
    Records for workers not listed are skipped.
    """
    summary = {wid: MonthlyAttendance(worker_id=wid) for wid in worker_ids}
    for record in records:
        if record.work_date.year != year or record.work_date.month != month:
            continue
        entry = summary.get(record.worker_id)
        if entry is None:
            continue
        kind = AttendanceType(record.attendance_type)
        if kind == AttendanceType.FULL_DAY:
            entry.full_days += 1
        elif kind == AttendanceType.HALF_DAY:
            entry.half_days += 1
        else:
            entry.leaves += 1
    return summary
