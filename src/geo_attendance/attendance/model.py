from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, tzinfo
from typing import Any, Mapping, Optional

from ..common.datetime_utils import calculate_total_hours, format_time, parse_iso_instant
from ..core.constants import TIME_SENTINEL
from ..core.enums import AttendanceAction, SubmitPhase, WorkMode
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceStats:
    """Today's figures as displayed on the attendance screen.

    Display strings are always derived from the raw instants.
    """

    first_check_in: str = TIME_SENTINEL
    last_check_out: str = TIME_SENTINEL
    total_hours: str = TIME_SENTINEL
    check_in_instant: Optional[datetime] = None
    check_out_instant: Optional[datetime] = None

    @classmethod
    def from_instants(
        cls,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        device_tz: Optional[tzinfo] = None,
    ) -> "AttendanceStats":
        return cls(
            first_check_in=format_time(check_in, device_tz),
            last_check_out=format_time(check_out, device_tz),
            total_hours=calculate_total_hours(check_in, check_out),
            check_in_instant=check_in,
            check_out_instant=check_out,
        )

    @property
    def is_open(self) -> bool:
        return self.check_in_instant is not None and self.check_out_instant is None

    def with_live_total(self, now: datetime) -> "AttendanceStats":
        """Running total while checked in; unchanged otherwise."""
        if not self.is_open:
            return self
        return replace(self, total_hours=calculate_total_hours(self.check_in_instant, now))


def _parse_work_mode(value: Any) -> Optional[WorkMode]:
    if not value:
        return None
    try:
        return WorkMode(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class TodayAttendance:
    """Parsed `GET /api/attendance/today` payload."""

    has_checked_in: bool
    has_checked_out: bool
    work_mode: Optional[WorkMode]
    has_record: bool
    check_in_instant: Optional[datetime] = None
    check_out_instant: Optional[datetime] = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "TodayAttendance":
        record = data.get("attendance") or None
        return cls(
            has_checked_in=bool(data.get("hasCheckedIn")),
            has_checked_out=bool(data.get("hasCheckedOut")),
            work_mode=_parse_work_mode(data.get("workMode")),
            has_record=record is not None,
            check_in_instant=parse_iso_instant(record.get("checkInTime")) if record else None,
            check_out_instant=parse_iso_instant(record.get("checkOutTime")) if record else None,
        )


@dataclass(frozen=True)
class AttendanceResult:
    """Parsed success payload of checkin/checkout."""

    check_in_instant: Optional[datetime] = None
    check_out_instant: Optional[datetime] = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "AttendanceResult":
        record = data.get("attendance") or {}
        return cls(
            check_in_instant=parse_iso_instant(record.get("checkInTime")),
            check_out_instant=parse_iso_instant(record.get("checkOutTime")),
        )


@dataclass(frozen=True)
class SubmitOutcome:
    action: AttendanceAction
    success: bool
    message: str


@dataclass
class AttendanceState:
    """Mutable state of one attendance screen.

    Writers: AttendanceReconciler (on load) and AttendanceService (after a
    successful submission). Rendering code only reads it. `epoch` counts
    applied submissions so a fetch that started earlier can be recognised
    as stale.
    """

    stats: AttendanceStats = field(default_factory=AttendanceStats)
    checked_in: bool = False
    work_mode: Optional[WorkMode] = None
    day_started: bool = False
    phase: SubmitPhase = SubmitPhase.IDLE
    loading_message: str = "Processing..."
    epoch: int = 0

    @property
    def busy(self) -> bool:
        return self.phase not in (SubmitPhase.IDLE, SubmitPhase.SUCCESS, SubmitPhase.FAILED)

    @property
    def mode_locked(self) -> bool:
        return self.day_started or self.checked_in

    @property
    def next_action(self) -> AttendanceAction:
        return AttendanceAction.CHECK_OUT if self.checked_in else AttendanceAction.CHECK_IN

    def select_mode(self, mode: WorkMode | str) -> WorkMode:
        selected = WorkMode(mode)
        if self.mode_locked and selected != self.work_mode:
            raise ValidationError("Work mode is locked for today")
        self.work_mode = selected
        return selected
