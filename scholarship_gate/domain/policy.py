"""Write-access policy: mutations allowed only on weekends that are not holidays. Pure, no I/O."""

from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import FrozenSet, Optional

from scholarship_gate.domain.calendar import CalendarStore

# datetime.weekday(): Monday == 0 ... Sunday == 6
_WEEKEND_DAYS = frozenset({5, 6})


class AccessOutcome(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class DenialReason(str, Enum):
    WEEKDAY = "weekday"
    HOLIDAY = "holiday"


# Rendering order for combined reasons
_REASON_ORDER = (DenialReason.WEEKDAY, DenialReason.HOLIDAY)


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of one policy check. Created and consumed per attempt; never stored."""

    outcome: AccessOutcome
    reasons: FrozenSet[DenialReason] = frozenset()

    @property
    def allowed(self) -> bool:
        return self.outcome == AccessOutcome.ALLOW

    @property
    def denied(self) -> bool:
        return self.outcome == AccessOutcome.DENY

    @property
    def reason(self) -> Optional[str]:
        """Rendered reasons, e.g. "weekday, holiday". None when allowed."""
        if not self.reasons:
            return None
        return ", ".join(r.value for r in _REASON_ORDER if r in self.reasons)

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(outcome=AccessOutcome.ALLOW)

    @classmethod
    def deny(cls, *reasons: DenialReason) -> "AccessDecision":
        return cls(outcome=AccessOutcome.DENY, reasons=frozenset(reasons))


def evaluate(
    now: datetime,
    calendar: CalendarStore,
    tz: Optional[tzinfo] = None,
) -> AccessDecision:
    """
    Deny on Monday-Friday, deny on a restricted date, allow otherwise.
    The two predicates are independent; a weekend holiday is still denied.
    Aware datetimes are converted to tz before the date is taken; naive ones are used as-is.
    """
    local = now.astimezone(tz) if tz is not None and now.tzinfo is not None else now
    day = local.date()

    reasons = set()
    if local.weekday() not in _WEEKEND_DAYS:
        reasons.add(DenialReason.WEEKDAY)
    if calendar.is_restricted_date(day):
        reasons.add(DenialReason.HOLIDAY)

    if reasons:
        return AccessDecision.deny(*reasons)
    return AccessDecision.allow()
