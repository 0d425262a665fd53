"""
Allocation of a block of hours over the working days following a start date
"""

import logging
from datetime import date
from typing import Iterable, Optional

from .models import (
    DRY_RUN_STATUS, AllocationRequest, AllocationResult, DayAllocation, TimeEntryInput, TimeOff
)
from .teamwork import TeamworkClient, TeamworkError
from .workdays import is_working_day, next_working_day
from .workload import remaining_quota

logger = logging.getLogger(__name__)

ENTRIES_SNAPSHOT_SIZE = 500
ENTRY_START_TIME = "08:00"


class TimeAllocator:
    """Fills the remaining quota of consecutive working days with time entries

    Existing entries are fetched once per run. Entries created by the run
    itself are not part of that snapshot, so two runs over the same days in
    one process can overbook them.
    """

    def __init__(self, client: TeamworkClient, times_off: Iterable[TimeOff]):
        self.client = client
        self.times_off = list(times_off)

    def save_time(self, request: AllocationRequest, today: Optional[date] = None) -> AllocationResult:
        """Allocate ``request.hours`` from ``request.start_date`` up to yesterday

        Each visited day receives its whole remaining quota and the quota is
        deducted from the requested hours, so the last day may receive more
        than what was left to place. Failures on a single day are recorded in
        the result and the run goes on; failures fetching the account or the
        existing entries abort before anything is written.

        A start date falling on a weekend is moved to the following Monday,
        so no hours are ever placed on a non-working day.
        """
        today = today or date.today()

        account = self.client.get_account()
        existing_entries = self.client.last_time_entries(ENTRIES_SNAPSHOT_SIZE, request.start_date)

        result = AllocationResult(request=request)
        remaining = request.hours
        current = request.start_date
        if not is_working_day(current):
            current = next_working_day(current)

        logger.info(f"Start adding time entries. Remaining hours: {remaining}")

        while current < today and remaining > 0:
            quota = remaining_quota(current, existing_entries, self.times_off)
            logger.info(f"{current.strftime('%Y%m%d')} / {quota} : {request.description}")

            if quota > 0:
                if request.dry_run:
                    result.days.append(DayAllocation(date=current, hours=quota, status=DRY_RUN_STATUS))
                else:
                    result.days.append(self._submit_day(request, account.id, current, quota))

            remaining -= quota
            current = next_working_day(current)

        logger.info(f"Allocated {result.allocated_hours}h of {request.hours}h requested")
        return result

    def _submit_day(self, request: AllocationRequest, person_id: str, day: date, hours: int) -> DayAllocation:
        entry = TimeEntryInput(
            description=request.description,
            person_id=person_id,
            date=day.strftime('%Y%m%d'),
            time=ENTRY_START_TIME,
            hours=hours,
            minutes=0,
        )

        try:
            created = self.client.create_time_entry(request.task_id, entry)
        except TeamworkError as e:
            logger.error(f"Failed to log {hours}h on {day.isoformat()}: {e}")
            return DayAllocation(date=day, hours=hours, status=str(e))

        entry_id = created.id or "unknown"
        if created.ok:
            logger.info(f"Logged {hours}h on {day.isoformat()} (#id: {entry_id})")
        else:
            logger.warning(f"Unexpected status {created.status} for {day.isoformat()} (#id: {entry_id})")
        return DayAllocation(date=day, hours=hours, status=created.status, entry_id=created.id)

