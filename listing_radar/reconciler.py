"""Keeps a local mirror of the remote scan schedule and its execution log."""

import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from .clients import ScheduleService
from .formatting import next_cron_run
from .models import ExecutionLogEntry, Schedule, ScheduleSnapshot

SCHEDULE_ID = "69989a17399dfadeac37d150"
DEFAULT_LOG_LIMIT = 5


class ScheduleReconciler:
    """Pulls schedule state from the remote scheduler.

    The local copy is never patched in place: after a pause or resume the
    schedule and logs are fetched again. Refresh and toggle share a busy
    flag, and calls made while busy are dropped.
    """

    def __init__(
        self,
        service: ScheduleService,
        target_id: str = SCHEDULE_ID,
        log_limit: int = DEFAULT_LOG_LIMIT,
    ):
        self.service = service
        self.target_id = target_id
        self.log_limit = log_limit
        self.logger = logging.getLogger(__name__)
        self.schedule: Optional[Schedule] = None
        self.logs: List[ExecutionLogEntry] = []
        self.busy = False

    def snapshot(self) -> ScheduleSnapshot:
        projected = None
        if self.schedule and not self.schedule.next_run_time:
            projected = next_cron_run(self.schedule.cron_expression)
        return ScheduleSnapshot(
            schedule=self.schedule,
            logs=list(self.logs),
            busy=self.busy,
            projected_next_run=projected,
        )

    async def refresh(self) -> ScheduleSnapshot:
        if self.busy:
            self.logger.debug("Schedule refresh skipped, another request is in flight")
            return self.snapshot()
        self.busy = True
        try:
            await self._fetch()
        finally:
            self.busy = False
        return self.snapshot()

    async def toggle(self, schedule: Optional[Schedule] = None) -> bool:
        """Pause an active schedule or resume a paused one, then refresh.

        Returns False without calling the remote side when busy or when
        there is no schedule to act on.
        """
        if self.busy:
            self.logger.debug("Schedule toggle dropped, another request is in flight")
            return False
        schedule = schedule or self.schedule
        if schedule is None:
            return False

        self.busy = True
        try:
            try:
                if schedule.is_active:
                    await self.service.pause(schedule.id)
                else:
                    await self.service.resume(schedule.id)
            except Exception as e:
                self.logger.error(f"Failed to toggle schedule {schedule.id}: {e}", exc_info=True)
            await self._fetch()
        finally:
            self.busy = False
        return True

    async def _fetch(self) -> None:
        await self._fetch_schedule()
        await self._fetch_logs()

    async def _fetch_schedule(self) -> None:
        try:
            reply = await self.service.list_schedules()
        except Exception as e:
            self.logger.warning(f"Could not list schedules: {e}", exc_info=True)
            return

        schedules = self._items(reply, "schedules")
        if not schedules:
            return
        try:
            found = next((s for s in schedules if s.get("id") == self.target_id), None)
            if found is None:
                self.logger.info(
                    f"Schedule {self.target_id} not found, using {schedules[0].get('id')}"
                )
                found = schedules[0]
            self.schedule = Schedule.model_validate(found)
        except ValidationError as e:
            self.logger.warning(f"Ignoring malformed schedule: {e}")

    async def _fetch_logs(self) -> None:
        try:
            reply = await self.service.get_logs(self.target_id, limit=self.log_limit)
        except Exception as e:
            self.logger.warning(f"Could not fetch execution logs: {e}", exc_info=True)
            return

        executions = self._items(reply, "executions")
        if executions is None:
            return
        try:
            logs = [ExecutionLogEntry.model_validate(item) for item in executions]
        except ValidationError as e:
            self.logger.warning(f"Ignoring malformed execution logs: {e}")
            return
        self.logs = logs[: self.log_limit]

    @staticmethod
    def _items(reply: Any, field: str) -> Optional[List[dict]]:
        if not isinstance(reply, dict) or not reply.get("success"):
            return None
        items = reply.get(field)
        if not isinstance(items, list):
            return None
        return [item for item in items if isinstance(item, dict)]
