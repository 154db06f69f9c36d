"""Scan state machine: Idle -> Scanning -> {Success, Failure} -> Idle."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .clients import AgentInvoker
from .history import HistoryStore
from .models import AgentInfo, HistoryEntry, ScanSettings, ScanState, StatusMessage
from .result_parser import ParseFailure, ParseOutcome, ResultParser

MANAGER_AGENT_ID = "69989a105d2326ad4d26cdce"

AGENTS: List[AgentInfo] = [
    AgentInfo(id=MANAGER_AGENT_ID, name="Listing Monitor Manager",
              role="Orchestrates scans and notifications"),
    AgentInfo(id="699899ecfc075eb63c125e2f", name="Web Scanner Agent",
              role="Searches for listings online"),
    AgentInfo(id="699899fd5c09fa7c2b5b2e70", name="Notification Composer Agent",
              role="Composes and sends email alerts"),
]

DEFAULT_KEYWORDS = "software engineer, apartment rental"
DEFAULT_LOCATION = "New York"
DEFAULT_SOURCE = "LinkedIn"
DEFAULT_EMAIL = "not specified"

SCANNING_MESSAGE = "Scanning for listings... This may take a minute."
REMOTE_FAILURE_MESSAGE = "Scan failed. Please check your settings and try again."

_LISTING_TYPE_LABELS = {
    "both": "Jobs and Apartments",
    "jobs": "Jobs",
    "apartments": "Apartments",
}


def build_scan_message(settings: ScanSettings) -> str:
    """Compose the natural-language instruction sent to the manager agent."""
    keywords = ", ".join(settings.keywords) if settings.keywords else DEFAULT_KEYWORDS
    locations = ", ".join(settings.locations) if settings.locations else DEFAULT_LOCATION
    listing_type = _LISTING_TYPE_LABELS.get(settings.listing_type, "Jobs and Apartments")
    websites = ", ".join([DEFAULT_SOURCE, *settings.additional_urls])
    email = settings.notification_email or DEFAULT_EMAIL

    return (
        "Scan for listings with the following criteria:\n"
        f"Keywords: {keywords}\n"
        f"Locations: {locations}\n"
        f"Listing Type: {listing_type}\n"
        f"Websites: {websites}\n"
        f"Notification Email: {email}"
    )


@dataclass(frozen=True)
class ScanTransition:
    """Result of resolving one scan: the terminal state, its message and any new entry."""

    state: ScanState
    message: StatusMessage
    entry: Optional[HistoryEntry] = None


def resolve_scan(outcome: Optional[ParseOutcome], entry_id: str, now: datetime) -> ScanTransition:
    """Pure transition out of SCANNING.

    ``outcome`` is None when the agent call itself raised.
    """
    if outcome is None:
        return ScanTransition(
            ScanState.FAILURE, StatusMessage(type="error", text=REMOTE_FAILURE_MESSAGE)
        )
    if isinstance(outcome, ParseFailure):
        return ScanTransition(
            ScanState.FAILURE, StatusMessage(type="error", text=outcome.message)
        )

    result = outcome.result
    entry = HistoryEntry(
        id=entry_id,
        timestamp=result.scan_timestamp or now.isoformat(),
        result=result,
    )
    email_note = ", email sent!" if result.email_sent else ""
    text = f"Scan complete -- {result.total_listings_found} new listings found{email_note}"
    return ScanTransition(ScanState.SUCCESS, StatusMessage(type="success", text=text), entry)


class EntryIdGenerator:
    """Millisecond-epoch ids that strictly increase even within one millisecond."""

    def __init__(self, clock: Callable[[], float] = time.time, floor: int = 0):
        self.clock = clock
        self._last = floor

    def __call__(self) -> str:
        value = int(self.clock() * 1000)
        if value <= self._last:
            value = self._last + 1
        self._last = value
        return str(value)


def _highest_id(history: HistoryStore) -> int:
    ids = [int(e.id) for e in history.entries if e.id.isdigit()]
    return max(ids, default=0)


class ScanOrchestrator:
    """Runs one scan at a time and records successful results."""

    def __init__(
        self,
        agent: AgentInvoker,
        history: HistoryStore,
        settings_provider: Callable[[], ScanSettings] = ScanSettings,
        manager_agent_id: str = MANAGER_AGENT_ID,
        id_generator: Optional[Callable[[], str]] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.agent = agent
        self.history = history
        self.settings_provider = settings_provider
        self.manager_agent_id = manager_agent_id
        self.id_generator = id_generator or EntryIdGenerator(floor=_highest_id(history))
        self.now = now or (lambda: datetime.now(timezone.utc))
        self.logger = logging.getLogger(__name__)

        self.state = ScanState.IDLE
        self.active_agent_id: Optional[str] = None
        self.status_message: Optional[StatusMessage] = None

    @property
    def scanning(self) -> bool:
        return self.state == ScanState.SCANNING

    @property
    def active_agent(self) -> Optional[AgentInfo]:
        return next((a for a in AGENTS if a.id == self.active_agent_id), None)

    def dismiss_status(self) -> None:
        self.status_message = None

    async def scan(self) -> Optional[ScanTransition]:
        """Run a scan, or do nothing and return None if one is already running."""
        if self.scanning:
            self.logger.info("Scan already in progress, ignoring request")
            return None

        self.state = ScanState.SCANNING
        self.active_agent_id = self.manager_agent_id
        self.status_message = StatusMessage(type="info", text=SCANNING_MESSAGE)

        try:
            message = build_scan_message(self.settings_provider())
            self.logger.info("Starting scan")

            outcome: Optional[ParseOutcome]
            try:
                envelope = await self.agent.invoke(message, self.manager_agent_id)
            except Exception as e:
                self.logger.error(f"Scan request failed: {e}", exc_info=True)
                outcome = None
            else:
                outcome = ResultParser.parse(envelope)

            transition = resolve_scan(outcome, self.id_generator(), self.now())
            self.state = transition.state
            if transition.entry is not None:
                self.history.append(transition.entry)
                self.logger.info(
                    f"Scan {transition.entry.id} recorded: "
                    f"{transition.entry.result.total_listings_found} listings"
                )
            elif isinstance(outcome, ParseFailure):
                self.logger.warning(
                    f"Scan failed ({outcome.kind.value}): {outcome.message}"
                    + (f" [{outcome.detail}]" if outcome.detail else "")
                )
            self.status_message = transition.message
            return transition
        finally:
            self.state = ScanState.IDLE
            self.active_agent_id = None
