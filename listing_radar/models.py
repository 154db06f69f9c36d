"""Pydantic v2 models for scans, history, schedules and settings.

Scan payloads come from an untrusted external agent, so the scan models
coerce every field to a safe default instead of rejecting the payload.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ListingKind(str, Enum):
    JOB = "job"
    APARTMENT = "apartment"


class HistoryFilter(str, Enum):
    ALL = "all"
    JOBS = "jobs"
    APARTMENTS = "apartments"


class ScanState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    SUCCESS = "success"
    FAILURE = "failure"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    return ""


def _as_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if isinstance(value, float):
        # NaN and infinities have no integer form
        return int(value) if math.isfinite(value) else 0
    return 0


class Listing(BaseModel):
    """One discovered job or apartment listing."""

    title: str = ""
    company: str = ""
    location: str = ""
    source_url: str = ""
    source_name: str = ""
    date_posted: str = ""
    listing_type: str = ""
    snippet: str = ""
    relevance_score: float = 0.0

    model_config = ConfigDict(frozen=True, extra="allow")

    @field_validator(
        "title", "company", "location", "source_url", "source_name",
        "date_posted", "listing_type", "snippet",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("relevance_score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> float:
        if isinstance(value, bool):
            return 0.0
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                return 0.0
        if isinstance(value, (int, float)):
            try:
                score = float(value)
            except OverflowError:
                return 0.0
            return score if math.isfinite(score) else 0.0
        return 0.0

    @property
    def kind(self) -> Optional[ListingKind]:
        try:
            return ListingKind(self.listing_type.strip().lower())
        except ValueError:
            return None


class ScanResult(BaseModel):
    """Outcome of one scan as reported by the agent.

    The count fields are advisory: they are whatever the agent reported
    and are not reconciled with ``listings``.
    """

    scan_status: str = ""
    total_listings_found: int = 0
    job_listings_count: int = 0
    apartment_listings_count: int = 0
    email_sent: bool = False
    email_recipient: str = ""
    scan_timestamp: str = ""
    listings: List[Listing] = Field(default_factory=list)
    summary_message: str = ""

    model_config = ConfigDict(frozen=True, extra="allow")

    @field_validator(
        "scan_status", "email_recipient", "scan_timestamp", "summary_message",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator(
        "total_listings_found", "job_listings_count", "apartment_listings_count",
        mode="before",
    )
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        return _as_count(value)

    @field_validator("email_sent", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() == "true"
        if isinstance(value, float):
            return math.isfinite(value) and value != 0
        if isinstance(value, int):
            return value != 0
        return False

    @field_validator("listings", mode="before")
    @classmethod
    def _coerce_listings(cls, value: Any) -> List[Any]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, (dict, Listing))]

    def has_kind(self, kind: ListingKind) -> bool:
        return any(listing.kind == kind for listing in self.listings)


class HistoryEntry(BaseModel):
    """A recorded scan. Entries are never mutated once created."""

    id: str
    timestamp: str
    result: ScanResult

    model_config = ConfigDict(frozen=True)


class Schedule(BaseModel):
    """Local mirror of the remote periodic-scan schedule."""

    id: str
    is_active: bool = False
    cron_expression: str = ""
    timezone: Optional[str] = None
    next_run_time: Optional[str] = None
    last_run_at: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class ExecutionLogEntry(BaseModel):
    id: str
    executed_at: Optional[str] = None
    success: bool = False

    model_config = ConfigDict(extra="allow")


class ScheduleSnapshot(BaseModel):
    """What the reconciler currently knows about the remote schedule."""

    schedule: Optional[Schedule] = None
    logs: List[ExecutionLogEntry] = Field(default_factory=list)
    busy: bool = False
    projected_next_run: Optional[datetime] = None


class AgentInfo(BaseModel):
    id: str
    name: str
    role: str


class StatusMessage(BaseModel):
    """User-facing status line emitted by the scan state machine."""

    type: Literal["success", "error", "info"]
    text: str


class ScanSettings(BaseModel):
    """User search criteria, persisted with camelCase keys."""

    keywords: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    listing_type: Literal["jobs", "apartments", "both"] = "both"
    additional_urls: List[str] = Field(default_factory=list)
    notification_email: str = ""
    frequency: str = "0 * * * *"

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AgentConfig(BaseModel):
    name: str = "listing_radar"
    log_level: str = "INFO"
    data_dir: str = "./data"
    logs_dir: str = "./logs"

    model_config = ConfigDict(extra="allow")
