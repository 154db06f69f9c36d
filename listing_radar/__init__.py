from .agent import ListingRadarAgent
from .history import HistoryStore, HistoryView
from .orchestrator import ScanOrchestrator
from .reconciler import ScheduleReconciler
from .result_parser import ResultParser, ParsedScan, ParseFailure, ParseFailureKind
from .config import ConfigManager
from .models import (
    Listing, ScanResult, HistoryEntry, Schedule, ExecutionLogEntry,
    ScanSettings, HistoryFilter, ScanState
)

__version__ = "1.0.0"
__all__ = [
    "ListingRadarAgent",
    "HistoryStore",
    "HistoryView",
    "ScanOrchestrator",
    "ScheduleReconciler",
    "ResultParser",
    "ParsedScan",
    "ParseFailure",
    "ParseFailureKind",
    "ConfigManager",
    "Listing",
    "ScanResult",
    "HistoryEntry",
    "Schedule",
    "ExecutionLogEntry",
    "ScanSettings",
    "HistoryFilter",
    "ScanState"
]
