import logging
from pathlib import Path
from typing import Optional

from .clients import AgentInvoker, HttpAgentClient, HttpScheduleClient, ScheduleService
from .config import ConfigManager
from .history import HistoryStore, HistoryView
from .models import HistoryFilter, ScanSettings, ScheduleSnapshot
from .orchestrator import MANAGER_AGENT_ID, ScanOrchestrator, ScanTransition
from .reconciler import DEFAULT_LOG_LIMIT, SCHEDULE_ID, ScheduleReconciler
from .settings_store import SettingsStore
from .storage import JsonFileStorage, KeyValueStorage


class ListingRadarAgent:
    """Wires configuration, storage, remote clients and the scan core together."""

    def __init__(
        self,
        config_path: str = "config.yaml",
        storage: Optional[KeyValueStorage] = None,
        agent_client: Optional[AgentInvoker] = None,
        schedule_client: Optional[ScheduleService] = None,
    ):
        self.config_manager = ConfigManager(config_path)
        self.config = self.config_manager.get_config()

        # Setup logging
        self._setup_logging()

        # Create directories
        self.config_manager.create_directories()

        self.logger = logging.getLogger(__name__)

        self.storage = storage or JsonFileStorage(Path(self.config.data_dir) / "storage.json")
        self.settings_store = SettingsStore(self.storage)
        self.history = HistoryStore(self.storage)
        self.history.load()

        api_config = self.config_manager.get_section('api')
        self.agent_client = agent_client or HttpAgentClient(
            base_url=api_config.get('base_url', 'http://localhost:3000/api'),
            timeout=_optional_float(api_config.get('timeout')),
            api_key=api_config.get('key'),
        )

        scheduler_config = self.config_manager.get_section('scheduler')
        self.schedule_client = schedule_client or HttpScheduleClient(
            base_url=scheduler_config.get('base_url', 'http://localhost:3000/api/scheduler'),
            timeout=_optional_float(scheduler_config.get('timeout', 30)),
            api_key=scheduler_config.get('key'),
        )

        scan_config = self.config_manager.get_section('scan')
        self.orchestrator = ScanOrchestrator(
            agent=self.agent_client,
            history=self.history,
            settings_provider=self.settings_store.load,
            manager_agent_id=scan_config.get('manager_agent_id', MANAGER_AGENT_ID),
        )
        self.reconciler = ScheduleReconciler(
            service=self.schedule_client,
            target_id=scheduler_config.get('schedule_id', SCHEDULE_ID),
            log_limit=int(scheduler_config.get('log_limit', DEFAULT_LOG_LIMIT)),
        )

    def _setup_logging(self):
        """Setup logging configuration"""
        log_level = getattr(logging, str(self.config.log_level).upper(), logging.INFO)
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        log_dir = Path(self.config.logs_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        logging.basicConfig(
            level=log_level,
            format=log_format,
            handlers=[
                logging.FileHandler(log_dir / 'agent.log'),
                logging.StreamHandler()
            ]
        )
        logging.getLogger("httpx").setLevel(logging.WARNING)

    # Scans
    async def run_scan(self) -> Optional[ScanTransition]:
        return await self.orchestrator.scan()

    def history_view(self, sample_mode: bool = False) -> HistoryView:
        return HistoryView(self.history, sample_mode=sample_mode)

    def get_history(self, mode: HistoryFilter = HistoryFilter.ALL, sample_mode: bool = False):
        return self.history_view(sample_mode).filter(mode)

    # Schedule
    async def refresh_schedule(self) -> ScheduleSnapshot:
        return await self.reconciler.refresh()

    async def toggle_schedule(self) -> ScheduleSnapshot:
        if self.reconciler.schedule is None:
            await self.reconciler.refresh()
        await self.reconciler.toggle()
        return self.reconciler.snapshot()

    # Settings
    def get_settings(self) -> ScanSettings:
        return self.settings_store.load()

    def save_settings(self, settings: ScanSettings) -> bool:
        return self.settings_store.save(settings)


def _optional_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)
