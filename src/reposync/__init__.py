"""sync-repos - keep a directory of git working copies in step with upstream."""

from .cli import main
from .config import SyncConfig
from .engine import SyncEngine
from .orchestrator import BatchOrchestrator
from .types import RepositoryHandle, RunStatistics, SyncOutcome, SyncParameters
from .utils import get_version

__all__ = [
    "BatchOrchestrator",
    "RepositoryHandle",
    "RunStatistics",
    "SyncConfig",
    "SyncEngine",
    "SyncOutcome",
    "SyncParameters",
    "get_version",
    "main",
]
