from .retry import NO_RETRY, RetryPolicy
from .local_cache import LocalCache
from .synced_collection import SyncedCollection
from .task_board import TaskBoard
from .ritual_tracker import CompletedItem, RitualTracker
from .big_rock_planner import BigRockPlanner
from .weekly_planner import WeeklyPlanner
from .planner import Planner
from .record_service import RecordService
from .sse_manager import SSEManager

__all__ = [
    "NO_RETRY",
    "RetryPolicy",
    "LocalCache",
    "SyncedCollection",
    "TaskBoard",
    "CompletedItem",
    "RitualTracker",
    "BigRockPlanner",
    "WeeklyPlanner",
    "Planner",
    "RecordService",
    "SSEManager",
]
