# Storage Layer - Alert Position Persistence
from .position_store import JsonPositionStore

__all__ = ["JsonPositionStore"]
