"""
Services module - Application business logic layer.

Modules:
- ledger: Activity record store, streak engine and dashboard statistics
"""
# Main exports for convenience
from fitledger.services.ledger import ActivityService, RecordStore, UserLockRegistry

__all__ = [
    "ActivityService",
    "RecordStore",
    "UserLockRegistry",
]
