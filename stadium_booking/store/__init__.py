from stadium_booking.store.base import RecordStore
from stadium_booking.store.memory import InMemoryRecordStore

__all__ = ["RecordStore", "InMemoryRecordStore"]
