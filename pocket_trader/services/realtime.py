"""In-process change feed for table-level realtime updates"""
import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional, Set
from loguru import logger


def row_to_dict(row: Any) -> Dict[str, Any]:
    """Column values of an ORM row"""
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


class ChangeFeed:
    """
    Fan-out of INSERT/UPDATE/DELETE events per table

    Subscribers get their own bounded queue; when a slow subscriber's queue
    is full the event is dropped for that subscriber only.
    """

    def __init__(self, max_queue_size: int = 100):
        self.max_queue_size = max_queue_size
        self._subscribers: Dict[str, Set[asyncio.Queue]] = {}

    def publish(self, table: str, event: str, record: Optional[Any] = None) -> int:
        """
        Publish a change event

        Args:
            table: table name
            event: INSERT, UPDATE or DELETE
            record: ORM row or plain dict

        Returns:
            Number of subscribers the event was queued for
        """
        if record is not None and hasattr(record, "__table__"):
            record = row_to_dict(record)
        payload = {"table": table, "event": event, "record": record}

        delivered = 0
        for queue in list(self._subscribers.get(table, ())):
            try:
                queue.put_nowait(payload)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(f"Change feed subscriber on {table} is lagging, event dropped")
        return delivered

    @asynccontextmanager
    async def subscribe(self, table: str) -> AsyncIterator[asyncio.Queue]:
        """Register a subscriber queue for the lifetime of the context"""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue_size)
        self._subscribers.setdefault(table, set()).add(queue)
        logger.debug(f"Change feed subscriber added: {table}")
        try:
            yield queue
        finally:
            self._subscribers[table].discard(queue)
            logger.debug(f"Change feed subscriber removed: {table}")

    def subscriber_count(self, table: str) -> int:
        return len(self._subscribers.get(table, ()))


# Global change feed instance
change_feed = ChangeFeed()
