"""DB package"""
from .session import get_db, init_db, close_db, AsyncSessionLocal

__all__ = ["get_db", "init_db", "close_db", "AsyncSessionLocal"]
