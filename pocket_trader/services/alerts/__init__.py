"""Price alerts"""
from .checker import PriceAlertChecker, PriceAlertWatcher, alert_message, is_triggered
from .service import PriceAlertService

__all__ = [
    "PriceAlertChecker",
    "PriceAlertWatcher",
    "PriceAlertService",
    "alert_message",
    "is_triggered",
]
