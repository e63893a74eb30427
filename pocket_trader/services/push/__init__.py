"""Web Push services"""
from .notifications import (
    DEFAULT_NOTIFICATION,
    TYPE_ROUTES,
    render_notification,
    resolve_click_url,
)
from .sender import PushSender
from .subscriptions import PushSubscriptionService

__all__ = [
    "DEFAULT_NOTIFICATION",
    "TYPE_ROUTES",
    "render_notification",
    "resolve_click_url",
    "PushSender",
    "PushSubscriptionService",
]
