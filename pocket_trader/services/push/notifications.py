"""Push payload rendering and notification-click routing"""
from typing import Any, Dict, Optional


DEFAULT_NOTIFICATION: Dict[str, Any] = {
    "title": "🔔 تنبيه سعري",
    "body": "لديك تنبيه جديد",
    "icon": "/favicon.png",
    "badge": "/favicon.png",
    "requireInteraction": True,
    "vibrate": [400, 100, 400, 100, 600],
    "tag": "price-alert",
}

# In-app route opened when a notification of this type is clicked
TYPE_ROUTES: Dict[str, str] = {
    "price_alert": "/markets",
    "economic_event": "/economic-calendar",
    "signal": "/binary-options",
    "professional_signal": "/professional-signals",
    "community": "/community",
}
DEFAULT_ROUTE = "/markets"


def resolve_click_url(
    data: Optional[Dict[str, Any]],
    action: Optional[str] = None,
    notification_type: Optional[str] = None,
) -> Optional[str]:
    """
    Route for a clicked notification

    Args:
        data: notification data
        action: clicked action button, if any
        notification_type: notification type (falls back to data["type"])

    Returns:
        Path to open, or None when the close action was clicked
    """
    if action == "close":
        return None
    data = data or {}
    if data.get("url"):
        return data["url"]
    notification_type = notification_type or data.get("type")
    return TYPE_ROUTES.get(notification_type or "", DEFAULT_ROUTE)


def render_notification(payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Fill a push payload with the defaults the service worker applies

    The worker spreads the payload over its own defaults and reads
    ``title``, ``body`` and ``data.url`` from the top level, so the payload
    stays flat. ``data.url`` is always set so the worker can route a click
    without knowing the type table.

    Returns:
        ``{title, body, icon, badge, tag, vibrate, requireInteraction, data}``
    """
    merged = {**DEFAULT_NOTIFICATION, **(payload or {})}
    data = dict(merged.get("data") or {})
    if merged.get("type") and "type" not in data:
        data["type"] = merged["type"]
    data["url"] = resolve_click_url(data)

    return {
        "title": merged["title"],
        "body": merged["body"],
        "icon": merged.get("icon") or DEFAULT_NOTIFICATION["icon"],
        "badge": merged.get("badge") or DEFAULT_NOTIFICATION["badge"],
        "tag": merged.get("tag") or DEFAULT_NOTIFICATION["tag"],
        "vibrate": merged.get("vibrate") or DEFAULT_NOTIFICATION["vibrate"],
        "requireInteraction": merged.get("requireInteraction") is not False,
        "data": data,
    }
