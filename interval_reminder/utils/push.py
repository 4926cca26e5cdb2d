import httpx
import logging
from typing import Optional, Dict, Any

logger = logging.getLogger("interval_reminder.push")


async def send_push_notification(
    push_url: str,
    notification: Dict[str, Any],
    token: Optional[str] = None,
    *,
    timeout: float = 10,
) -> None:
    """Hand a delivered notification off to a webhook."""
    if not push_url:
        return

    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    payload = _push_payload(notification)

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            resp = await client.post(push_url, json=payload, headers=headers)
            resp.raise_for_status()
            logger.info("Push sent for %s (%s)", notification.get("identifier"), resp.status_code)
    except httpx.HTTPStatusError as e:
        logger.warning("Push rejected (%s) for %s", e.response.status_code, notification.get("identifier"))
        raise
    except Exception as e:
        logger.error("Push error: %s", e)
        raise


def _push_payload(notification: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "kind": "reminder",
        "id": notification.get("identifier"),
        "title": notification.get("title"),
        "subtitle": notification.get("subtitle"),
        "body": notification.get("body"),
        "sound": notification.get("sound"),
        "category": notification.get("category"),
        "fire_time": notification.get("fire_time"),
    }
