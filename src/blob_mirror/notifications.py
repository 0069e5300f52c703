# ABOUTME: Discord webhook notifications for mirror run results.
# ABOUTME: Sends summaries on completion or on per-object failures.

import logging

import requests

from .manifest import MirrorResult

logger = logging.getLogger(__name__)

WEBHOOK_TIMEOUT = 10  # seconds

# Number of failures listed before collapsing the rest
MAX_LISTED_ERRORS = 3


def _format_duration(duration_seconds: float) -> str:
    minutes = int(duration_seconds // 60)
    seconds = int(duration_seconds % 60)
    return f"{minutes}m {seconds}s" if minutes > 0 else f"{seconds}s"


def build_embed(result: MirrorResult) -> dict:
    """Build the Discord embed describing a mirror run."""
    colors = {
        "completed": 0x00FF00,
        "completed_with_warnings": 0xFFFF00,
        "failed": 0xFF0000,
    }
    emojis = {
        "completed": "✅",
        "completed_with_warnings": "⚠️",
        "failed": "❌",
    }

    size_mb = result.bytes_downloaded / (1024 * 1024)
    description_lines = [
        f"**Downloaded:** {result.downloaded} ({size_mb:.1f} MB)",
        f"**Skipped:** {result.skipped}",
        f"**Failed:** {result.failed}",
        f"**Duration:** {_format_duration(result.duration_seconds)}",
    ]

    if result.status == "failed":
        description_lines.append(f"**Error:** [{result.error_type}] {result.error_message}")

    failures = result.failures
    if failures:
        shown = failures if len(failures) <= MAX_LISTED_ERRORS else failures[:MAX_LISTED_ERRORS - 1]
        for outcome in shown:
            description_lines.append(f"  • {outcome.name}: {outcome.error_message}")
        if len(shown) < len(failures):
            description_lines.append(f"  • ... and {len(failures) - len(shown)} more")

    return {
        "title": f"{emojis.get(result.status, '📦')} Blob Mirror: {result.container}",
        "description": "\n".join(description_lines),
        "color": colors.get(result.status, 0x808080),
        "footer": {
            "text": f"Status: {result.status} | {result.output_root}",
        },
    }


def send_discord_notification(webhook_url: str, result: MirrorResult) -> bool:
    """Send a mirror run summary to Discord.

    Args:
        webhook_url: Discord webhook URL.
        result: Finished mirror result.

    Returns:
        True if notification sent successfully.
    """
    payload = {
        "embeds": [build_embed(result)],
    }

    try:
        response = requests.post(
            webhook_url,
            json=payload,
            timeout=WEBHOOK_TIMEOUT,
        )
        response.raise_for_status()
        logger.info(f"Sent Discord notification for {result.container}")
        return True

    except requests.RequestException as e:
        logger.error(f"Failed to send Discord notification: {e}")
        return False


def should_notify(notify_on: str, status: str) -> bool:
    """Determine if a notification should be sent.

    Args:
        notify_on: Notification mode ("always" or "error").
        status: Run status.

    Returns:
        True if notification should be sent.
    """
    if notify_on == "always":
        return True

    if notify_on == "error":
        return status in ("completed_with_warnings", "failed")

    return False
