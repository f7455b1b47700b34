"""Pure functions that render a classification into Slack mrkdwn."""

from __future__ import annotations

from vendor_watch.core.types import AnnouncementClassification

ALERT_BANNER = "🚨 *VENDOR ANNOUNCEMENT DETECTED*"

# Appended to every alert; the loop guard looks for it in incoming text.
ALERT_SIGNATURE = "_Detected by automated monitoring_"

UNKNOWN = "unknown"
PERMALINK_FALLBACK = "See message above"


def _mention_markup(mention: str | None) -> str:
    if not mention:
        return ""
    mention = mention.strip().lstrip("@")
    if mention.startswith("<") and mention.endswith(">"):
        return mention
    return f"<@{mention}>"


def format_alert_text(
    classification: AnnouncementClassification,
    permalink: str | None,
    mention: str | None = None,
) -> str:
    """Build the alert body posted as a thread reply."""
    banner = ALERT_BANNER
    tag = _mention_markup(mention)
    if tag:
        banner = f"{banner} {tag}"

    type_label = classification.type.value if classification.type else UNKNOWN
    impact_label = classification.impact.value if classification.impact else UNKNOWN

    lines = [
        banner,
        "",
        f"*Type:* {type_label}",
        f"*Vendor:* {classification.vendor or UNKNOWN}",
        f"*Impact:* {impact_label}",
        "",
        "*Summary:*",
        classification.summary,
        "",
        f"*Original Message:* {permalink or PERMALINK_FALLBACK}",
        "",
        "---",
        ALERT_SIGNATURE,
    ]
    return "\n".join(lines)
