"""
Google Calendar links derived from poster metadata.
"""

from typing import Dict, Optional
from urllib.parse import urlencode

from .data_models import PosterMetadata


CALENDAR_URL = "https://calendar.google.com/calendar/render"


def build_calendar_link(title: str, date_iso: str, details: str,
                        metadata: PosterMetadata) -> Optional[str]:
    """
    Build an all-day "add event" link.

    Args:
        title: Event title
        date_iso: Date as YYYYMMDD; only the first 8 characters are used
        details: Event description; the poster link is appended
        metadata: Record providing the link and location

    Returns:
        Calendar URL, or None when the date is missing or too short
    """
    if not date_iso or len(date_iso) < 8:
        return None

    start_date = date_iso[:8]
    params = {
        "action": "TEMPLATE",
        "text": title,
        "details": f"{details}\n\nLink: {metadata.link}",
        "location": metadata.location,
        "dates": f"{start_date}/{start_date}",
    }
    return f"{CALENDAR_URL}?{urlencode(params)}"


def calendar_links(metadata: PosterMetadata) -> Dict[str, str]:
    """Registration deadline and event date links, omitting unavailable ones."""
    name = metadata.competition_name
    links = {
        "registration": build_calendar_link(
            f"Deadline: {name}",
            metadata.registration_deadline_iso,
            f"Deadline pendaftaran lomba {name}.",
            metadata,
        ),
        "event": build_calendar_link(
            f"Event: {name}",
            metadata.event_date_iso,
            f"Pelaksanaan lomba {name}.",
            metadata,
        ),
    }
    return {kind: url for kind, url in links.items() if url}
