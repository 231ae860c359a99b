# schedule_service/utils/slug.py
import re


def section_room_slug(section_id: str) -> str:
    """
    Deterministic slug of the room auto-provisioned for a class section.

    Only lowercase letters and digits of the section id are kept, so
    "sec_9F2A-01" becomes "section-sec9f2a01". The same section always maps
    to the same slug, which is what makes room provisioning idempotent.
    """
    compact = re.sub(r"[^a-z0-9]", "", section_id.lower())
    return f"section-{compact}"


def meeting_slug(base_slug: str, meeting_number: int) -> str:
    """Slug of the N-th meeting of a teaching assignment."""
    return f"{base_slug.strip()}-pertemuan-{meeting_number}"
