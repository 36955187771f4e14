import re

from settings import Settings


def is_valid_place_id(place_id: str, settings: Settings) -> bool:
    """Place IDs are opaque; only the character set is checked."""
    return re.fullmatch(settings.place_id_format, place_id) is not None


def partner_url(place_id: str, settings: Settings) -> str:
    """Store page on the WhatsLeft site."""
    return f"https://{settings.partner_domain}{settings.store_prefix}{place_id}"


def project_url(place_id: str, settings: Settings) -> str:
    """Canonical URL of the store on this service, used inside QR codes."""
    return f"https://{settings.project_domain}{settings.store_prefix}{place_id}"


def flyer_title(place_id: str) -> str:
    return f"WhatsLeft - {place_id}"


def flyer_filename(place_id: str) -> str:
    return flyer_title(place_id).lower().replace(" ", "_") + ".pdf"
