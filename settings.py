"""
Runtime configuration for the WhatsLeft store link service.

Everything the request handlers need is collected in a frozen ``Settings``
value that is built once at startup (``Settings.from_env()``) and handed to
``create_app``. Only ``PORT`` and ``LOG_LEVEL`` come from the environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent
ASSETS_DIR = BASE_DIR / "assets"


@dataclass(frozen=True)
class FlyerLayout:
    """Placement of the flyer elements, in millimetres from the top-left corner."""

    page_width: float = 210.0
    page_height: float = 297.0

    qr_size: float = 120.0
    # top edge of the QR code: 279 - 20 - qr_size
    qr_top: float = 139.0

    teaser_x: float = 20.0
    teaser_y: float = 20.0
    teaser_width: float = 170.0
    # ends above qr_top
    teaser_max_height: float = 115.0

    logo_x: float = 120.0
    logo_y: float = 267.0
    logo_width: float = 70.0
    # ends above the bottom page edge
    logo_max_height: float = 25.0

    @property
    def qr_left(self) -> float:
        return (self.page_width - self.qr_size) / 2


@dataclass(frozen=True)
class Settings:
    port: int = 8080
    log_level: str = "INFO"

    project_domain: str = "engpass.appspot.com"
    partner_domain: str = "whatsleft.wirvsvirus.net"
    store_prefix: str = "/store/"
    place_id_format: str = r"[A-Za-z0-9-_]+"

    qr_error_correction: str = "H"
    qr_size_px: int = 1024

    template_folder: Path = ASSETS_DIR / "templates"
    store_template: str = "store-whatsleft.html"
    teaser_image: Path = ASSETS_DIR / "images" / "teaser-whatsleft.png"
    logo_image: Path = ASSETS_DIR / "images" / "logo-projekt.png"

    flyer: FlyerLayout = field(default_factory=FlyerLayout)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            port=int(os.getenv("PORT") or "8080"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
