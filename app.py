import io
import logging
from typing import Optional

from flask import Flask, Response, abort, current_app, render_template, request, send_file
from jinja2 import TemplateError

from flyer import FlyerError, render_flyer_pdf
from qr_image import QRCodeError, render_qr_png
from settings import Settings
from store_links import (
    flyer_filename,
    flyer_title,
    is_valid_place_id,
    partner_url,
    project_url,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Every verb is answered like GET.
ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]


def _settings() -> Settings:
    return current_app.config["STORE_SETTINGS"]


def _server_error(exc: Exception) -> Response:
    return Response(f"{exc}\n", status=500, mimetype="text/plain")


def _log_request() -> None:
    logger.info("handle URL path %s ...", request.path)


def index():
    return Response("Hello world!", mimetype="text/plain")


def store_redirect(place_id: str):
    settings = _settings()
    if not is_valid_place_id(place_id, settings):
        abort(404)

    target_url = partner_url(place_id, settings)
    logger.info("redirecting to %s ...", target_url)

    # The landing page is sent along with the 302 for clients that do not
    # follow redirects.
    try:
        body = render_template(
            settings.store_template,
            GooglePlaceID=place_id,
            WhatsLeftURL=target_url,
        )
    except TemplateError as exc:
        logger.exception("Rendering %s failed", settings.store_template)
        return _server_error(exc)

    return Response(body, status=302, headers={"Location": target_url}, mimetype="text/html")


def store_asset(place_id: str, mode: str):
    settings = _settings()
    if not is_valid_place_id(place_id, settings):
        abort(404)

    if mode == "pdf":
        return _store_flyer(place_id, settings)
    if mode == "qr":
        return _store_qr_code(place_id, settings)
    abort(404)


def _store_flyer(place_id: str, settings: Settings):
    target_url = project_url(place_id, settings)
    file_name = flyer_filename(place_id)
    logger.info("generating PDF %s with QR code pointing to %s", file_name, target_url)

    try:
        document = render_flyer_pdf(target_url, settings, title=flyer_title(place_id))
    except FlyerError as exc:
        logger.error("Flyer for %s failed: %s", place_id, exc)
        return _server_error(exc)

    response = Response(document, mimetype="application/pdf")
    response.headers["Content-Disposition"] = f'inline; filename="{file_name}"'
    return response


def _store_qr_code(place_id: str, settings: Settings):
    target_url = project_url(place_id, settings)
    logger.info("generating QR code pointing to %s", target_url)

    try:
        image = render_qr_png(
            target_url,
            size_px=settings.qr_size_px,
            error_correction=settings.qr_error_correction,
        )
    except QRCodeError as exc:
        logger.error("QR code for %s failed: %s", place_id, exc)
        return _server_error(exc)

    return send_file(io.BytesIO(image), mimetype="image/png")


def configure_logging(settings: Settings) -> None:
    """Send log records to stderr unless the host server already configured logging."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask application around an immutable ``Settings`` value."""
    settings = settings or Settings.from_env()
    configure_logging(settings)

    flask_app = Flask(__name__, template_folder=str(settings.template_folder))
    flask_app.config["STORE_SETTINGS"] = settings

    prefix = settings.store_prefix.rstrip("/")
    flask_app.before_request(_log_request)
    for rule, endpoint, view in (
        ("/", "index", index),
        (f"{prefix}/<place_id>", "store_redirect", store_redirect),
        (f"{prefix}/<place_id>/<mode>", "store_asset", store_asset),
    ):
        flask_app.add_url_rule(
            rule, endpoint, view, methods=ANY_METHOD, provide_automatic_options=False
        )
    return flask_app


app = create_app()


if __name__ == "__main__":
    runtime_settings = app.config["STORE_SETTINGS"]
    logger.info("Listening on port %s", runtime_settings.port)
    app.run(host="0.0.0.0", port=runtime_settings.port)
