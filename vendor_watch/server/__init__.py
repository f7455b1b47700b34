"""HTTP server exposing the webhook."""

from vendor_watch.server.app import (
    create_app_from_settings,
    create_web_app,
    start_server,
    to_http_response,
)

__all__ = [
    "create_app_from_settings",
    "create_web_app",
    "start_server",
    "to_http_response",
]
