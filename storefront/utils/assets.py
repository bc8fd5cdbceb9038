from urllib.parse import quote, urlparse

from flask import current_app, request


def asset_url(path):
    """Absolute URL for a stored asset path, or None when there is no path."""
    if not path:
        return None
    if urlparse(path).scheme in ("http", "https"):
        return path

    base_url = current_app.config.get("ASSET_BASE_URL") or request.host_url
    return f"{base_url.rstrip('/')}/{quote(path.lstrip('/'))}"
