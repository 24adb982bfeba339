"""Optional web query API (install the "web" extra)."""

from wcm_scanner.web.app import create_app

__all__ = ["create_app"]
