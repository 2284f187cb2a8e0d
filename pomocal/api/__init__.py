"""HTTP surface for pomocal."""

from pomocal.api.main import create_app

__all__ = ["create_app"]
