"""
HTTP API for DocTriage.
"""

from doctriage.api.main import create_app

__all__ = ["create_app"]
