"""
DocTriage: legal document triage and relationship visualization.

Holds the review state for documents extracted from uploaded archives,
their inter-document relationships, and the force-directed relationship
graph used to browse them.
"""

__version__ = "0.1.0"
__author__ = "DocTriage Team"

from doctriage.config import get_settings

__all__ = ["get_settings", "__version__"]
