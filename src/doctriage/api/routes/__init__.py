"""
API route modules.
"""

from doctriage.api.routes import archives, documents, graph, relationships

__all__ = ["archives", "documents", "graph", "relationships"]
