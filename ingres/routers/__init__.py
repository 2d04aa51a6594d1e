"""
Routers package initialization.
"""
from ingres.routers import assessments
from ingres.routers import comparison
from ingres.routers import export
from ingres.routers import chat
from ingres.routers import ai

__all__ = [
    "assessments",
    "comparison",
    "export",
    "chat",
    "ai",
]
