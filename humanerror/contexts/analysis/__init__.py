"""
Analysis Context

Responsibilities:
- Runs resolution and message generation for one job title
- Stores and consumes precomputed resolutions per session
- Hands finished messages to the reveal context

Owns: The end-to-end flow and session persistence
Never: Changes matching rules or catalog data
"""

from humanerror.contexts.analysis.engine import AnalysisResult, RoastEngine
from humanerror.contexts.analysis.session_store import (
    InMemorySessionStore,
    JsonFileSessionStore,
    SessionStore,
    SessionStoreError,
)

__all__ = [
    "AnalysisResult",
    "InMemorySessionStore",
    "JsonFileSessionStore",
    "RoastEngine",
    "SessionStore",
    "SessionStoreError",
]
