"""
Issue Board Creator

Create GitHub epics, sub-issue stories and project board cards from markdown files.
"""

__version__ = "1.0.0"
__author__ = "Issue Board Creator"

from .exceptions import (
    ConfigurationError,
    ExternalServiceError,
    HierarchyError,
    IssueBoardError,
    OrderingError,
    ParseError,
)
from .github_client import GitHubClient
from .orchestrator import CreationOrchestrator

__all__ = [
    "CreationOrchestrator",
    "GitHubClient",
    "IssueBoardError",
    "ConfigurationError",
    "ParseError",
    "HierarchyError",
    "OrderingError",
    "ExternalServiceError",
]
