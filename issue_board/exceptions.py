"""
Error types raised by the issue board pipeline.
"""


class IssueBoardError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(IssueBoardError):
    """Missing GitHub settings, data paths or input files."""


class ParseError(IssueBoardError):
    """Malformed frontmatter, missing title, bad file name or manifest."""


class HierarchyError(IssueBoardError):
    """A story references an epic that does not exist."""


class OrderingError(IssueBoardError):
    """A story is missing from the priority manifest."""


class ExternalServiceError(IssueBoardError):
    """A GitHub API call failed."""
