"""
Frontmatter parsing for epic and story markdown files.
"""

import logging
from typing import Dict, Optional, Tuple

import yaml

from .exceptions import ParseError

logger = logging.getLogger(__name__)

DELIMITER = '---'
KNOWN_FIELDS = ('title', 'label', 'role', 'action', 'benefit')


class MarkdownRecordParser:
    """Split a markdown document into frontmatter fields and a description."""

    def parse(self, text: str, source: str = '<string>') -> Tuple[Dict, str]:
        """
        Parse a markdown document.

        Args:
            text: Raw file content
            source: File name used in error messages

        Returns:
            Tuple of (fields, description)
        """
        text = text.lstrip('\ufeff')
        lines = text.splitlines()

        if not lines or lines[0].strip() != DELIMITER:
            return {}, text.strip()

        try:
            end = next(i for i in range(1, len(lines)) if lines[i].strip() == DELIMITER)
        except StopIteration:
            raise ParseError(f"{source}: frontmatter block is not closed")

        block = '\n'.join(lines[1:end])
        description = '\n'.join(lines[end + 1:]).strip()

        try:
            loaded = yaml.safe_load(block) if block.strip() else {}
        except yaml.YAMLError as e:
            raise ParseError(f"{source}: invalid frontmatter: {e}") from e

        if not isinstance(loaded, dict):
            raise ParseError(f"{source}: frontmatter must be a mapping")

        fields = dict(loaded)
        for key in KNOWN_FIELDS:
            fields[key] = self._normalize(fields.get(key))

        logger.debug(f"Parsed {source}: {sorted(k for k, v in fields.items() if v is not None)}")
        return fields, description

    @staticmethod
    def _normalize(value) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None
