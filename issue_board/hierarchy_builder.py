"""
Epic/story hierarchy building from indexed markdown files.
"""

import logging
from typing import Dict, Iterator, List, Optional

from .exceptions import HierarchyError, ParseError
from .file_indexer import EpicSource, StorySource
from .markdown_parser import MarkdownRecordParser
from .models import EpicRecord, Narrative, StoryRecord

logger = logging.getLogger(__name__)


class HierarchyBuilder:
    """Build EpicRecords with their StoryRecords attached."""

    def __init__(self, parser: Optional[MarkdownRecordParser] = None):
        """
        Initialize hierarchy builder.

        Args:
            parser: Markdown parser (defaults to MarkdownRecordParser)
        """
        self.parser = parser or MarkdownRecordParser()

    def build(
        self,
        epic_sources: Dict[str, EpicSource],
        story_sources: List[StorySource]
    ) -> Dict[str, EpicRecord]:
        """
        Parse every epic, then attach every story to its epic.

        Args:
            epic_sources: Mapping of epic id to (file name, content)
            story_sources: List of (epic id, story number, file name, content)

        Returns:
            Mapping of epic id to EpicRecord, in discovery order
        """
        logger.info(f"Building hierarchy from {len(epic_sources)} epics and {len(story_sources)} stories")

        epics: Dict[str, EpicRecord] = {}
        for epic_id, (source, content) in epic_sources.items():
            epics[epic_id] = self._build_epic(epic_id, source, content)

        for epic_id, story_number, source, content in story_sources:
            epic = epics.get(epic_id)
            if epic is None:
                raise HierarchyError(f"{source}: story references unknown epic {epic_id}")

            story = self._build_story(epic_id, story_number, source, content)
            epic.stories.append(story)
            logger.debug(f"Attached story {story.story_id} to epic {epic_id}")

        for epic in epics.values():
            if not epic.stories:
                logger.warning(f"Epic {epic.id} ({epic.source}) has no stories")

        logger.info(f"✓ Built hierarchy: {len(epics)} epics, {sum(len(e.stories) for e in epics.values())} stories")
        return epics

    def _build_epic(self, epic_id: str, source: str, content: str) -> EpicRecord:
        fields, description = self.parser.parse(content, source)

        if not fields.get('title'):
            raise ParseError(f"{source}: epic title is not set")

        return EpicRecord(
            id=epic_id,
            title=fields['title'],
            label=fields.get('label'),
            narrative=Narrative.from_fields(fields, source),
            description=description,
            source=source
        )

    def _build_story(self, epic_id: str, story_number: str, source: str, content: str) -> StoryRecord:
        fields, description = self.parser.parse(content, source)
        narrative = Narrative.from_fields(fields, source)

        title = narrative.title if narrative else fields.get('title')
        if not title:
            raise ParseError(f"{source}: story title is not set")

        return StoryRecord(
            epic_id=epic_id,
            story_number=story_number,
            title=title,
            narrative=narrative,
            description=description,
            source=source
        )


def iter_stories(epics: Dict[str, EpicRecord]) -> Iterator[StoryRecord]:
    """Yield every story, epic by epic, in discovery order."""
    for epic in epics.values():
        yield from epic.stories
