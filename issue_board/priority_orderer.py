"""
Story ordering from the priority manifest.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List

from .exceptions import ConfigurationError, OrderingError, ParseError
from .models import StoryRecord

logger = logging.getLogger(__name__)


class PriorityOrderer:
    """Rank stories by their position in the priority manifest."""

    def load_manifest(self, priority_file) -> List[str]:
        """
        Read the manifest: a JSON array of ``"<epicId>-<storyNumber>"`` strings.

        Args:
            priority_file: Path to the manifest

        Returns:
            Story ids in priority order
        """
        path = Path(priority_file)
        if not path.is_file():
            raise ConfigurationError(f"Priority file does not exist: {path}")

        try:
            manifest = json.loads(path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as e:
            raise ParseError(f"{path.name}: invalid JSON: {e}") from e

        if not isinstance(manifest, list) or not all(isinstance(entry, str) for entry in manifest):
            raise ParseError(f"{path.name}: priority file must be a JSON array of story ids")

        logger.info(f"Loaded {len(manifest)} entries from {path}")
        return manifest

    def order(self, stories: Iterable[StoryRecord], manifest: List[str]) -> List[StoryRecord]:
        """
        Assign ``priority = manifest index + 1`` and sort ascending.

        Args:
            stories: Stories to rank
            manifest: Story ids in priority order

        Returns:
            Stories sorted by priority
        """
        positions: Dict[str, int] = {}
        for index, story_id in enumerate(manifest):
            if story_id in positions:
                # Duplicates are not part of the manifest format; the first entry wins.
                logger.warning(f"Story {story_id} is listed more than once in the priority file")
                continue
            positions[story_id] = index

        ordered = []
        for story in stories:
            index = positions.get(story.story_id)
            if index is None:
                raise OrderingError(f"Story {story.source} ({story.story_id}) not found in priority order")
            story.priority = index + 1
            ordered.append(story)

        ordered.sort(key=lambda s: s.priority)

        unused = len(positions) - len(ordered)
        if unused > 0:
            logger.debug(f"{unused} manifest entries have no matching story file")

        logger.info(f"✓ Ordered {len(ordered)} stories")
        return ordered
