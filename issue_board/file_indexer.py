"""
Discovery of epic and story markdown files.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Tuple

from .exceptions import ConfigurationError, ParseError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = '.md'
EPIC_PATTERN = re.compile(r'^(\d+)-')
STORY_PATTERN = re.compile(r'^(\d+)-(\d+)(?=-|\.md$)')

# (file name, raw content)
EpicSource = Tuple[str, str]
# (epic id, story number, file name, raw content)
StorySource = Tuple[str, str, str, str]


class FileIndexer:
    """List markdown records and derive their identity from file names."""

    def __init__(self, encoding: str = 'utf-8'):
        self.encoding = encoding

    def index_epics(self, epics_dir) -> Dict[str, EpicSource]:
        """
        Index epic files by the leading digit run of their name.

        ``001-user-accounts.md`` becomes epic ``"001"``.

        Args:
            epics_dir: Directory containing epic markdown files

        Returns:
            Mapping of epic id to (file name, content), in file name order
        """
        epics: Dict[str, EpicSource] = {}

        for path in self._list_markdown(epics_dir, 'epics'):
            match = EPIC_PATTERN.match(path.name)
            if not match:
                raise ParseError(f"{path.name}: epic file names must start with '<number>-'")

            epic_id = match.group(1)
            if epic_id in epics:
                raise ParseError(
                    f"{path.name}: epic {epic_id} is already defined by {epics[epic_id][0]}"
                )

            epics[epic_id] = (path.name, path.read_text(encoding=self.encoding))

        logger.info(f"Indexed {len(epics)} epic file(s) in {epics_dir}")
        return epics

    def index_stories(self, stories_dir) -> List[StorySource]:
        """
        Index story files by their ``<epicId>-<storyNumber>`` prefix.

        ``001-002-login.md`` becomes story ``"002"`` of epic ``"001"``.

        Args:
            stories_dir: Directory containing story markdown files

        Returns:
            List of (epic id, story number, file name, content), in file name order
        """
        stories: List[StorySource] = []
        seen: Dict[str, str] = {}

        for path in self._list_markdown(stories_dir, 'stories'):
            match = STORY_PATTERN.match(path.name)
            if not match:
                raise ParseError(
                    f"{path.name}: story file names must start with '<epic number>-<story number>'"
                )

            epic_id, story_number = match.groups()
            story_id = f"{epic_id}-{story_number}"
            if story_id in seen:
                raise ParseError(f"{path.name}: story {story_id} is already defined by {seen[story_id]}")
            seen[story_id] = path.name

            stories.append((epic_id, story_number, path.name, path.read_text(encoding=self.encoding)))

        logger.info(f"Indexed {len(stories)} story file(s) in {stories_dir}")
        return stories

    def _list_markdown(self, directory, kind: str) -> List[Path]:
        directory = Path(directory)
        if not directory.is_dir():
            raise ConfigurationError(f"The {kind} directory does not exist: {directory}")

        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix == MARKDOWN_SUFFIX),
            key=lambda p: p.name
        )
