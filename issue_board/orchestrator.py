"""
Main creation orchestrator: markdown records in, GitHub issues out.
"""

import logging
import time
from typing import Dict, List, Optional

from tqdm import tqdm

from .exceptions import ExternalServiceError
from .file_indexer import FileIndexer
from .hierarchy_builder import HierarchyBuilder, iter_stories
from .label_resolver import DEFAULT_EPIC_LABEL, LabelResolver
from .models import EpicRecord, StoryRecord
from .priority_orderer import PriorityOrderer

logger = logging.getLogger(__name__)


class CreationOrchestrator:
    """
    Create labels, then epics, then stories, strictly one call at a time.

    Each epic and story goes from pending (no issue id) to created (issue id
    set) exactly once. A failed call stops the run; whatever was already
    created on GitHub stays there and is reported in the log.
    """

    def __init__(
        self,
        client,
        owner: str,
        repo: str,
        reserved_label: str = DEFAULT_EPIC_LABEL,
        verbose: bool = False,
        **kwargs
    ):
        """
        Initialize orchestrator.

        Args:
            client: Tracker client (GitHubClient or compatible)
            owner: Repository owner
            repo: Repository name
            reserved_label: Label applied to every epic issue
            verbose: Show progress bars
            **kwargs: Replacement 'indexer', 'builder' or 'orderer' components
        """
        self.client = client
        self.owner = owner
        self.repo = repo
        self.verbose = verbose

        self.indexer = kwargs.get('indexer') or FileIndexer()
        self.builder = kwargs.get('builder') or HierarchyBuilder()
        self.orderer = kwargs.get('orderer') or PriorityOrderer()
        self.label_resolver = LabelResolver(client, reserved_label=reserved_label)

        self.repository_id: Optional[str] = None
        self.project_info: Optional[Dict] = None

    def run(self, epics_dir, stories_dir, priority_file) -> dict:
        """
        Run the whole pipeline.

        Args:
            epics_dir: Directory with epic markdown files
            stories_dir: Directory with story markdown files
            priority_file: JSON priority manifest

        Returns:
            Summary statistics dictionary
        """
        start_time = time.time()

        logger.info("=" * 80)
        logger.info("Issue Board Creator")
        logger.info("=" * 80)
        logger.info("Configuration:")
        logger.info(f"  GitHub: {self.owner}/{self.repo}")
        logger.info(f"  Epics: {epics_dir}")
        logger.info(f"  Stories: {stories_dir}")
        logger.info(f"  Priority: {priority_file}")
        logger.info("")

        # Phase 1: everything local, before any GitHub call
        logger.info("Phase 1: Reading epics, stories and priorities")
        logger.info("-" * 80)

        epics = self.builder.build(
            self.indexer.index_epics(epics_dir),
            self.indexer.index_stories(stories_dir)
        )
        manifest = self.orderer.load_manifest(priority_file)
        stories = self.orderer.order(iter_stories(epics), manifest)
        logger.info("")

        try:
            # Phase 2: repository, board and labels
            logger.info("Phase 2: Resolving repository, project and labels")
            logger.info("-" * 80)

            self.connect()
            self.label_resolver.resolve(self.repository_id, epics)
            logger.info("")

            # Phase 3: epics
            logger.info("Phase 3: Creating epics")
            logger.info("-" * 80)

            self.create_epics(epics)
            logger.info("")

            # Phase 4: stories
            logger.info("Phase 4: Creating stories")
            logger.info("-" * 80)

            self.create_stories(stories, epics)
            logger.info("")

        except Exception:
            self._report_partial_progress(epics, stories)
            raise

        elapsed = time.time() - start_time

        logger.info("=" * 80)
        logger.info("SUMMARY")
        logger.info("=" * 80)
        logger.info(f"Labels: {len(self.label_resolver.labels)}")
        logger.info(f"Epics: {len(epics)}")
        logger.info(f"Stories: {len(stories)}")
        logger.info(f"Execution Time: {elapsed:.2f}s")
        logger.info("=" * 80)

        return {
            'success': True,
            'label_count': len(self.label_resolver.labels),
            'epic_count': len(epics),
            'story_count': len(stories),
            'execution_time': elapsed,
        }

    def connect(self):
        """Look up the repository id and project board."""
        self.repository_id = self.client.get_repository_id(self.owner, self.repo)

        self.project_info = self.client.get_project_info(self.owner, self.repo)
        if not self.project_info:
            raise ExternalServiceError(f"Could not find project information for {self.owner}/{self.repo}")

    def create_epics(self, epics: Dict[str, EpicRecord]):
        """
        Create one issue per epic, labelled with the reserved label.

        Args:
            epics: Mapping of epic id to EpicRecord
        """
        label_id = self.label_resolver.reserved_label_id

        for epic in epics.values():
            epic.issue_id = self.client.create_issue(
                self.repository_id,
                self.project_info,
                self.owner,
                self.repo,
                {'title': epic.title, 'body': epic.body},
                label_id
            )
            logger.debug(f"Epic {epic.id} -> {epic.issue_id}")

        logger.info(f"✓ Created {len(epics)} epic(s)")

    def create_stories(self, stories: List[StoryRecord], epics: Dict[str, EpicRecord]):
        """
        Create stories in priority order, each as a sub-issue of its epic.

        Args:
            stories: Stories sorted by priority
            epics: Mapping of epic id to EpicRecord (all created)
        """
        if self.verbose:
            stories_iter = tqdm(stories, desc="Creating stories", unit="story")
        else:
            stories_iter = stories

        for story in stories_iter:
            epic = epics[story.epic_id]

            story.parent_issue_id = epic.issue_id
            label_id = self.label_resolver.label_id_for(epic.label)
            if label_id:
                story.label_id = label_id

            story.issue_id = self.client.create_issue_add_to_project(
                self.repository_id,
                self.project_info,
                self.owner,
                self.repo,
                {
                    'parent_issue_id': story.parent_issue_id,
                    'title': story.title,
                    'body': story.body,
                },
                story.label_id
            )
            logger.debug(f"Story {story.story_id} (priority {story.priority}) -> {story.issue_id}")

        logger.info(f"✓ Created {len(stories)} story issue(s)")

    def _report_partial_progress(self, epics: Dict[str, EpicRecord], stories: List[StoryRecord]):
        """Log what already exists on GitHub when a run aborts."""
        resolved = [label.name for label in self.label_resolver.labels.values() if label.id]
        created_epics = [epic.id for epic in epics.values() if epic.created]
        created_stories = [story.story_id for story in stories if story.created]

        logger.error("Run aborted; nothing created so far has been rolled back")
        logger.error(f"  Labels resolved: {', '.join(resolved) or 'none'}")
        logger.error(f"  Epics created: {', '.join(created_epics) or 'none'}")
        logger.error(f"  Stories created: {', '.join(created_stories) or 'none'}")
