#!/usr/bin/env python3
"""
Example: Create GitHub issues and project cards from markdown files.

This script demonstrates how to use the pipeline stages to:
1. Index and parse epics and stories
2. Preview the story creation order without touching GitHub
3. Create labels, epics and stories on GitHub

Usage:
    python create_board.py            # preview only
    python create_board.py --create   # preview, then create
"""

import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from issue_board import CreationOrchestrator, GitHubClient
from issue_board.file_indexer import FileIndexer
from issue_board.hierarchy_builder import HierarchyBuilder, iter_stories
from issue_board.priority_orderer import PriorityOrderer

DATA_DIR = Path(__file__).parent / 'data'


def main():
    """Preview, and optionally create, the example board."""
    # Configuration
    GITHUB_OWNER = os.getenv('GITHUB_OWNER')
    GITHUB_REPO = os.getenv('GITHUB_REPO')
    GITHUB_TOKEN = os.getenv('GITHUB_TOKEN')
    EPICS_DIR = os.getenv('EPICS_DIR', str(DATA_DIR / 'epics'))
    STORIES_DIR = os.getenv('STORIES_DIR', str(DATA_DIR / 'stories'))
    PRIORITY_FILE = os.getenv('PRIORITY_FILE', str(DATA_DIR / 'priority.json'))

    indexer = FileIndexer()
    orderer = PriorityOrderer()

    epics = HierarchyBuilder().build(indexer.index_epics(EPICS_DIR), indexer.index_stories(STORIES_DIR))
    stories = orderer.order(iter_stories(epics), orderer.load_manifest(PRIORITY_FILE))

    print("Epics")
    print("=" * 60)
    for epic in epics.values():
        print(f"{epic.id}  {epic.title}  [{epic.label or '-'}]  {len(epic.stories)} stories")
    print()
    print("Story creation order")
    print("=" * 60)
    for story in stories:
        print(f"{story.priority:>3}. {story.story_id}  {story.title}")
    print()

    if '--create' not in sys.argv:
        print("Preview only. Run with --create to push to GitHub.")
        return

    if not (GITHUB_OWNER and GITHUB_REPO and GITHUB_TOKEN):
        print("Error: GITHUB_OWNER, GITHUB_REPO and GITHUB_TOKEN environment variables are required")
        sys.exit(1)

    client = GitHubClient(token=GITHUB_TOKEN)
    try:
        stats = CreationOrchestrator(client, GITHUB_OWNER, GITHUB_REPO, verbose=True).run(
            EPICS_DIR, STORIES_DIR, PRIORITY_FILE
        )
    finally:
        client.close()

    print()
    print("Creation Complete!")
    print("=" * 60)
    print(f"Labels:          {stats['label_count']}")
    print(f"Epics:           {stats['epic_count']}")
    print(f"Stories:         {stats['story_count']}")
    print("=" * 60)


if __name__ == '__main__':
    main()
