"""
Tests for epic and story file discovery.
"""

import pytest

from issue_board.exceptions import ConfigurationError, ParseError
from issue_board.file_indexer import FileIndexer


@pytest.fixture
def indexer():
    return FileIndexer()


def test_epic_ids_from_leading_digits(indexer, make_data):
    """Test that the epic id is the leading digit run of the file name."""
    epics_dir, _, _ = make_data(
        epics={'001-accounts.md': 'a', '0042-billing-and-tax.md': 'b', '7-x.md': 'c'},
        stories={},
        priority=[],
    )

    epics = indexer.index_epics(epics_dir)

    assert list(epics) == ['001', '0042', '7']
    assert epics['001'] == ('001-accounts.md', 'a')


def test_non_markdown_files_ignored(indexer, make_data):
    """Test that only .md files are indexed."""
    epics_dir, _, _ = make_data(
        epics={'001-accounts.md': 'a', 'README.txt': 'x', 'notes': 'y'},
        stories={},
        priority=[],
    )

    assert list(indexer.index_epics(epics_dir)) == ['001']


def test_epic_bad_name(indexer, make_data):
    """Test that an epic file without a numeric prefix is rejected."""
    epics_dir, _, _ = make_data(epics={'accounts.md': 'a'}, stories={}, priority=[])

    with pytest.raises(ParseError, match='accounts.md'):
        indexer.index_epics(epics_dir)


def test_duplicate_epic_id(indexer, make_data):
    """Test that two files for the same epic id are rejected."""
    epics_dir, _, _ = make_data(
        epics={'001-a.md': 'a', '001-b.md': 'b'},
        stories={},
        priority=[],
    )

    with pytest.raises(ParseError, match='already defined'):
        indexer.index_epics(epics_dir)


def test_story_tuples(indexer, make_data):
    """Test story identity from the first two name segments."""
    _, stories_dir, _ = make_data(
        epics={},
        stories={'001-002-log-in.md': 'b', '001-001-sign-up.md': 'a', '002-010.md': 'c'},
        priority=[],
    )

    stories = indexer.index_stories(stories_dir)

    assert stories == [
        ('001', '001', '001-001-sign-up.md', 'a'),
        ('001', '002', '001-002-log-in.md', 'b'),
        ('002', '010', '002-010.md', 'c'),
    ]


@pytest.mark.parametrize('name', ['001-sign-up.md', 'sign-up.md', '001-002x.md'])
def test_story_bad_name(indexer, make_data, name):
    """Test that story files must start with two numeric segments."""
    _, stories_dir, _ = make_data(epics={}, stories={name: 'a'}, priority=[])

    with pytest.raises(ParseError, match=name):
        indexer.index_stories(stories_dir)


def test_missing_directory(indexer, tmp_path):
    """Test that a missing directory is a configuration error."""
    with pytest.raises(ConfigurationError, match='epics'):
        indexer.index_epics(tmp_path / 'nope')
