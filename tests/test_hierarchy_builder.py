"""
Tests for hierarchy building functionality.
"""

import pytest
from unittest.mock import Mock

from issue_board.exceptions import HierarchyError, ParseError
from issue_board.hierarchy_builder import HierarchyBuilder, iter_stories


@pytest.fixture
def builder():
    """Create a HierarchyBuilder with the default parser."""
    return HierarchyBuilder()


def epic_source(name, title='Epic', label=None):
    lines = ['---', f'title: {title}']
    if label:
        lines.append(f'label: {label}')
    lines += ['---', 'Epic description']
    return (name, '\n'.join(lines))


def test_stories_grouped_under_epics(builder):
    """Test that stories are appended to their owning epic."""
    epics = builder.build(
        {
            '001': epic_source('001-accounts.md', 'Accounts', 'backend'),
            '002': epic_source('002-billing.md', 'Billing'),
        },
        [
            ('001', '001', '001-001-a.md', '---\ntitle: A\n---\n'),
            ('002', '001', '002-001-c.md', '---\ntitle: C\n---\n'),
            ('001', '002', '001-002-b.md', '---\ntitle: B\n---\n'),
        ]
    )

    assert list(epics) == ['001', '002']
    assert epics['001'].title == 'Accounts'
    assert epics['001'].label == 'backend'
    assert epics['001'].issue_id is None
    assert epics['001'].description == 'Epic description'
    assert [s.story_id for s in epics['001'].stories] == ['001-001', '001-002']
    assert [s.story_id for s in epics['002'].stories] == ['002-001']
    assert all(s.priority is None and s.issue_id is None for s in iter_stories(epics))


def test_story_title_from_narrative(builder):
    """Test that a narrative replaces the frontmatter title."""
    story_text = (
        "---\ntitle: Ignored\nrole: visitor\naction: log in\nbenefit: I see my data\n---\n"
        "Details."
    )

    epics = builder.build(
        {'001': epic_source('001-accounts.md')},
        [('001', '001', '001-001-log-in.md', story_text)]
    )
    story = epics['001'].stories[0]

    assert story.title == 'As a visitor, I want to log in'
    assert story.description == 'Details.'
    assert story.source == '001-001-log-in.md'


def test_unknown_epic(builder):
    """Test that a story pointing at a missing epic is fatal."""
    with pytest.raises(HierarchyError, match='009-001-orphan.md'):
        builder.build(
            {'001': epic_source('001-accounts.md')},
            [('009', '001', '009-001-orphan.md', '---\ntitle: Orphan\n---\n')]
        )


def test_story_without_title(builder):
    """Test that a story with no title and no narrative is rejected."""
    with pytest.raises(ParseError, match='001-001-empty.md'):
        builder.build(
            {'001': epic_source('001-accounts.md')},
            [('001', '001', '001-001-empty.md', '---\ntitle: ""\n---\nBody only')]
        )


def test_epic_without_title(builder):
    """Test that an epic must have a title."""
    with pytest.raises(ParseError, match='001-accounts.md'):
        builder.build({'001': ('001-accounts.md', '---\nlabel: backend\n---\n')}, [])


def test_custom_parser():
    """Test that the parser collaborator is used."""
    parser = Mock()
    parser.parse.return_value = ({'title': 'From parser'}, 'desc')

    epics = HierarchyBuilder(parser=parser).build({'001': ('001-x.md', 'raw')}, [])

    parser.parse.assert_called_once_with('raw', '001-x.md')
    assert epics['001'].title == 'From parser'
