"""
Shared pytest fixtures for issue_board tests.
"""

import json
import pytest
from itertools import count
from unittest.mock import Mock


EPIC_ACCOUNTS = """---
title: User accounts
label: backend
role: visitor
action: manage my account
benefit: my data follows me
---
Everything about accounts.
"""

EPIC_BILLING = """---
title: Billing
label: payments
---
Invoices and cards.
"""

STORY_SIGN_UP = """---
title: Sign up
role: visitor
action: create an account
benefit: I can save my progress
---
Email and password only.
"""

STORY_LOG_IN = """---
title: Log in
---
Session cookie for 30 days.
"""

STORY_INVOICE = """---
title: Download invoice
---
PDF export.
"""


def write_data(root, epics, stories, priority):
    """
    Write epics/, stories/ and priority.json under root.

    Args:
        root: Base directory (a pathlib.Path)
        epics: Mapping of file name to content
        stories: Mapping of file name to content
        priority: List of story ids, or raw string content

    Returns:
        Tuple of (epics_dir, stories_dir, priority_file)
    """
    epics_dir = root / 'epics'
    stories_dir = root / 'stories'
    epics_dir.mkdir(parents=True, exist_ok=True)
    stories_dir.mkdir(parents=True, exist_ok=True)

    for name, content in epics.items():
        (epics_dir / name).write_text(content, encoding='utf-8')
    for name, content in stories.items():
        (stories_dir / name).write_text(content, encoding='utf-8')

    priority_file = root / 'priority.json'
    if isinstance(priority, str):
        priority_file.write_text(priority, encoding='utf-8')
    else:
        priority_file.write_text(json.dumps(priority), encoding='utf-8')

    return epics_dir, stories_dir, priority_file


@pytest.fixture
def sample_data(tmp_path):
    """Two epics, three stories and a priority file that reorders them."""
    return write_data(
        tmp_path / 'data',
        epics={
            '001-accounts.md': EPIC_ACCOUNTS,
            '002-billing.md': EPIC_BILLING,
        },
        stories={
            '001-001-sign-up.md': STORY_SIGN_UP,
            '001-002-log-in.md': STORY_LOG_IN,
            '002-001-invoice.md': STORY_INVOICE,
        },
        priority=['002-001', '001-002', '001-001'],
    )


@pytest.fixture
def make_data(tmp_path):
    """Factory writing a custom data directory under tmp_path."""
    def _make(epics, stories, priority):
        return write_data(tmp_path / 'data', epics, stories, priority)
    return _make


@pytest.fixture
def mock_client():
    """Tracker client double that hands out sequential ids."""
    client = Mock()
    issue_ids = count(1)

    client.get_repository_id.return_value = 'R_repo'
    client.get_project_info.return_value = {'id': 'PVT_board', 'number': 1, 'title': 'Roadmap'}
    client.create_label_if_not_exists.side_effect = (
        lambda repository_id, label: {'id': f"LA_{label['name']}", 'name': label['name']}
    )
    client.create_issue.side_effect = lambda *args, **kwargs: f"I_epic_{next(issue_ids)}"
    client.create_issue_add_to_project.side_effect = lambda *args, **kwargs: f"I_story_{next(issue_ids)}"
    return client


# Markers for test categorization
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "api: API-related tests")
