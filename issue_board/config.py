"""
Configuration loading: ./data defaults, config file, environment, options, prompts.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

import click

from .exceptions import ConfigurationError
from .github_client import GITHUB_GRAPHQL_URL
from .label_resolver import DEFAULT_EPIC_LABEL

logger = logging.getLogger(__name__)

CONFIG_FILES = ['.issue-board-creator.json', '.issue-board-creator.config.json']
DATA_DIR = 'data'

GITHUB_FIELDS = ['owner', 'repo', 'token']
DATA_FIELDS = ['epics_dir', 'stories_dir', 'priority_file']

# Config file keys -> Config attributes
FILE_KEYS = {
    'github': {'owner': 'owner', 'repo': 'repo', 'token': 'token'},
    'data': {'epicsDir': 'epics_dir', 'storiesDir': 'stories_dir', 'priorityFile': 'priority_file'},
}

ENV_VARS = {
    'owner': 'GITHUB_OWNER',
    'repo': 'GITHUB_REPO',
    'token': 'GITHUB_TOKEN',
}

PROMPTS = {
    'owner': ("GitHub username/organization", False, None),
    'repo': ("GitHub repository name", False, None),
    'token': ("GitHub personal access token (repo + project scopes)", True, None),
    'epics_dir': ("Epics directory path", False, './data/epics'),
    'stories_dir': ("Stories directory path", False, './data/stories'),
    'priority_file': ("Priority file path", False, './data/priority.json'),
}


class Config:
    """Settings for one run."""

    def __init__(self, **values):
        self.owner: Optional[str] = values.get('owner')
        self.repo: Optional[str] = values.get('repo')
        self.token: Optional[str] = values.get('token')
        self.epics_dir: Optional[str] = values.get('epics_dir')
        self.stories_dir: Optional[str] = values.get('stories_dir')
        self.priority_file: Optional[str] = values.get('priority_file')
        self.reserved_label: str = values.get('reserved_label') or DEFAULT_EPIC_LABEL
        self.api_url: str = values.get('api_url') or GITHUB_GRAPHQL_URL

    def missing(self):
        """Names of required settings that are still empty."""
        return [name for name in GITHUB_FIELDS + DATA_FIELDS if not getattr(self, name)]

    def validate(self):
        missing_github = [name for name in GITHUB_FIELDS if not getattr(self, name)]
        if missing_github:
            raise ConfigurationError(
                f"Missing required GitHub configuration: {', '.join(missing_github)}"
            )

        missing_data = [name for name in DATA_FIELDS if not getattr(self, name)]
        if missing_data:
            raise ConfigurationError(
                f"Missing required data configuration: {', '.join(missing_data)}"
            )

    def __repr__(self):
        return f"Config(owner={self.owner!r}, repo={self.repo!r}, epics_dir={self.epics_dir!r})"


def data_dir_defaults(cwd: Path) -> Dict[str, str]:
    """Default data paths when ``./data`` exists."""
    data_dir = cwd / DATA_DIR
    if not data_dir.is_dir():
        return {}

    logger.info(f"Found default data directory: {data_dir}")
    return {
        'epics_dir': str(data_dir / 'epics'),
        'stories_dir': str(data_dir / 'stories'),
        'priority_file': str(data_dir / 'priority.json'),
    }


def load_config_file(cwd: Path) -> Dict[str, str]:
    """
    Read the first config file found in the working directory.

    An unreadable file is skipped with a warning.

    Args:
        cwd: Directory to look in

    Returns:
        Flat dictionary of Config attribute values
    """
    for name in CONFIG_FILES:
        path = cwd / name
        if not path.is_file():
            continue

        try:
            content = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not parse config file {path}: {e}")
            continue

        if not isinstance(content, dict):
            logger.warning(f"Could not parse config file {path}: expected a JSON object")
            continue

        values = {}
        for section, keys in FILE_KEYS.items():
            section_values = content.get(section) or {}
            for key, attribute in keys.items():
                if section_values.get(key):
                    values[attribute] = section_values[key]

        logger.info(f"Loaded configuration from {path.name}")
        return values

    return {}


def load_env() -> Dict[str, str]:
    """GitHub settings from environment variables."""
    values = {attribute: os.environ[var] for attribute, var in ENV_VARS.items() if os.environ.get(var)}
    if values:
        logger.info("Using environment variables for GitHub configuration")
    return values


def load_config(
    overrides: Optional[Dict[str, str]] = None,
    cwd=None,
    interactive: bool = False
) -> Config:
    """
    Merge all configuration sources; later sources win.

    1. ``./data`` defaults
    2. ``.issue-board-creator.json`` / ``.issue-board-creator.config.json``
    3. GITHUB_OWNER, GITHUB_REPO, GITHUB_TOKEN
    4. overrides (command line options)
    5. prompts for anything still missing, when interactive

    Args:
        overrides: Explicit values; None entries are ignored
        cwd: Working directory (defaults to the current one)
        interactive: Prompt for missing values

    Returns:
        Validated Config
    """
    cwd = Path(cwd) if cwd else Path.cwd()

    values: Dict[str, str] = {}
    values.update(data_dir_defaults(cwd))
    values.update(load_config_file(cwd))
    values.update(load_env())
    values.update({k: v for k, v in (overrides or {}).items() if v})

    config = Config(**values)

    if interactive and config.missing():
        click.echo("\nPlease provide the following information:")
        for name in config.missing():
            text, hidden, default = PROMPTS[name]
            setattr(config, name, click.prompt(text, default=default, hide_input=hidden))

    config.validate()
    return config
