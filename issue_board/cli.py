"""
Command-line interface for the issue board creator.
"""

import logging
import sys

import click
from dotenv import find_dotenv, load_dotenv

from . import __version__
from .config import load_config
from .github_client import GitHubClient
from .orchestrator import CreationOrchestrator


# Setup logging
def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


@click.command()
@click.version_option(version=__version__)
@click.option('--owner', help='GitHub user or organization (or GITHUB_OWNER)')
@click.option('--repo', help='GitHub repository name (or GITHUB_REPO)')
@click.option('--token', help='GitHub personal access token (or GITHUB_TOKEN)')
@click.option('--epics-dir', type=click.Path(file_okay=False), help='Directory of epic markdown files')
@click.option('--stories-dir', type=click.Path(file_okay=False), help='Directory of story markdown files')
@click.option('--priority-file', type=click.Path(dir_okay=False), help='JSON list of story ids in priority order')
@click.option('--epic-label', 'reserved_label', default='Epic', show_default=True, help='Label applied to every epic')
@click.option('--api-url', help='GitHub GraphQL endpoint')
@click.option('--input/--no-input', 'interactive', default=None,
              help='Prompt for missing settings (default: only when attached to a terminal)')
@click.option('--verbose', is_flag=True, help='Verbose output')
def cli(owner, repo, token, epics_dir, stories_dir, priority_file, reserved_label, api_url, interactive, verbose):
    """
    Create GitHub issues and project cards from markdown epics and stories.

    Settings are read from ./data, .issue-board-creator.json, the
    environment (a .env file is loaded) and the options above, in that
    order.

    Example:
        issue-board --owner acme --repo roadmap --epics-dir data/epics
    """
    setup_logging(verbose)
    load_dotenv(find_dotenv(usecwd=True))

    if interactive is None:
        interactive = sys.stdin.isatty()

    try:
        config = load_config(
            overrides={
                'owner': owner,
                'repo': repo,
                'token': token,
                'epics_dir': epics_dir,
                'stories_dir': stories_dir,
                'priority_file': priority_file,
                'reserved_label': reserved_label,
                'api_url': api_url,
            },
            interactive=interactive
        )

        client = GitHubClient(token=config.token, api_url=config.api_url)
        try:
            orchestrator = CreationOrchestrator(
                client,
                owner=config.owner,
                repo=config.repo,
                reserved_label=config.reserved_label,
                verbose=verbose
            )
            orchestrator.run(config.epics_dir, config.stories_dir, config.priority_file)
        finally:
            client.close()

    except Exception as e:
        click.echo(f"\n✗ Error: {e}", err=True)
        sys.exit(1)

    click.echo("\n✓ Successfully created GitHub issues and project cards!")


if __name__ == '__main__':
    cli()
