"""
GitHub GraphQL client for labels, issues and project boards.
"""

import hashlib
import logging
from typing import Any, Dict, List, Optional

import requests

from .exceptions import ConfigurationError, ExternalServiceError

logger = logging.getLogger(__name__)

GITHUB_GRAPHQL_URL = 'https://api.github.com/graphql'

REPOSITORY_ID_QUERY = """
query($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) { id }
}
"""

PROJECT_INFO_QUERY = """
query($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) {
    projectsV2(first: 1) { nodes { id number title } }
  }
  repositoryOwner(login: $owner) {
    ... on User { projectsV2(first: 1) { nodes { id number title } } }
    ... on Organization { projectsV2(first: 1) { nodes { id number title } } }
  }
}
"""

LABEL_QUERY = """
query($repositoryId: ID!, $name: String!) {
  node(id: $repositoryId) {
    ... on Repository { label(name: $name) { id name } }
  }
}
"""

CREATE_LABEL_MUTATION = """
mutation($repositoryId: ID!, $name: String!, $color: String!) {
  createLabel(input: {repositoryId: $repositoryId, name: $name, color: $color}) {
    label { id name }
  }
}
"""

CREATE_ISSUE_MUTATION = """
mutation($input: CreateIssueInput!) {
  createIssue(input: $input) {
    issue { id number url }
  }
}
"""

ADD_TO_PROJECT_MUTATION = """
mutation($projectId: ID!, $contentId: ID!) {
  addProjectV2ItemById(input: {projectId: $projectId, contentId: $contentId}) {
    item { id }
  }
}
"""


class GitHubClient:
    """Thin GitHub GraphQL wrapper with the calls the board creator needs."""

    def __init__(
        self,
        token: str,
        api_url: str = GITHUB_GRAPHQL_URL,
        timeout: int = 30
    ):
        """
        Initialize GitHub client.

        Args:
            token: Personal access token with repo and project scopes
            api_url: GraphQL endpoint
            timeout: Request timeout in seconds
        """
        if not token:
            raise ConfigurationError("GitHub token is required")

        self.api_url = api_url
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {token}',
            'Accept': 'application/vnd.github+json',
            'GraphQL-Features': 'sub_issues',
            'User-Agent': 'issue-board-creator',
        })

        logger.debug(f"GitHub client ready: {api_url}")

    def get_repository_id(self, owner: str, repo: str) -> str:
        """
        Fetch the node id of a repository.

        Args:
            owner: User or organization login
            repo: Repository name

        Returns:
            Repository node id
        """
        data = self._graphql(REPOSITORY_ID_QUERY, {'owner': owner, 'repo': repo})
        repository = data.get('repository')
        if not repository or not repository.get('id'):
            raise ExternalServiceError(f"Repository {owner}/{repo} not found")

        logger.info(f"Repository {owner}/{repo}: {repository['id']}")
        return repository['id']

    def get_project_info(self, owner: str, repo: str) -> Optional[Dict[str, Any]]:
        """
        Find the project board: the first project linked to the repository,
        otherwise the owner's first project.

        Args:
            owner: User or organization login
            repo: Repository name

        Returns:
            Project info dictionary ({id, number, title}) or None
        """
        data = self._graphql(PROJECT_INFO_QUERY, {'owner': owner, 'repo': repo})

        candidates = [
            (data.get('repository') or {}).get('projectsV2'),
            (data.get('repositoryOwner') or {}).get('projectsV2'),
        ]
        for projects in candidates:
            nodes = (projects or {}).get('nodes') or []
            if nodes:
                project = self._project_to_dict(nodes[0])
                logger.info(f"Project board: #{project['number']} {project['title']}")
                return project

        logger.warning(f"No project found for {owner}/{repo}")
        return None

    def create_label_if_not_exists(self, repository_id: str, label: Dict[str, str]) -> Dict[str, str]:
        """
        Return the label with this name, creating it only if it is missing.

        Args:
            repository_id: Repository node id
            label: Dictionary with the label 'name'

        Returns:
            Label dictionary with 'id' and 'name'
        """
        name = label['name']

        data = self._graphql(LABEL_QUERY, {'repositoryId': repository_id, 'name': name})
        existing = (data.get('node') or {}).get('label')
        if existing:
            logger.debug(f"Label {name!r} already exists")
            return {'id': existing['id'], 'name': existing['name']}

        data = self._graphql(
            CREATE_LABEL_MUTATION,
            {'repositoryId': repository_id, 'name': name, 'color': label_color(name)},
            headers={'Accept': 'application/vnd.github.bane-preview+json'}
        )
        created = (data.get('createLabel') or {}).get('label')
        if not created:
            raise ExternalServiceError(f"Failed to create label {name!r}")

        logger.info(f"✓ Created label {name!r}")
        return {'id': created['id'], 'name': created['name']}

    def create_issue(
        self,
        repository_id: str,
        project_info: Dict[str, Any],
        owner: str,
        repo: str,
        issue: Dict[str, str],
        label_id: Optional[str]
    ) -> str:
        """
        Create an issue and add it to the project board.

        Args:
            repository_id: Repository node id
            project_info: Project info from get_project_info()
            owner: User or organization login
            repo: Repository name
            issue: Dictionary with 'title' and 'body'
            label_id: Label node id, or None

        Returns:
            Issue node id
        """
        created = self._create_issue(repository_id, issue, [label_id] if label_id else [])
        self._add_to_project(project_info, created['id'])

        logger.info(f"✓ Created {owner}/{repo}#{created['number']}: {issue['title']}")
        return created['id']

    def create_issue_add_to_project(
        self,
        repository_id: str,
        project_info: Dict[str, Any],
        owner: str,
        repo: str,
        issue: Dict[str, str],
        label_id: Optional[str]
    ) -> str:
        """
        Create a sub-issue of 'parent_issue_id' and add it to the project board.

        Args:
            repository_id: Repository node id
            project_info: Project info from get_project_info()
            owner: User or organization login
            repo: Repository name
            issue: Dictionary with 'parent_issue_id', 'title' and 'body'
            label_id: Label node id, or None

        Returns:
            Issue node id
        """
        created = self._create_issue(
            repository_id,
            issue,
            [label_id] if label_id else [],
            parent_issue_id=issue['parent_issue_id']
        )
        item_id = self._add_to_project(project_info, created['id'])

        logger.info(f"✓ Created {owner}/{repo}#{created['number']} (card {item_id}): {issue['title']}")
        return created['id']

    def close(self):
        """Close the HTTP session."""
        self.session.close()

    def _create_issue(
        self,
        repository_id: str,
        issue: Dict[str, str],
        label_ids: List[str],
        parent_issue_id: Optional[str] = None
    ) -> Dict[str, Any]:
        issue_input = {
            'repositoryId': repository_id,
            'title': issue['title'],
            'body': issue.get('body', ''),
            'labelIds': label_ids,
        }
        if parent_issue_id:
            issue_input['parentIssueId'] = parent_issue_id

        data = self._graphql(CREATE_ISSUE_MUTATION, {'input': issue_input})
        created = (data.get('createIssue') or {}).get('issue')
        if not created or not created.get('id'):
            raise ExternalServiceError(f"Failed to create issue {issue['title']!r}")
        return created

    def _add_to_project(self, project_info: Dict[str, Any], content_id: str) -> str:
        data = self._graphql(
            ADD_TO_PROJECT_MUTATION,
            {'projectId': project_info['id'], 'contentId': content_id}
        )
        item = (data.get('addProjectV2ItemById') or {}).get('item')
        if not item:
            raise ExternalServiceError(f"Failed to add {content_id} to project {project_info['id']}")
        return item['id']

    def _graphql(
        self,
        query: str,
        variables: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """Run a GraphQL request and return its 'data' payload."""
        try:
            response = self.session.post(
                self.api_url,
                json={'query': query, 'variables': variables},
                headers=headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"GitHub request failed: {e}")
            raise ExternalServiceError(f"GitHub request failed: {e}") from e

        if response.status_code >= 400:
            raise ExternalServiceError(f"GitHub API error {response.status_code}: {response.text}")

        try:
            payload = response.json()
        except ValueError as e:
            raise ExternalServiceError(f"GitHub returned invalid JSON: {e}") from e

        errors = payload.get('errors')
        if errors:
            messages = '; '.join(error.get('message', str(error)) for error in errors)
            raise ExternalServiceError(f"GitHub GraphQL error: {messages}")

        return payload.get('data') or {}

    def _project_to_dict(self, project) -> Dict[str, Any]:
        """Convert a ProjectV2 node to dictionary."""
        return {
            'id': project['id'],
            'number': project.get('number'),
            'title': project.get('title'),
        }


def label_color(name: str) -> str:
    """Stable six-digit hex colour for a label name."""
    return hashlib.md5(name.encode('utf-8')).hexdigest()[:6]
