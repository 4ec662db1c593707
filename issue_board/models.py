"""
Record types for epics, stories and labels.
"""

from typing import Dict, List, Optional

from .exceptions import ParseError


def _write_once(owner: str, field: str, current, value):
    if current is not None:
        raise ValueError(f"{field} already set for {owner}")
    if not value:
        raise ValueError(f"{field} for {owner} must not be empty")
    return value


class Narrative:
    """
    User-story sentence parts taken from frontmatter.

    Rendering rules:
        title: "As a {role}, I want to {action}"
        body:  "As a {role}, I want to {action} so that {benefit}."
    """

    def __init__(self, role: str, action: str, benefit: str):
        self.role = role
        self.action = action
        self.benefit = benefit

    @classmethod
    def from_fields(cls, fields: Dict, source: str) -> Optional['Narrative']:
        """
        Build a narrative from parsed frontmatter.

        A narrative is present when ``role`` is set. ``action`` and
        ``benefit`` are then required.

        Args:
            fields: Frontmatter mapping
            source: File name used in error messages

        Returns:
            Narrative or None when no role is given
        """
        role = fields.get('role')
        if not role:
            return None

        missing = [key for key in ('action', 'benefit') if not fields.get(key)]
        if missing:
            raise ParseError(f"{source}: 'role' is set but {', '.join(missing)} missing")

        return cls(role, fields['action'], fields['benefit'])

    @property
    def title(self) -> str:
        return f"As a {self.role}, I want to {self.action}"

    @property
    def sentence(self) -> str:
        return f"As a {self.role}, I want to {self.action} so that {self.benefit}."

    def __eq__(self, other):
        if not isinstance(other, Narrative):
            return NotImplemented
        return (self.role, self.action, self.benefit) == (other.role, other.action, other.benefit)

    def __repr__(self):
        return f"Narrative(role={self.role!r}, action={self.action!r}, benefit={self.benefit!r})"


class EpicRecord:
    """An epic parsed from ``<epicId>-<slug>.md``."""

    def __init__(
        self,
        id: str,
        title: str,
        label: Optional[str] = None,
        narrative: Optional[Narrative] = None,
        description: str = '',
        source: str = ''
    ):
        self.id = id
        self.title = title
        self.label = label
        self.narrative = narrative
        self.description = description
        self.source = source
        self.stories: List['StoryRecord'] = []
        self._issue_id: Optional[str] = None

    @property
    def issue_id(self) -> Optional[str]:
        return self._issue_id

    @issue_id.setter
    def issue_id(self, value: str):
        self._issue_id = _write_once(f"epic {self.id}", 'issue_id', self._issue_id, value)

    @property
    def created(self) -> bool:
        return self._issue_id is not None

    @property
    def body(self) -> str:
        """Issue body: the narrative sentence, or empty."""
        return self.narrative.sentence if self.narrative else ''

    def __repr__(self):
        return f"EpicRecord(id={self.id!r}, title={self.title!r}, stories={len(self.stories)})"


class StoryRecord:
    """A story parsed from ``<epicId>-<storyNumber>-<slug>.md``."""

    def __init__(
        self,
        epic_id: str,
        story_number: str,
        title: str,
        narrative: Optional[Narrative] = None,
        description: str = '',
        source: str = ''
    ):
        self.epic_id = epic_id
        self.story_number = story_number
        self.title = title
        self.narrative = narrative
        self.description = description
        self.source = source
        self.priority: Optional[int] = None
        self._parent_issue_id: Optional[str] = None
        self._label_id: Optional[str] = None
        self._issue_id: Optional[str] = None

    @property
    def story_id(self) -> str:
        return f"{self.epic_id}-{self.story_number}"

    @property
    def parent_issue_id(self) -> Optional[str]:
        return self._parent_issue_id

    @parent_issue_id.setter
    def parent_issue_id(self, value: str):
        self._parent_issue_id = _write_once(
            f"story {self.story_id}", 'parent_issue_id', self._parent_issue_id, value
        )

    @property
    def label_id(self) -> Optional[str]:
        return self._label_id

    @label_id.setter
    def label_id(self, value: str):
        self._label_id = _write_once(f"story {self.story_id}", 'label_id', self._label_id, value)

    @property
    def issue_id(self) -> Optional[str]:
        return self._issue_id

    @issue_id.setter
    def issue_id(self, value: str):
        self._issue_id = _write_once(f"story {self.story_id}", 'issue_id', self._issue_id, value)

    @property
    def created(self) -> bool:
        return self._issue_id is not None

    @property
    def body(self) -> str:
        """Issue body: narrative sentence and a blank line (if any), then the description."""
        prefix = f"{self.narrative.sentence}\n\n" if self.narrative else ''
        return prefix + self.description

    def __repr__(self):
        return f"StoryRecord(story_id={self.story_id!r}, priority={self.priority!r})"


class LabelRecord:
    """A label name and its tracker-assigned id."""

    def __init__(self, name: str):
        self.name = name
        self._id: Optional[str] = None

    @property
    def id(self) -> Optional[str]:
        return self._id

    @id.setter
    def id(self, value: str):
        self._id = _write_once(f"label {self.name!r}", 'id', self._id, value)

    def __repr__(self):
        return f"LabelRecord(name={self.name!r}, id={self._id!r})"
