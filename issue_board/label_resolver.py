"""
Label deduplication and resolution against GitHub.
"""

import logging
from typing import Dict, List, Optional

from .exceptions import ExternalServiceError
from .models import EpicRecord, LabelRecord

logger = logging.getLogger(__name__)

DEFAULT_EPIC_LABEL = 'Epic'


class LabelResolver:
    """Resolve every distinct label name to a tracker label id, once."""

    def __init__(self, client, reserved_label: str = DEFAULT_EPIC_LABEL):
        """
        Initialize label resolver.

        Args:
            client: Tracker client (GitHubClient or compatible)
            reserved_label: Label applied to every epic issue
        """
        self.client = client
        self.reserved_label = reserved_label
        self.labels: Dict[str, LabelRecord] = {}

    def label_names(self, epics: Dict[str, EpicRecord]) -> List[str]:
        """
        Distinct label names: every epic label plus the reserved label.

        Args:
            epics: Mapping of epic id to EpicRecord

        Returns:
            Label names in first-seen order
        """
        names = [epic.label for epic in epics.values() if epic.label]
        names.append(self.reserved_label)
        return list(dict.fromkeys(names))

    def resolve(self, repository_id: str, epics: Dict[str, EpicRecord]) -> Dict[str, LabelRecord]:
        """
        Get or create each distinct label on the repository.

        Args:
            repository_id: Repository node id
            epics: Mapping of epic id to EpicRecord

        Returns:
            Mapping of label name to resolved LabelRecord
        """
        names = self.label_names(epics)
        logger.info(f"Resolving {len(names)} label(s): {', '.join(names)}")

        for name in names:
            if name in self.labels:
                continue

            label_info = self.client.create_label_if_not_exists(repository_id, {'name': name})
            record = LabelRecord(name)
            if label_info and label_info.get('id'):
                record.id = label_info['id']
            self.labels[name] = record
            logger.debug(f"Label {name!r} -> {record.id}")

        if not self.labels[self.reserved_label].id:
            raise ExternalServiceError(f"Label {self.reserved_label!r} could not be resolved")

        logger.info(f"✓ Resolved {len(self.labels)} label(s)")
        return self.labels

    def label_id_for(self, name: Optional[str]) -> Optional[str]:
        """Resolved id for a label name, or None for an unlabelled epic."""
        if not name:
            return None

        record = self.labels.get(name)
        if record is None or not record.id:
            raise ExternalServiceError(f"Label {name!r} was not resolved")
        return record.id

    @property
    def reserved_label_id(self) -> str:
        return self.label_id_for(self.reserved_label)
