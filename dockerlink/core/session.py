"""Session identity for the current process.

Every container, network, volume or image created by this process carries
``DEFAULT_LABELS`` so the cleanup agents can tell our resources apart from
those of other test runs sharing the same daemon.
"""

import uuid
from types import MappingProxyType
from typing import List, Mapping

DOCKERLINK_LABEL = "org.dockerlink"
DOCKERLINK_SESSION_ID_LABEL = f"{DOCKERLINK_LABEL}.sessionId"

SESSION_ID = str(uuid.uuid4())

DEFAULT_LABELS: Mapping[str, str] = MappingProxyType(
    {
        DOCKERLINK_LABEL: "true",
        DOCKERLINK_SESSION_ID_LABEL: SESSION_ID,
    }
)


def label_filters(labels: Mapping[str, str] = DEFAULT_LABELS) -> List[str]:
    """Return docker ``label`` filter values matching every given label."""
    return [f"{key}={value}" for key, value in labels.items()]
