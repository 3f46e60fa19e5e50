"""Process-wide primitives shared by the services."""

from .session import (
    DEFAULT_LABELS,
    DOCKERLINK_LABEL,
    DOCKERLINK_SESSION_ID_LABEL,
    SESSION_ID,
    label_filters,
)

__all__ = [
    "DEFAULT_LABELS",
    "DOCKERLINK_LABEL",
    "DOCKERLINK_SESSION_ID_LABEL",
    "SESSION_ID",
    "label_filters",
]
