"""Unit tests for the process session identity."""

import uuid

import pytest

from dockerlink.core.session import (
    DEFAULT_LABELS,
    DOCKERLINK_LABEL,
    DOCKERLINK_SESSION_ID_LABEL,
    SESSION_ID,
    label_filters,
)


class TestSessionIdentity:
    """Tests for SESSION_ID and DEFAULT_LABELS."""

    def test_session_id_is_uuid(self):
        assert str(uuid.UUID(SESSION_ID)) == SESSION_ID

    def test_session_label_is_namespaced(self):
        assert DOCKERLINK_SESSION_ID_LABEL.startswith(DOCKERLINK_LABEL + ".")

    def test_default_labels(self):
        assert dict(DEFAULT_LABELS) == {
            DOCKERLINK_LABEL: "true",
            DOCKERLINK_SESSION_ID_LABEL: SESSION_ID,
        }

    def test_default_labels_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_LABELS["other"] = "value"

    def test_label_filters(self):
        assert label_filters() == [
            f"{DOCKERLINK_LABEL}=true",
            f"{DOCKERLINK_SESSION_ID_LABEL}={SESSION_ID}",
        ]

    def test_label_filters_custom_labels(self):
        assert label_filters({"a": "1"}) == ["a=1"]
