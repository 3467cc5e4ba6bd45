"""Tests for inbox schema parsing and serialization."""

from datetime import datetime, timezone

import pytest

from hubox.inbox.schemas import (
    DEFAULT_MAX_ACTIVE,
    Comment,
    CustomState,
    MarkDoneResult,
    Notification,
    NotificationDetails,
    Snapshot,
    format_timestamp,
    parse_timestamp,
)
from tests.conftest import make_api_thread, make_notification


class TestTimestamps:
    """Tests for timestamp parsing at the storage boundary."""

    def test_parses_z_suffix(self):
        parsed = parse_timestamp("2024-02-01T12:30:00Z")
        assert parsed == datetime(2024, 2, 1, 12, 30, tzinfo=timezone.utc)

    def test_naive_input_is_utc(self):
        assert parse_timestamp("2024-01-01").tzinfo == timezone.utc

    def test_format_normalizes_to_utc(self):
        value = parse_timestamp("2024-01-01T02:00:00+02:00")
        assert format_timestamp(value) == "2024-01-01T00:00:00Z"

    def test_invalid_timestamp_raises(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")


class TestNotification:
    """Tests for Notification parsing."""

    def test_from_api_payload_ignores_unknown_fields(self):
        notification = Notification.from_dict(make_api_thread("42", "2024-03-01T08:00:00Z"))

        assert notification.id == "42"
        assert notification.reason == "mention"
        assert notification.repository.owner_login == "acme"
        assert notification.repository.full_name == "acme/hub"
        assert notification.subject.subject_type == "Issue"
        assert notification.subject.url == "https://api.github.com/repos/acme/hub/issues/1"
        assert notification.unread is True
        assert notification.is_read is None

    def test_numeric_id_is_stringified(self):
        payload = make_api_thread("7")
        payload["id"] = 7
        assert Notification.from_dict(payload).id == "7"

    def test_to_dict_omits_unset_overlay(self):
        data = make_notification("1").to_dict()

        assert "is_read" not in data
        assert "priority" not in data
        assert data["subject"]["type"] == "Issue"
        assert data["repository"]["owner"] == {"login": "octo"}
        assert data["updated_at"] == "2024-01-01T00:00:00Z"

    def test_round_trip_with_overlay(self):
        original = make_notification("1", is_read=True, is_done=False, priority=2, last_viewed_at=99)

        restored = Notification.from_dict(original.to_dict())

        assert restored == original

    def test_overlay_defaults_unset_fields(self):
        state = make_notification("1", is_read=True).overlay()
        assert state == CustomState(is_read=True, is_done=False, priority=0, last_viewed_at=0)


class TestSnapshot:
    """Tests for Snapshot persistence format."""

    def test_defaults(self):
        snapshot = Snapshot.from_dict({})

        assert snapshot.notifications == []
        assert snapshot.active_batch_ids == []
        assert snapshot.custom_states == {}
        assert snapshot.last_sync == 0
        assert snapshot.max_active == DEFAULT_MAX_ACTIVE == 10

    def test_round_trip(self):
        snapshot = Snapshot(
            notifications=[make_notification("1"), make_notification("2", is_done=True)],
            active_batch_ids=["1"],
            custom_states={"2": CustomState(is_read=True, is_done=True, priority=1, last_viewed_at=5)},
            last_sync=1700000000000,
            max_active=20,
        )

        assert Snapshot.from_dict(snapshot.to_dict()) == snapshot

    def test_get(self):
        snapshot = Snapshot(notifications=[make_notification("1")])

        assert snapshot.get("1").id == "1"
        assert snapshot.get("missing") is None

    def test_custom_state_absent_syncs_only_written_when_set(self):
        assert "absent_syncs" not in CustomState().to_dict()
        assert CustomState(absent_syncs=2).to_dict()["absent_syncs"] == 2


class TestDetails:
    """Tests for detail payload serialization."""

    def test_absent_parts_are_omitted(self):
        details = NotificationDetails(notification=make_notification("1"), issue={"number": 1})

        data = details.to_dict()

        assert data["issue"] == {"number": 1}
        assert "comments" not in data
        assert "pull_request" not in data

    def test_comment_from_api(self):
        comment = Comment.from_dict(
            {
                "id": 10,
                "user": {"login": "mona", "avatar_url": "https://avatars/mona"},
                "body": "LGTM",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
                "html_url": "https://github.com/acme/hub/issues/1#issuecomment-10",
            }
        )

        assert comment.user_login == "mona"
        assert comment.to_dict()["user"]["avatar_url"] == "https://avatars/mona"

    def test_mark_done_result_local_committed(self):
        assert MarkDoneResult("1", found=True).local_committed is True
        assert MarkDoneResult("1", found=False).local_committed is False
