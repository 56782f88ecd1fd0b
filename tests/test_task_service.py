from datetime import datetime, timezone

import pytest

from task_api.errors import NotFoundError, ValidationError
from task_api.models import TaskStatus
from task_api.service import TaskService


class TestTaskStatus:
    def test_parse_is_case_insensitive(self):
        assert TaskStatus.parse("in_progress") is TaskStatus.IN_PROGRESS
        assert TaskStatus.parse("Completed") is TaskStatus.COMPLETED
        assert TaskStatus.parse(" NOT_STARTED ") is TaskStatus.NOT_STARTED

    @pytest.mark.parametrize("token", ["DONE", "1", "", "in progress", "format"])
    def test_parse_rejects_unknown_tokens(self, token):
        with pytest.raises(ValidationError) as exc:
            TaskStatus.parse(token)
        assert exc.value.message == "Invalid status. Valid values: NOT_STARTED, IN_PROGRESS, COMPLETED"

    def test_codes_and_format(self):
        assert [int(s) for s in TaskStatus] == [0, 1, 2]
        assert TaskStatus.from_code(1) is TaskStatus.IN_PROGRESS
        assert TaskStatus.COMPLETED.format() == "COMPLETED"


class TestCreate:
    def test_defaults(self, service):
        task = service.create("  Buy milk  ")
        assert task["id"] == 1
        assert task["title"] == "Buy milk"
        assert task["description"] is None
        assert task["status"] is TaskStatus.NOT_STARTED
        assert task["created_at"] == task["updated_at"]

    def test_ids_are_unique(self, service):
        ids = {service.create(f"Task {i}")["id"] for i in range(5)}
        assert len(ids) == 5

    def test_status_and_description(self, service):
        task = service.create("Write docs", description="  user guide ", status="in_progress")
        assert task["status"] is TaskStatus.IN_PROGRESS
        assert task["description"] == "user guide"

    def test_blank_description_is_stored_as_none(self, service):
        assert service.create("T", description="   ")["description"] is None

    def test_empty_status_defaults(self, service):
        assert service.create("T", status="")["status"] is TaskStatus.NOT_STARTED

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_blank_title_rejected(self, service, repo, title):
        with pytest.raises(ValidationError) as exc:
            service.create(title)
        assert exc.value.message == "Title is required and cannot be empty"
        assert repo.count() == 0

    def test_title_length_limit(self, service):
        assert len(service.create("x" * 120)["title"]) == 120
        with pytest.raises(ValidationError) as exc:
            service.create("x" * 121)
        assert exc.value.message == "Title cannot exceed 120 characters"

    def test_title_length_measured_after_trim(self, service):
        assert service.create("  " + "x" * 120 + "  ")["title"] == "x" * 120

    def test_invalid_status_rejected(self, service, repo):
        with pytest.raises(ValidationError):
            service.create("T", status="DONE")
        assert repo.count() == 0


class TestList:
    def test_ordered_by_id_and_filtered(self, service):
        a = service.create("A", status="IN_PROGRESS")
        b = service.create("B")
        c = service.create("C", status="in_progress")

        assert [t["id"] for t in service.list()] == [a["id"], b["id"], c["id"]]
        assert [t["id"] for t in service.list("IN_PROGRESS")] == [a["id"], c["id"]]
        assert service.list("COMPLETED") == []

    def test_empty_filter_means_no_filter(self, service):
        service.create("A")
        assert len(service.list("")) == 1

    def test_invalid_filter_rejected(self, service):
        with pytest.raises(ValidationError):
            service.list("DONE")

    def test_round_trip_through_filter(self, service):
        created = service.create("Round trip", description="desc", status="COMPLETED")
        fetched = service.list("completed")
        assert fetched == [created]


class TestUpdate:
    def test_not_found(self, service):
        with pytest.raises(NotFoundError) as exc:
            service.update(999, title="x")
        assert exc.value.message == "Task with id 999 not found"
        with pytest.raises(NotFoundError):
            service.update(999)

    def test_no_fields_leaves_record_untouched(self, service):
        created = service.create("Keep")
        assert service.update(created["id"]) == created
        assert service.get(created["id"]) == created

    def test_blank_title_is_ignored(self, service):
        created = service.create("Keep")
        result = service.update(created["id"], title="   ")
        assert result == created

    def test_title_change_refreshes_updated_at(self, service):
        created = service.create("Old")
        updated = service.update(created["id"], title="  New  ")
        assert updated["title"] == "New"
        assert updated["created_at"] == created["created_at"]
        assert updated["updated_at"] > created["updated_at"]

    def test_empty_description_clears_it(self, service):
        created = service.create("T", description="something")
        updated = service.update(created["id"], description="")
        assert updated["description"] is None
        assert updated["updated_at"] > created["updated_at"]
        assert service.get(created["id"])["description"] is None

    def test_same_description_still_counts_as_change(self, service):
        created = service.create("T", description="same")
        updated = service.update(created["id"], description="same")
        assert updated["description"] == "same"
        assert updated["updated_at"] > created["updated_at"]

    def test_status_change_any_direction(self, service):
        created = service.create("T", status="COMPLETED")
        updated = service.update(created["id"], status="not_started")
        assert updated["status"] is TaskStatus.NOT_STARTED

    def test_empty_status_is_ignored(self, service):
        created = service.create("T")
        assert service.update(created["id"], status="") == created

    def test_invalid_field_rejects_whole_update(self, service):
        created = service.create("T", description="d")
        with pytest.raises(ValidationError):
            service.update(created["id"], title="New", description="", status="DONE")
        assert service.get(created["id"]) == created

    def test_too_long_title_rejects_whole_update(self, service):
        created = service.create("T")
        with pytest.raises(ValidationError):
            service.update(created["id"], title="x" * 121, status="COMPLETED")
        assert service.get(created["id"]) == created

    def test_no_write_when_nothing_changes(self, service, repo, monkeypatch):
        created = service.create("T")

        def fail_commit(entity):
            raise AssertionError("commit should not be called")

        monkeypatch.setattr(repo, "commit", fail_commit)
        assert service.update(created["id"], title=" ", status="") == created

    def test_updated_at_never_precedes_created_at(self, repo):
        stamps = iter(
            [
                datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc),
                datetime(2024, 12, 31, 23, 0, tzinfo=timezone.utc),
            ]
        )
        service = TaskService(repo, clock=lambda: next(stamps))
        created = service.create("Skewed clock")
        updated = service.update(created["id"], status="COMPLETED")
        assert updated["status"] is TaskStatus.COMPLETED
        assert updated["updated_at"] == created["created_at"]
        assert updated["updated_at"] >= updated["created_at"]


class TestDelete:
    def test_delete_then_not_found(self, service):
        created = service.create("Gone")
        assert service.delete(created["id"]) is None
        with pytest.raises(NotFoundError):
            service.get(created["id"])
        assert service.list() == []
        with pytest.raises(NotFoundError):
            service.delete(created["id"])
