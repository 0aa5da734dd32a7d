"""
Tests for deletion records, outcomes and error classification.
"""
import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from src.deletion.errors import ErrorKind, ModalHandlingError, classify_exception
from src.deletion.models import DeletionRecord, ItemMetadata, Outcome, infer_action_kind


@pytest.fixture
def metadata():
    return ItemMetadata(
        extracted_date="2 years ago",
        activity_type="Like/Reaction",
        content_snippet="Someone's photo",
        originating_link="https://www.facebook.com/photo/?fbid=1",
        parsed_date="2022-05-01",
    )


@pytest.mark.unit
class TestInferActionKind:
    """Test infer_action_kind()."""

    @pytest.mark.parametrize(
        "label,kind",
        [
            ("Delete", "delete"),
            ("Move to trash", "other"),
            ("Remove Tag", "remove"),
            ("Remove Reaction", "remove"),
            ("Unlike", "other"),
            ("DELETE post", "delete"),
        ],
    )
    def test_kinds(self, label, kind):
        assert infer_action_kind(label) == kind


@pytest.mark.unit
class TestDeletionRecord:
    """Test DeletionRecord creation and serialization."""

    def test_create_copies_metadata(self, metadata):
        record = DeletionRecord.create(metadata, "https://www.facebook.com/me/allactivity", "Unlike")

        assert record.extracted_date == "2 years ago"
        assert record.activity_type == "Like/Reaction"
        assert record.originating_link == "https://www.facebook.com/photo/?fbid=1"
        assert record.action_label == "Unlike"
        assert record.action_kind == "other"
        assert record.parsed_date == "2022-05-01"
        assert record.retry_count is None
        assert record.timestamp

    def test_record_is_immutable(self, metadata):
        record = DeletionRecord.create(metadata, "u", "Delete")

        with pytest.raises(AttributeError):
            record.action_label = "Remove"

    def test_with_retry_count_returns_new_record(self, metadata):
        record = DeletionRecord.create(metadata, "u", "Delete")

        retried = record.with_retry_count(2)

        assert retried.retry_count == 2
        assert record.retry_count is None

    def test_to_dict_omits_empty_optionals(self, metadata):
        record = DeletionRecord.create(
            ItemMetadata("Unknown date", "Unknown activity", "No content extracted"), "u", "Delete"
        )

        data = record.to_dict()

        assert "retry_count" not in data
        assert "parsed_date" not in data
        assert data["originating_link"] is None

    def test_from_dict_round_trip(self, metadata):
        record = DeletionRecord.create(metadata, "u", "Delete", retry_count=1)

        assert DeletionRecord.from_dict(record.to_dict()) == record


@pytest.mark.unit
class TestOutcome:
    """Test Outcome constructors."""

    def test_success(self, metadata):
        record = DeletionRecord.create(metadata, "u", "Delete")
        outcome = Outcome.success(record)

        assert outcome.is_success
        assert outcome.record is record
        assert outcome.error_kind is None

    def test_skipped(self):
        outcome = Outcome.skipped(ErrorKind.NO_TARGET_ACTION)

        assert outcome.is_skipped
        assert not outcome.is_failed
        assert outcome.error_kind == ErrorKind.NO_TARGET_ACTION

    def test_failed(self):
        outcome = Outcome.failed(ErrorKind.CONFIRMATION_FAILED, "gave up")

        assert outcome.is_failed
        assert outcome.message == "gave up"


@pytest.mark.unit
class TestClassifyException:
    """Test classify_exception()."""

    def test_modal_error(self):
        assert classify_exception(ModalHandlingError("x")) == ErrorKind.MODAL_ERROR

    def test_playwright_timeout(self):
        assert classify_exception(PlaywrightTimeoutError("slow")) == ErrorKind.TIMEOUT

    def test_builtin_timeout(self):
        assert classify_exception(TimeoutError()) == ErrorKind.TIMEOUT

    def test_anything_else(self):
        assert classify_exception(RuntimeError("boom")) == ErrorKind.UNKNOWN_ERROR

    def test_values_are_strings(self):
        assert ErrorKind.NO_MENU_FOUND.value == "NoMenuFound"
        assert ErrorKind("ConfirmationFailed") is ErrorKind.CONFIRMATION_FAILED
