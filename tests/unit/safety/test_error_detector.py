"""
Tests for ErrorDetector.
"""
import pytest

from src.safety.error_detector import ErrorDetector


@pytest.mark.unit
class TestErrorDetector:
    """Test block detection against the page driver."""

    def test_clean_page(self, fake_driver):
        assert ErrorDetector().check_for_errors(fake_driver) == (False, None)

    def test_block_message_in_content(self, fake_driver):
        fake_driver.text = "<div>You're Temporarily Blocked</div>"

        detected, message = ErrorDetector().check_for_errors(fake_driver)

        assert detected is True
        assert "Temporarily Blocked" in message

    def test_checkpoint_url(self, fake_driver):
        fake_driver.address = "https://www.facebook.com/checkpoint/828281030927956/"

        detected, message = ErrorDetector().check_for_errors(fake_driver)

        assert detected is True
        assert "URL" in message

    def test_additional_indicators(self, fake_driver):
        fake_driver.text = "custom throttle notice"

        detected, _ = ErrorDetector(["Custom Throttle"]).check_for_errors(fake_driver)

        assert detected is True

    def test_unreadable_page_is_not_a_block(self, fake_driver, monkeypatch):
        def broken():
            raise RuntimeError("page closed")

        monkeypatch.setattr(fake_driver, "page_text", broken)

        assert ErrorDetector().check_for_errors(fake_driver) == (False, None)

    def test_check_url_for_errors(self):
        detector = ErrorDetector()

        assert detector.check_url_for_errors("https://www.facebook.com/me/allactivity") is False
        assert detector.check_url_for_errors("https://www.facebook.com/blocked") is True
