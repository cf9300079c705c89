"""
Unit tests for the webhook notifier (requests is mocked).
"""

from unittest.mock import Mock

import pytest
import requests

from clinic_booking.services.notification_service import WebhookNotifier


def ok_response(status_code=200) -> Mock:
    response = Mock(status_code=status_code)
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def session() -> Mock:
    return Mock(spec=requests.Session)


@pytest.fixture
def sleep() -> Mock:
    return Mock()


@pytest.mark.unit
@pytest.mark.services
class TestWebhookNotifier:
    def test_posts_event_payload_with_headers(self, session, sleep):
        session.post.return_value = ok_response()
        notifier = WebhookNotifier("https://hooks.example.com/x", session=session, sleep=sleep)

        assert notifier.notify("appointment.created", {"id": 1}) is True

        args, kwargs = session.post.call_args
        assert args[0] == "https://hooks.example.com/x"
        assert kwargs["json"]["event"] == "appointment.created"
        assert kwargs["json"]["data"] == {"id": 1}
        assert "timestamp" in kwargs["json"]
        assert kwargs["headers"]["X-Webhook-Event"] == "appointment.created"
        assert kwargs["headers"]["X-Attempt-Number"] == "1"
        assert kwargs["timeout"] == 5.0
        sleep.assert_not_called()

    def test_retries_with_exponential_backoff(self, session, sleep):
        session.post.side_effect = [
            requests.ConnectionError("refused"),
            requests.Timeout("slow"),
            ok_response(),
        ]
        notifier = WebhookNotifier(
            "http://hooks.local", retry_delay=1.0, session=session, sleep=sleep
        )

        assert notifier.notify("appointment.created", {}) is True

        attempts = [c.kwargs["headers"]["X-Attempt-Number"] for c in session.post.call_args_list]
        assert attempts == ["1", "2", "3"]
        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0]

    def test_gives_up_without_raising(self, session, sleep):
        failing = Mock(status_code=500)
        failing.raise_for_status.side_effect = requests.HTTPError("500")
        session.post.return_value = failing
        notifier = WebhookNotifier("http://hooks.local", max_retries=3, session=session, sleep=sleep)

        assert notifier.notify("appointment.created", {}) is False
        assert session.post.call_count == 3
        assert sleep.call_count == 2

    @pytest.mark.parametrize("url", [None, "", "ftp://hooks.local"])
    def test_disabled_without_http_url(self, session, url):
        notifier = WebhookNotifier(url, session=session)

        assert notifier.enabled is False
        assert notifier.notify("appointment.created", {}) is False
        session.post.assert_not_called()
