"""Unit tests for ResendEmailSender with the Resend SDK patched out."""

from unittest.mock import patch

import pytest
import resend
from resend.exceptions import ResendError

from transferquota.adapters.email.resend import ResendEmailSender
from transferquota.core.exceptions import EmailDeliveryError


def _sender() -> ResendEmailSender:
    return ResendEmailSender(api_key="re_test", from_email="quota@example.com")


class TestSend:
    @pytest.mark.asyncio
    async def test_sends_message_with_api_key(self):
        with patch("resend.Emails.send", return_value={"id": "email_1"}) as send:
            await _sender().send("alice@example.com", "Subject", "<p>body</p>")

        send.assert_called_once_with(
            {
                "from": "quota@example.com",
                "to": ["alice@example.com"],
                "subject": "Subject",
                "html": "<p>body</p>",
            }
        )
        assert resend.api_key == "re_test"

    @pytest.mark.asyncio
    async def test_rejected_message_raises_delivery_error(self):
        error = ResendError(422, "validation_error", "invalid to", "Check the address")

        with patch("resend.Emails.send", side_effect=error):
            with pytest.raises(EmailDeliveryError) as exc_info:
                await _sender().send("broken", "Subject", "<p>body</p>")

        assert exc_info.value.recipient == "broken"
        assert "422" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_network_error_raises_delivery_error(self):
        with patch("resend.Emails.send", side_effect=ConnectionError("connection refused")):
            with pytest.raises(EmailDeliveryError) as exc_info:
                await _sender().send("alice@example.com", "Subject", "<p>body</p>")

        assert isinstance(exc_info.value.__cause__, ConnectionError)
