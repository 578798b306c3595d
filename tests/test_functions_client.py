import httpx
import pytest

from core.functions_client import ExternalServiceError, FunctionsClient


def client_for(handler):
    return FunctionsClient(
        base_url="http://functions.test",
        api_key="test-key",
        transport=httpx.MockTransport(handler),
    )


class TestSendEmail:
    async def test_missing_fields_fail_locally(self, functions, functions_calls):
        result = await functions.send_email({"to": "a@example.com", "html": "<p>x</p>"})
        assert result["success"] is False
        assert result["status"] == 400
        assert "subject" in result["error"]

        result = await functions.send_email({"to": "a@example.com", "subject": "Hi"})
        assert result["success"] is False
        assert "html or text" in result["error"]
        assert functions_calls == []

    async def test_posts_payload_with_default_sender(self, functions, functions_calls):
        result = await functions.send_email(
            {"to": "a@example.com", "subject": "Hi", "text": "Hello"}
        )
        assert result == {
            "success": True,
            "data": {"id": "email_123"},
            "error": None,
            "status": 200,
        }
        path, body = functions_calls[0]
        assert path == "/functions/v1/send-email"
        assert body["to"] == "a@example.com"
        assert body["from"]

    async def test_relay_error_is_returned_not_raised(self):
        client = client_for(
            lambda request: httpx.Response(500, json={"error": "Resend is down"})
        )
        result = await client.send_email({"to": "a@example.com", "subject": "Hi", "text": "x"})
        assert result["success"] is False
        assert result["error"] == "Resend is down"
        assert result["status"] == 500

    async def test_network_error_is_returned_not_raised(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = await client_for(handler).send_email(
            {"to": "a@example.com", "subject": "Hi", "text": "x"}
        )
        assert result["success"] is False
        assert result["status"] is None

    async def test_sends_api_key_headers(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, json={})

        await client_for(handler).send_email({"to": "a@example.com", "subject": "Hi", "text": "x"})
        assert seen["authorization"] == "Bearer test-key"
        assert seen["apikey"] == "test-key"


class TestGeneratePropertyBlog:
    async def test_wraps_property_and_returns_post(self, functions, functions_calls):
        result = await functions.generate_property_blog({"title": "Condo in Austin, TX"})
        assert result["title"] == "A Rare Austin Deal"
        assert result["excerpt"] == "Ten percent under market."
        path, body = functions_calls[0]
        assert path == "/functions/v1/generate-property-blog"
        assert body == {"property": {"title": "Condo in Austin, TX"}}

    @pytest.mark.parametrize("status", [400, 500])
    async def test_error_answers_raise(self, status):
        client = client_for(lambda request: httpx.Response(status, json={"error": "boom"}))
        with pytest.raises(ExternalServiceError) as exc:
            await client.generate_property_blog({"title": "x"})
        assert exc.value.status == status
        assert str(exc.value) == "boom"

    async def test_missing_title_gets_fallback(self):
        client = client_for(lambda request: httpx.Response(200, json={"content": "Body"}))
        result = await client.generate_property_blog({"title": "x"})
        assert result["title"] == "Below Market Property Opportunity"
        assert result["content"] == "Body"
        assert result["excerpt"] == ""
