import httpx
import pytest


@pytest.mark.asyncio
async def test_send_email_requires_api_key():
    from app.services import email_sender

    result = await email_sender.send_email(to_email="to@example.com", subject="Hi", html="<p>Hi</p>")

    assert result["success"] is False
    assert "RESEND_API_KEY" in result["error"]


@pytest.mark.asyncio
async def test_send_email_success(monkeypatch):
    from app.services import email_sender

    monkeypatch.setattr(email_sender.settings, "RESEND_API_KEY", "re_test_key")
    captured = {}

    async def fake_post(_client, url, **kwargs):
        captured["url"] = url
        captured.update(kwargs)
        return httpx.Response(200, json={"id": "msg_123"})

    monkeypatch.setattr(email_sender, "post_json_with_retries", fake_post)

    result = await email_sender.send_email(
        to_email="to@example.com",
        subject="Hello",
        html="<p>Hello</p>",
        text="Hello",
        idempotency_key="invitation/abc",
    )

    assert result == {"success": True, "message_id": "msg_123"}
    assert captured["url"] == email_sender.RESEND_SEND_URL
    assert captured["json"]["to"] == ["to@example.com"]
    assert captured["headers"]["Idempotency-Key"] == "invitation/abc"


@pytest.mark.asyncio
async def test_send_email_treats_409_as_duplicate_success(monkeypatch):
    from app.services import email_sender

    monkeypatch.setattr(email_sender.settings, "RESEND_API_KEY", "re_test_key")

    async def fake_post(_client, _url, **_kwargs):
        return httpx.Response(409, json={"message": "Idempotency key already used"})

    monkeypatch.setattr(email_sender, "post_json_with_retries", fake_post)

    result = await email_sender.send_email(to_email="to@example.com", subject="Hi", html="<p>Hi</p>")
    assert result["success"] is True


@pytest.mark.asyncio
async def test_send_email_reports_provider_error(monkeypatch):
    from app.services import email_sender

    monkeypatch.setattr(email_sender.settings, "RESEND_API_KEY", "re_test_key")

    async def fake_post(_client, _url, **_kwargs):
        return httpx.Response(422, json={"message": "Invalid `to` field"})

    monkeypatch.setattr(email_sender, "post_json_with_retries", fake_post)

    result = await email_sender.send_email(to_email="bad", subject="Hi", html="<p>Hi</p>")
    assert result == {"success": False, "error": "Resend API error: 422 (Invalid `to` field)"}


@pytest.mark.asyncio
async def test_send_email_network_failure(monkeypatch):
    from app.services import email_sender

    monkeypatch.setattr(email_sender.settings, "RESEND_API_KEY", "re_test_key")

    async def fake_post(_client, _url, **_kwargs):
        raise httpx.ConnectError("down")

    monkeypatch.setattr(email_sender, "post_json_with_retries", fake_post)

    result = await email_sender.send_email(to_email="to@example.com", subject="Hi", html="<p>Hi</p>")
    assert result == {"success": False, "error": "Email provider unreachable"}


@pytest.mark.asyncio
async def test_post_json_with_retries_retries_server_errors(monkeypatch):
    from app.services import http_service

    monkeypatch.setattr(http_service, "backoff_delay", lambda *_args: 0)
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={"id": "ok"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        response = await http_service.post_json_with_retries(
            client, "https://api.test/emails", json={"a": 1}, max_attempts=3
        )

    assert response.status_code == 200
    assert len(calls) == 3
