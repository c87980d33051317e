from pathlib import Path

import anyio
import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from notes_summarizer.errors import MailerError
from notes_summarizer.main import create_application
from notes_summarizer.summarizer.engines.extractive import ExtractiveSummarizer
from notes_summarizer.summarizer.engines.remote import RemoteSummarizationClient

MEETING_TEXT = (
    "This is a long meeting about quarterly goals and budget planning "
    "for next year's initiatives."
)


class RecordingMailer:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent = []

    async def send_summary(self, recipients, subject, body):
        if self.fail:
            raise MailerError("535 authentication failed")
        self.sent.append((recipients, subject, body))


@pytest.fixture
def test_app(offline_settings):
    return create_application(offline_settings)


def client_for(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.mark.anyio
async def test_summarize_without_style_returns_fallback_sentence(test_app):
    async with client_for(test_app) as client:
        response = await client.post("/api/summarize", json={"text": MEETING_TEXT})
    assert response.status_code == 200
    body = response.json()
    assert body == {
        "success": True,
        "summary": MEETING_TEXT,
        "originalLength": len(MEETING_TEXT),
        "summaryLength": len(MEETING_TEXT),
        "fallback": True,
    }


@pytest.mark.anyio
async def test_summarize_applies_custom_prompt(test_app):
    payload = {"text": MEETING_TEXT, "customPrompt": "Action items please"}
    async with client_for(test_app) as client:
        response = await client.post("/api/summarize", json=payload)
    body = response.json()
    assert body["summary"].startswith("Action Items:\n1. This is a long meeting")
    assert body["summaryLength"] == len(body["summary"])


@pytest.mark.anyio
@pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "   "}])
async def test_summarize_rejects_blank_text(test_app, payload):
    async with client_for(test_app) as client:
        response = await client.post("/api/summarize", json=payload)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Text is required"}


@pytest.mark.anyio
async def test_summarize_uses_remote_model_when_available(test_app):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"summary_text": "Goals were agreed."}])

    test_app.state.summarizer.remote = RemoteSummarizationClient(
        model_url="https://inference.test/models/summarizer",
        transport=httpx.MockTransport(handler),
    )
    async with client_for(test_app) as client:
        response = await client.post("/api/summarize", json={"text": MEETING_TEXT})
    body = response.json()
    assert body["fallback"] is False
    assert body["summary"] == "Goals were agreed."


@pytest.mark.anyio
async def test_summarize_falls_back_when_remote_returns_error(test_app):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "Invalid credentials"})

    test_app.state.summarizer.remote = RemoteSummarizationClient(
        model_url="https://inference.test/models/summarizer",
        transport=httpx.MockTransport(handler),
    )
    async with client_for(test_app) as client:
        response = await client.post("/api/summarize", json={"text": MEETING_TEXT})
    assert response.status_code == 200
    assert response.json()["fallback"] is True


@pytest.mark.anyio
async def test_invalid_json_body_structured(test_app):
    async with client_for(test_app) as client:
        response = await client.post(
            "/api/summarize",
            content="not valid json",
            headers={"Content-Type": "application/json"},
        )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Invalid JSON"


@pytest.mark.anyio
async def test_upload_returns_content_and_cleans_up(test_app, offline_settings):
    files = {"file": ("notes.txt", b"Line one\nLine two", "text/plain")}
    async with client_for(test_app) as client:
        response = await client.post("/api/upload", files=files)
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "content": "Line one\nLine two",
        "filename": "notes.txt",
    }
    assert list(Path(offline_settings.upload_dir).iterdir()) == []


@pytest.mark.anyio
async def test_upload_requires_file(test_app):
    async with client_for(test_app) as client:
        response = await client.post("/api/upload", data={"other": "value"})
    assert response.status_code == 400
    assert response.json()["error"] == "No file uploaded"


@pytest.mark.anyio
async def test_upload_rejects_non_text_files(test_app):
    files = {"file": ("notes.pdf", b"%PDF-1.7", "application/pdf")}
    async with client_for(test_app) as client:
        response = await client.post("/api/upload", files=files)
    assert response.status_code == 400
    assert response.json()["error"] == "Only .txt files are allowed!"


@pytest.mark.anyio
async def test_upload_rejects_oversized_files(test_app, offline_settings):
    offline_settings.max_upload_bytes = 8
    files = {"file": ("notes.txt", b"0123456789", "text/plain")}
    async with client_for(test_app) as client:
        response = await client.post("/api/upload", files=files)
    assert response.status_code == 413
    assert response.json()["error"] == "File too large"


@pytest.mark.anyio
async def test_summarize_upload_treats_file_like_text(test_app):
    files = {"file": ("meeting.txt", MEETING_TEXT.encode(), "text/plain")}
    async with client_for(test_app) as client:
        response = await client.post(
            "/api/summarize-upload", files=files, data={"customPrompt": "executive"}
        )
    assert response.status_code == 200
    body = response.json()
    assert body["summary"] == f"Executive Summary:\n\n{MEETING_TEXT}"
    assert body["originalLength"] == len(MEETING_TEXT)
    assert body["fallback"] is True


@pytest.mark.anyio
async def test_send_email_without_mailer_reports_configuration(test_app):
    test_app.state.mailer = None
    payload = {"to": ["a@example.com"], "body": "Summary"}
    async with client_for(test_app) as client:
        response = await client.post("/api/send-email", json=payload)
    assert response.status_code == 500
    assert "Email service not configured" in response.json()["error"]


@pytest.mark.anyio
async def test_send_email_delivers_with_default_subject(test_app):
    mailer = RecordingMailer()
    test_app.state.mailer = mailer
    payload = {"to": ["a@example.com", "b@example.com"], "body": "Key Points:\n• Done."}
    async with client_for(test_app) as client:
        response = await client.post("/api/send-email", json=payload)
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Email sent successfully",
        "recipients": 2,
    }
    assert mailer.sent == [
        (["a@example.com", "b@example.com"], "Meeting Summary", "Key Points:\n• Done.")
    ]


@pytest.mark.anyio
@pytest.mark.parametrize(
    "payload, error",
    [
        ({"body": "Summary"}, "Recipients are required"),
        ({"to": [], "body": "Summary"}, "Recipients are required"),
        ({"to": "a@example.com", "body": "Summary"}, "Recipients are required"),
        ({"to": ["a@example.com"], "body": "  "}, "Email body is required"),
    ],
)
async def test_send_email_validation(test_app, payload, error):
    test_app.state.mailer = RecordingMailer()
    async with client_for(test_app) as client:
        response = await client.post("/api/send-email", json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == error


@pytest.mark.anyio
async def test_send_email_failure_is_reported(test_app):
    test_app.state.mailer = RecordingMailer(fail=True)
    payload = {"to": ["a@example.com"], "subject": "Weekly sync", "body": "Summary"}
    async with client_for(test_app) as client:
        response = await client.post("/api/send-email", json=payload)
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to send email"
    assert "535" in body["details"]


@pytest.mark.anyio
async def test_health_and_configuration_check(test_app):
    async with client_for(test_app) as client:
        health = await client.get("/api/health")
        check = await client.get("/api/test")
    assert health.status_code == 200
    assert health.json()["status"] == "OK"
    assert health.json()["port"] == 5000
    assert check.json()["env"] == {
        "hasHuggingFaceToken": False,
        "hasEmailUser": False,
        "hasEmailPassword": False,
        "port": 5000,
    }


@pytest.mark.anyio
async def test_unknown_route_returns_structured_404(test_app):
    async with client_for(test_app) as client:
        response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Route not found"}


@pytest.mark.anyio
async def test_summarize_internal_error_envelope(test_app):
    class BrokenFallback(ExtractiveSummarizer):
        def summarize(self, text, style_hint=""):
            raise RuntimeError("fallback crashed")

    test_app.state.summarizer.fallback = BrokenFallback()
    async with client_for(test_app) as client:
        response = await client.post("/api/summarize", json={"text": MEETING_TEXT})
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Failed to generate summary",
        "details": "fallback crashed",
    }


@pytest.mark.anyio
async def test_startup_does_not_wait_for_mail_verification(test_app, offline_settings):
    class SlowMailer:
        def __init__(self) -> None:
            self.started = anyio.Event()
            self.finished = False

        async def verify(self) -> bool:
            self.started.set()
            await anyio.sleep_forever()
            self.finished = True
            return True

    mailer = SlowMailer()
    test_app.state.mailer = mailer
    with anyio.fail_after(5):
        async with test_app.router.lifespan_context(test_app):
            await mailer.started.wait()
            assert mailer.finished is False
            assert Path(offline_settings.upload_dir).is_dir()
    assert mailer.finished is False
