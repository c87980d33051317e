"""Pytest configuration for tests."""

import pytest

from notes_summarizer.config import Settings


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


@pytest.fixture
def offline_settings(tmp_path):
    """Settings with the hosted model and mail disabled."""
    return Settings(
        remote_enabled=False,
        hugging_face_token=None,
        email_user=None,
        email_app_password=None,
        upload_dir=str(tmp_path / "uploads"),
    )
