"""Shared fixtures for receipt OCR tests."""
import sys
from pathlib import Path

import pytest

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from receipt_ocr.config import settings  # noqa: E402


@pytest.fixture
def textract_credentials(monkeypatch):
    """Configure dummy Textract credentials."""
    monkeypatch.setattr(settings, "aws_region", "eu-west-2")
    monkeypatch.setattr(settings, "aws_access_key_id", "test-key-id")
    monkeypatch.setattr(settings, "aws_secret_access_key", "test-secret")


@pytest.fixture
def no_textract_credentials(monkeypatch):
    """Remove Textract credentials."""
    monkeypatch.setattr(settings, "aws_access_key_id", None)
    monkeypatch.setattr(settings, "aws_secret_access_key", None)
