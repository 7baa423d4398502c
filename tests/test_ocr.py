"""
Tests for the OCR backend adapter and the pipeline around it.

The Azure Document Intelligence client is patched; no network is used.
"""

import asyncio
import time
from unittest.mock import MagicMock, patch

import pytest
from azure.core.exceptions import HttpResponseError
from fastapi.testclient import TestClient
from invoice_ocr.api.main import app
from invoice_ocr.core.config import settings
from invoice_ocr.core.errors import OcrError
from invoice_ocr.services.generative import GenerativeBackendConfig, GenerativeParser
from invoice_ocr.services.ocr import extract_text
from invoice_ocr.services.pipeline import InvoicePipeline

client = TestClient(app)


@pytest.fixture
def azure_configured():
    original_endpoint = settings.az_di_endpoint
    original_key = settings.az_di_api_key
    settings.az_di_endpoint = "https://example.cognitiveservices.azure.com/"
    settings.az_di_api_key = "test-key"
    try:
        yield
    finally:
        settings.az_di_endpoint = original_endpoint
        settings.az_di_api_key = original_key


def rules_pipeline() -> InvoicePipeline:
    return InvoicePipeline(GenerativeParser(GenerativeBackendConfig()), default_mode="rules")


def test_unconfigured_backend_decodes_utf8(no_ocr_backend):
    assert extract_text("Café Nord\nTotal 5".encode("utf-8")) == "Café Nord\nTotal 5"


def test_unconfigured_backend_tolerates_binary(no_ocr_backend):
    text = extract_text(b"%PDF-1.4 \xff\xfe")
    assert text.startswith("%PDF-1.4")


def test_empty_bytes(no_ocr_backend):
    assert extract_text(b"") == ""


@patch("invoice_ocr.services.ocr.DocumentIntelligenceClient")
def test_azure_read_model_used(mock_client_cls, azure_configured, acme_text):
    mock_client = mock_client_cls.return_value
    mock_client.begin_analyze_document.return_value.result.return_value = MagicMock(content=acme_text)

    assert extract_text(b"%PDF-1.4") == acme_text

    args, kwargs = mock_client.begin_analyze_document.call_args
    assert args[0] == "prebuilt-read"
    assert kwargs["body"] == b"%PDF-1.4"


@patch("invoice_ocr.services.ocr.DocumentIntelligenceClient")
def test_azure_result_without_content(mock_client_cls, azure_configured):
    mock_client_cls.return_value.begin_analyze_document.return_value.result.return_value = MagicMock(content=None)
    assert extract_text(b"%PDF-1.4") == ""


@patch("invoice_ocr.services.ocr.DocumentIntelligenceClient")
def test_azure_failure_raises_ocr_error(mock_client_cls, azure_configured):
    mock_client_cls.return_value.begin_analyze_document.side_effect = HttpResponseError(message="Unauthorized")
    with pytest.raises(OcrError):
        extract_text(b"%PDF-1.4")


@patch("invoice_ocr.services.ocr.DocumentIntelligenceClient")
def test_pipeline_parses_ocr_output(mock_client_cls, azure_configured, acme_text):
    mock_client_cls.return_value.begin_analyze_document.return_value.result.return_value = MagicMock(content=acme_text)

    record = asyncio.run(rules_pipeline().analyze_bytes(b"%PDF-1.4"))
    assert record.invoice_number == "INV-1002"
    assert record.total == 21.6


def test_pipeline_ocr_timeout(no_ocr_backend):
    original = settings.ocr_timeout_seconds
    settings.ocr_timeout_seconds = 0.05

    def slow_ocr(file_bytes):
        time.sleep(0.5)
        return ""

    try:
        with patch("invoice_ocr.services.pipeline.extract_text", slow_ocr):
            with pytest.raises(OcrError):
                asyncio.run(rules_pipeline().analyze_bytes(b"x"))
    finally:
        settings.ocr_timeout_seconds = original


@patch("invoice_ocr.services.ocr.DocumentIntelligenceClient")
def test_ocr_failure_maps_to_500(mock_client_cls, azure_configured):
    mock_client_cls.return_value.begin_analyze_document.side_effect = HttpResponseError(message="boom")

    r = client.post("/invoices/analyze", content=b"%PDF-1.4", headers={"Content-Type": "application/pdf"})
    assert r.status_code == 500
    assert r.json() == {"detail": "Failed to analyze invoice"}


def test_auto_mode_prefers_configured_llm():
    config = GenerativeBackendConfig(base_url="https://llm.example.com", api_key="k", deployment="d")
    pipeline = InvoicePipeline(GenerativeParser(config), default_mode="auto")
    assert pipeline.resolve_mode(None) == "llm"
    assert pipeline.resolve_mode("rules") == "rules"


def test_auto_mode_without_llm_uses_rules():
    assert rules_pipeline().resolve_mode("auto") == "rules"
    assert rules_pipeline().resolve_mode("llm") == "llm"
