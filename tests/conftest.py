"""
Pytest configuration.

Registers the integration marker/option and keeps backend settings isolated
between tests.
"""

import pytest

from invoice_ocr.core.config import settings


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against real Azure resources"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring real Azure resources"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def no_ocr_backend():
    """Disable Azure DI so uploads are decoded as UTF-8 text"""
    original_endpoint = settings.az_di_endpoint
    original_key = settings.az_di_api_key
    settings.az_di_endpoint = None
    settings.az_di_api_key = None
    try:
        yield
    finally:
        settings.az_di_endpoint = original_endpoint
        settings.az_di_api_key = original_key


ACME_INVOICE_TEXT = """Acme Supplies
Invoice Number: INV-1002
Invoice Date: 03/04/2024
Widget A    2 x 10.00
Subtotal 20.00
Tax 1.60
Total 21.60
"""


@pytest.fixture
def acme_text():
    return ACME_INVOICE_TEXT
