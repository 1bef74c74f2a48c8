"""Pytest configuration and fixtures for the MWS SDK tests."""
from typing import Generator
from unittest.mock import AsyncMock, patch

import pytest

SERVICE_STATUS_XML = (
    '<?xml version="1.0"?>'
    '<GetServiceStatusResponse xmlns="https://mws.amazonservices.com/Orders/2013-09-01">'
    "<GetServiceStatusResult>"
    "<Status>GREEN</Status>"
    "<Timestamp>2020-01-01T00:00:00Z</Timestamp>"
    "</GetServiceStatusResult>"
    "<ResponseMetadata><RequestId>req-123</RequestId></ResponseMetadata>"
    "</GetServiceStatusResponse>"
)


@pytest.fixture
def config() -> dict[str, str]:
    """Example seller configuration in the wire-style field names."""
    return {
        "AmazonServicesURL": "mws.amazonservices.com",
        "SellerId": "A1",
        "AWSAccessKeyId": "K1",
        "SecretKey": "S1",
    }


@pytest.fixture
def service_status_xml() -> str:
    return SERVICE_STATUS_XML


@pytest.fixture
def mock_send() -> Generator[AsyncMock, None, None]:
    """Replace the HTTPS transport; the mock records the SignedRequest."""
    with patch("mws_sdk.amazon.request.send", new_callable=AsyncMock) as send:
        send.return_value = SERVICE_STATUS_XML
        yield send
