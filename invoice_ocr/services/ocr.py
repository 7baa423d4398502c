from loguru import logger
from azure.ai.documentintelligence import DocumentIntelligenceClient
from azure.core.credentials import AzureKeyCredential
from azure.core.exceptions import AzureError
from ..core.config import settings
from ..core.errors import OcrError


def _endpoint_for_log(endpoint: str) -> str:
    return endpoint[:50] + "..." if len(endpoint) > 50 else endpoint


def extract_text(file_bytes: bytes) -> str:
    """
    Turn an image/PDF byte buffer into raw OCR text.

    Uses the Azure Document Intelligence ``prebuilt-read`` model when
    AZ_DI_ENDPOINT and AZ_DI_API_KEY are set. Without them the bytes are
    decoded as UTF-8, which lets plain-text invoices (and tests) go through
    the same pipeline.
    """
    if settings.az_di_endpoint and settings.az_di_api_key:
        logger.info(
            "Using Azure Document Intelligence for OCR",
            endpoint=_endpoint_for_log(settings.az_di_endpoint),
            size_bytes=len(file_bytes),
        )

        try:
            client = DocumentIntelligenceClient(
                endpoint=settings.az_di_endpoint,
                credential=AzureKeyCredential(settings.az_di_api_key)
            )

            poller = client.begin_analyze_document(
                "prebuilt-read",
                body=file_bytes,
                content_type="application/octet-stream"
            )
            result = poller.result()
        except AzureError as e:
            logger.error(f"Azure DI OCR failed: {str(e)}")
            raise OcrError(f"OCR failed: {str(e)}") from e

        text = result.content if getattr(result, "content", None) else ""
        logger.info("OCR complete", chars=len(text))
        return text

    logger.warning(
        "Azure Document Intelligence not configured - decoding upload as UTF-8 text. "
        "Set AZ_DI_ENDPOINT and AZ_DI_API_KEY to use real OCR."
    )
    return (file_bytes or b"").decode("utf-8", errors="replace")
