from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from ..services.pipeline import InvoicePipeline


class AnalyzeInvoiceRequest(BaseModel):
    """Upload body sent by the invoice upload panel"""
    model_config = ConfigDict(populate_by_name=True)

    file_name: str | None = Field(default=None, alias="fileName")
    file_type: str | None = Field(default=None, alias="fileType")
    file_content_base64: str | None = Field(default=None, alias="fileContentBase64")


class ParseTextRequest(BaseModel):
    text: str = ""


@lru_cache
def get_pipeline() -> InvoicePipeline:
    return InvoicePipeline()
