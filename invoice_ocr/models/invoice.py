from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Serialized with by_alias=True to produce the camelCase wire shape
# ({"invoiceNumber": ..., "lineItems": [{"unitPrice": ...}]}).
_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class LineItem(BaseModel):
    model_config = _WIRE_CONFIG

    description: str = Field(min_length=1)
    quantity: float = 0.0
    unit_price: float = 0.0
    line_total: float = 0.0


class InvoiceRecord(BaseModel):
    """Canonical invoice record returned by both parsing paths"""
    model_config = _WIRE_CONFIG

    vendor: str | None = None
    invoice_number: str | None = None
    invoice_date: str | None = Field(default=None, pattern=r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    line_items: tuple[LineItem, ...] = Field(min_length=1)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class PartialInvoiceFields(BaseModel):
    """Whatever the field extractor could find; every field may be missing"""
    vendor: str | None = None
    invoice_number: str | None = None
    invoice_date: str | None = None
    subtotal: float | None = None
    tax: float | None = None
    total: float | None = None
    line_items: list[LineItem] = Field(default_factory=list)
