"""
Pydantic models for API request/response schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict


class TextractOCRRequest(BaseModel):
    """Request model for the Textract receipt extraction endpoint."""
    image_urls: List[str] = Field(
        ...,
        alias="imageUrls",
        min_length=1,
        description="Receipt image URLs, processed in order"
    )
    store_name: Optional[str] = Field(
        default=None,
        alias="storeName",
        description="Fallback store name used when none is printed"
    )
    total_amount: Optional[float] = Field(
        default=None,
        alias="totalAmount",
        description="Fallback total used when none is printed"
    )
    model_type: Optional[str] = Field(
        default=None,
        alias="modelType",
        description="OCR model hint; only AnalyzeDocumentTables is supported"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "imageUrls": ["https://example.com/receipts/tesco-1.jpg"],
                "storeName": "Tesco",
                "totalAmount": 23.45
            }
        }


class ParsedLineItemResponse(BaseModel):
    """Response model for one extracted item."""
    name: str
    quantity: int = 1
    unit_price: float
    total_price: float


class ReconciliationResponse(BaseModel):
    """Computed totals compared with the printed receipt."""
    extracted_receipt_total: Optional[float] = None
    extracted_receipt_item_count: Optional[int] = None
    computed_items_total_excl_discounts: float
    computed_items_count_excl_discounts: int
    total_delta: float
    total_mismatch: bool
    count_delta: Optional[int] = None
    count_mismatch: bool = False


class ParseQualityResponse(BaseModel):
    """Parse statistics."""
    confidence_score: int = Field(alias="confidenceScore")
    total_table_items: int = Field(alias="totalTableItems")
    total_line_items: int = Field(alias="totalLineItems")
    total_rejected_lines: int = Field(alias="totalRejectedLines")
    rejection_reasons: Dict[str, int] = Field(default_factory=dict, alias="rejectionReasons")

    class Config:
        populate_by_name = True


class TextractOCRResponse(BaseModel):
    """Response model for the Textract receipt extraction endpoint."""
    success: bool = True
    items: List[ParsedLineItemResponse] = []
    extracted_store_name: str = ""
    extracted_store_location: str = ""
    extracted_purchase_date: Optional[str] = None
    purchase_date_iso: Optional[str] = None
    total_discounts: float = 0.0
    reconciliation: ReconciliationResponse
    parse_quality: ParseQualityResponse = Field(alias="parseQuality")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "success": True,
                "items": [
                    {"name": "Bananas", "quantity": 1, "unit_price": 1.10, "total_price": 1.10}
                ],
                "extracted_store_name": "TESCO",
                "extracted_store_location": "Kensington High St",
                "extracted_purchase_date": "14/03/25",
                "purchase_date_iso": "2025-03-14",
                "total_discounts": 0.20,
                "reconciliation": {
                    "extracted_receipt_total": 0.90,
                    "extracted_receipt_item_count": None,
                    "computed_items_total_excl_discounts": 1.10,
                    "computed_items_count_excl_discounts": 1,
                    "total_delta": 0.20,
                    "total_mismatch": False,
                    "count_delta": None,
                    "count_mismatch": False
                },
                "parseQuality": {
                    "confidenceScore": 80,
                    "totalTableItems": 0,
                    "totalLineItems": 1,
                    "totalRejectedLines": 2,
                    "rejectionReasons": {"discount": 1, "footer": 1}
                }
            }
        }


class ErrorResponse(BaseModel):
    """Error body for 400/500 responses."""
    success: bool = False
    error: str
