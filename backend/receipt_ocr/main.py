"""
FastAPI application for grocery receipt OCR extraction.

Run instructions:
1. Install the package:
   pip install -e .

2. Configure environment:
   cp backend/.env.example backend/.env
   # Edit backend/.env with your AWS credentials

3. Run server:
   uvicorn receipt_ocr.main:app --reload --port 8000

Example curl request:
curl -X POST "http://127.0.0.1:8000/api/ocr/textract" \
  -H "Content-Type: application/json" \
  -d '{"imageUrls": ["https://example.com/receipt.jpg"], "storeName": "Tesco"}'
"""
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from .config import settings
from .core.workflow_processor import process_receipt_images
from .errors import OCRConfigurationError, OCRServiceError
from .models import ErrorResponse, TextractOCRRequest, TextractOCRResponse
import logging

# Configure logging
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

SUPPORTED_MODEL_TYPE = "AnalyzeDocumentTables"

app = FastAPI(
    title="Grocery Receipt OCR",
    description="Receipt line-item extraction and reconciliation using AWS Textract",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render errors as {success: false, error}; 405 carries only {error}."""
    if exc.status_code == 405:
        return JSONResponse(status_code=405, content={"error": "Method not allowed"})
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Invalid request bodies are client errors (400), not 422."""
    errors = exc.errors()
    if any("imageUrls" in [str(part) for part in err.get("loc", ())] for err in errors):
        message = "imageUrls is required and must be a non-empty array"
    elif any(err.get("type") == "json_invalid" for err in errors):
        message = "Request body is not valid JSON"
    else:
        message = "Invalid request body"
    logger.warning(f"Rejected request: {message} ({len(errors)} validation errors)")
    return JSONResponse(status_code=400, content={"success": False, "error": message})


@app.get("/health", tags=["System"])
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@app.post(
    "/api/ocr/textract",
    response_model=TextractOCRResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Receipts - OCR"]
)
def extract_receipt_textract(request: TextractOCRRequest):
    """
    Extract line items from receipt images with AWS Textract.

    - Images are downloaded and analysed one at a time, in order
    - Images that cannot be downloaded or read are skipped
    - Returns items, header metadata and a reconciliation report
    """
    if request.model_type and request.model_type != SUPPORTED_MODEL_TYPE:
        logger.info(f"Ignoring modelType '{request.model_type}', using {SUPPORTED_MODEL_TYPE}")

    logger.info(f"Textract extraction requested for {len(request.image_urls)} images")

    try:
        result = process_receipt_images(
            request.image_urls,
            store_name=request.store_name,
            total_amount=request.total_amount,
        )
    except OCRConfigurationError as e:
        logger.error(f"Textract not configured: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except OCRServiceError as e:
        logger.error(f"OCR processing error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error during receipt extraction: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return result.to_dict()
