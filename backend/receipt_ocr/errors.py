"""
Exception types raised by the receipt OCR service.

Only request-level failures propagate to the API layer. Per-image download
problems are raised as ImageFetchError and handled inside the workflow.
"""


class ReceiptOCRError(Exception):
    """Base class for receipt OCR errors."""


class OCRConfigurationError(ReceiptOCRError):
    """Textract credentials or region are not configured."""


class OCRServiceError(ReceiptOCRError):
    """The Textract call failed for a reason other than a bad image."""


class ImageFetchError(ReceiptOCRError):
    """A receipt image could not be downloaded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch image {url}: {reason}")


class UnreadableImageError(ReceiptOCRError):
    """Textract rejected one image (bad format, too large, unreadable)."""
