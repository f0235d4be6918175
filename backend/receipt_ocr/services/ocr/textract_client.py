"""
AWS Textract client for reading receipt images.

Uses AnalyzeDocument with the TABLES feature so that column-aligned receipts
come back as TABLE/CELL blocks alongside the recognised LINE blocks.
"""
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from ...config import settings
from ...errors import OCRConfigurationError, OCRServiceError, UnreadableImageError
import logging
from typing import Dict, Any, List

logger = logging.getLogger(__name__)

# Textract error codes that only concern the submitted image
IMAGE_ERROR_CODES = {
    "InvalidParameterException",
    "UnsupportedDocumentException",
    "BadDocumentException",
    "DocumentTooLargeException",
}

# Textract client instance
_client = None


def ensure_credentials():
    """Raise OCRConfigurationError unless Textract credentials are configured."""
    if not settings.has_textract_credentials:
        raise OCRConfigurationError(
            "AWS Textract credentials are not configured. "
            "Set AWS_REGION, AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY."
        )


def _get_client():
    """Get or create Textract client."""
    global _client
    if _client is None:
        ensure_credentials()
        try:
            _client = boto3.client(
                'textract',
                region_name=settings.aws_region,
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key,
                aws_session_token=settings.aws_session_token,
            )
            logger.info(f"AWS Textract client initialized (region: {settings.aws_region})")
        except BotoCoreError as e:
            raise OCRConfigurationError(f"Failed to initialize AWS Textract client: {e}")

    return _client


def analyze_document(image_bytes: bytes) -> List[Dict[str, Any]]:
    """
    Run Textract AnalyzeDocument (TABLES) on one image.

    Args:
        image_bytes: Image file bytes

    Returns:
        The raw "Blocks" list of the response (empty if Textract returned none)

    Raises:
        UnreadableImageError: Textract rejected this image; callers skip it
        OCRServiceError: Any other Textract or transport failure
    """
    client = _get_client()

    try:
        logger.info(f"Calling Textract analyze_document ({len(image_bytes)} bytes)...")
        response = client.analyze_document(
            Document={'Bytes': image_bytes},
            FeatureTypes=['TABLES'],
        )
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        error_message = e.response.get('Error', {}).get('Message', '')
        if error_code in IMAGE_ERROR_CODES:
            logger.warning(f"Textract rejected image: {error_code} - {error_message}")
            raise UnreadableImageError(f"{error_code}: {error_message}")
        logger.error(f"Textract API error: {error_code} - {error_message}")
        raise OCRServiceError(f"Textract API error: {error_code} - {error_message}")
    except BotoCoreError as e:
        logger.error(f"Textract call failed: {e}", exc_info=True)
        raise OCRServiceError(f"Textract call failed: {str(e)}")

    blocks = response.get('Blocks') or []
    logger.info(f"Textract returned {len(blocks)} blocks")
    return blocks
