"""
Database operations module for the Supabase tryon_results table.
Stores the overlays shown to kiosk customers.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from supabase import Client, create_client

from kiosk_overlay.config import logger, SUPABASE_URL, SUPABASE_SERVICE_KEY

TRYON_RESULTS_TABLE = "tryon_results"

# Initialize Supabase client
_supabase_client: Optional[Client] = None


def _get_supabase_client() -> Client:
    """
    Get or create the Supabase client instance.

    Returns:
        Client: Supabase client instance

    Raises:
        ValueError: If SUPABASE_URL or SUPABASE_SERVICE_KEY is not configured
    """
    global _supabase_client

    if _supabase_client is None:
        if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
            error_msg = "SUPABASE_URL or SUPABASE_SERVICE_KEY is not configured"
            logger.error(error_msg)
            raise ValueError(error_msg)

        try:
            _supabase_client = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
            logger.info(
                "Supabase client initialized successfully for database operations"
            )
        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise

    return _supabase_client


async def save_tryon_result(
    session_id: str,
    product_id: str,
    result_image_url: str,
    ai_comment: Optional[str] = None,
    variant_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Insert a displayed overlay into tryon_results.

    Args:
        session_id: ID of the kiosk tryon_sessions row
        product_id: ID of the product that was tried on
        result_image_url: Overlay image (or the original photo on fallback)
        ai_comment: Styling comment shown with the image
        variant_id: Optional product variant ID

    Returns:
        Dict containing the created record with 'id' field

    Raises:
        Exception: If database operation fails
    """
    try:
        client = _get_supabase_client()

        record_data = {
            "session_id": session_id,
            "product_id": product_id,
            "variant_id": variant_id,
            "result_image_url": result_image_url,
            "ai_comment": ai_comment,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        logger.info(
            f"Saving try-on result for session: {session_id}, product: {product_id}"
        )

        response = client.table(TRYON_RESULTS_TABLE).insert(record_data).execute()

        if response.data and len(response.data) > 0:
            record = response.data[0]
            logger.info(f"Successfully saved try-on result with ID: {record.get('id')}")
            return record
        else:
            error_msg = "Failed to save try-on result: No data returned"
            logger.error(error_msg)
            raise Exception(error_msg)

    except Exception as e:
        logger.error(f"Error saving try-on result: {e}")
        raise


async def get_tryon_result(result_id: str) -> Optional[Dict[str, Any]]:
    """
    Retrieve a specific try-on result by ID.

    Args:
        result_id: ID of the result to retrieve

    Returns:
        Dict containing the record data, or None if not found

    Raises:
        Exception: If database operation fails
    """
    try:
        client = _get_supabase_client()

        logger.debug(f"Retrieving try-on result {result_id}")

        response = (
            client.table(TRYON_RESULTS_TABLE).select("*").eq("id", result_id).execute()
        )

        if response.data and len(response.data) > 0:
            record = response.data[0]
            logger.debug(f"Successfully retrieved try-on result {result_id}")
            return record
        else:
            logger.warning(f"Try-on result {result_id} not found")
            return None

    except Exception as e:
        logger.error(f"Error retrieving try-on result {result_id}: {e}")
        raise
