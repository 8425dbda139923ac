"""
Image Upload API Endpoint (staff)
"""
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from app.core.auth import TokenUser, require_staff
from app.core.config import settings
from app.services.storage_service import ALLOWED_IMAGE_TYPES, StorageError, upload_image

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def upload(
    file: UploadFile = File(...),
    folder: str = Form("uploads"),
    user: TokenUser = Depends(require_staff)
):
    """
    Store an image and return its public URL

    Only JPEG, PNG, WebP and GIF are accepted, up to MAX_UPLOAD_BYTES.
    """
    try:
        if file.content_type not in ALLOWED_IMAGE_TYPES:
            raise HTTPException(status_code=400, detail="Invalid file type. Allowed: JPEG, PNG, WebP, GIF")

        content = await file.read()
        if not content:
            raise HTTPException(status_code=400, detail="Empty file")
        if len(content) > settings.MAX_UPLOAD_BYTES:
            max_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
            raise HTTPException(status_code=400, detail=f"File too large. Maximum size is {max_mb}MB")

        safe_folder = folder.strip("/").replace("..", "") or "uploads"
        url = upload_image(content, file.content_type, safe_folder)

        return {"status": "success", "data": {"url": url}}

    except HTTPException:
        raise
    except StorageError as e:
        logger.error(f"Image storage unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception(f"Error uploading image: {e}")
        raise HTTPException(status_code=500, detail="Failed to upload image")
