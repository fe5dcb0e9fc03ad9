# =============================================================================
# app/routers/upload.py - Product Image Upload Endpoint
# =============================================================================
# Accepts preprocessed images as data URLs and stores them in the product
# image bucket. Admin only.
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.auth import get_current_admin, AdminUser
from app.dependencies import UploadServiceDep
from core.models.upload import UploadImagesRequest

logger = logging.getLogger(__name__)

router = APIRouter()

# Failure code -> HTTP status. Anything else is a storage failure (502).
ERROR_STATUS_CODES = {
    "STORAGE_NOT_CONFIGURED": 503,
    "STORAGE_CREDENTIAL_REJECTED": 503,
    "NO_IMAGES_UPLOADED": 400,
}


@router.post("/images")
async def upload_images(
    request: UploadImagesRequest,
    upload_service: UploadServiceDep,
    admin: AdminUser = Depends(get_current_admin),
):
    """
    Upload product images.

    Each entry must be a data URL ("data:image/<type>;base64,<payload>").
    Malformed entries are skipped; the rest are stored one at a time in the
    order given.

    **Response (200):**
    ```json
    {"urls": ["https://.../product-1700000000000-9f3c2a1be4.jpg"],
     "items": [{"index": 0, "status": "uploaded", "url": "...", "path": "..."}]}
    ```

    **Errors:**
    - 400: None of the entries could be uploaded
    - 502: Storage failed mid-batch (already-written objects are removed)
    - 503: Storage credential missing or rejected
    """
    logger.info(f"Admin {admin.id} uploading {len(request.images)} image(s)")

    result = upload_service.upload_images(request.images)

    if result.ok:
        return JSONResponse(status_code=200, content=result.to_response())

    status_code = ERROR_STATUS_CODES.get(result.code, 502)
    return JSONResponse(status_code=status_code, content=result.to_response())
