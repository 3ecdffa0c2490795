import logging

from fastapi import APIRouter, Depends

from deps_auth import get_current_admin
from errors import UpstreamError, ValidationError
from image_store import CloudinaryImageStore, get_image_store
from models import Admin
from schemas import UploadIn, UploadOut

logger = logging.getLogger(__name__)

upload_router = APIRouter(tags=["upload"])


@upload_router.post("/upload", response_model=UploadOut)
def upload_images(
    payload: UploadIn,
    image_store: CloudinaryImageStore = Depends(get_image_store),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Uploads each file independently. Blank or non-string entries are skipped,
    a failing file is logged and skipped; only "nothing uploaded" is an error.
    """
    files = payload.files
    if not isinstance(files, list) or not files:
        raise ValidationError("No files provided")

    if not image_store.is_configured:
        raise UpstreamError("Cloudinary not configured")

    urls = []
    for index, file in enumerate(files):
        if not isinstance(file, str) or not file.strip():
            continue
        try:
            urls.append(image_store.upload(file))
        except Exception as exc:
            logger.error("Upload of file %d failed: %s", index + 1, exc)

    if not urls:
        raise UpstreamError("Upload failed")

    return {"urls": urls}
