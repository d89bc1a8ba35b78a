from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from streamcms.auth import require_admin
from streamcms.models.user import User
from streamcms.schemas.upload import PosterUploadResponse
from streamcms.services.upload_service import PosterUploadService, get_poster_upload_service

router = APIRouter(tags=["Uploads"])


@router.post("/poster", response_model=PosterUploadResponse)
async def upload_poster(
    request: Request,
    file: UploadFile = File(...),
    slug: str = Form(...),
    service: PosterUploadService = Depends(get_poster_upload_service),
    _: User = Depends(require_admin),
) -> PosterUploadResponse:
    """Store a JPEG, PNG or WebP poster (max 5MB) as ``{domain}-{slug}{ext}``."""
    url, file_name = await service.save_poster(file, slug, host=request.headers.get("host"))
    return PosterUploadResponse(url=url, file_name=file_name)
