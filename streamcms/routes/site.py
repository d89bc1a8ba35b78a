from fastapi import APIRouter, Request

from streamcms.config import settings
from streamcms.utils.client_ip import get_client_ip

router = APIRouter(tags=["Site"])


@router.get("/api/client-ip")
async def client_ip(request: Request):
    return {"ip": get_client_ip(request)}


@router.get("/health")
async def health():
    return {"status": "healthy", "version": settings.app_version}
