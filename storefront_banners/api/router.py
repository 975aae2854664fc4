from fastapi import APIRouter

from storefront_banners.api.v1 import announcements

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(announcements.router)
