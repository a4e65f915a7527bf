"""Build metadata endpoint."""
from fastapi import APIRouter

from wonderlake.services.build_info import get_build_info

router = APIRouter(tags=["Meta"])


@router.get("/build-info")
async def build_info():
    """Version and commit of the running build."""
    return get_build_info()
