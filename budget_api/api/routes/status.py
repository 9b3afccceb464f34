"""API Status — smoke-test endpoint under the /api prefix."""

from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["status"])


@router.get("/ok")
async def ok():
    return {"ok": True}
