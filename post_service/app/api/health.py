from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter


router = APIRouter()

HEALTH_MESSAGE = "Tinkergram Backend Server is running"


@router.get("/health", summary="헬스 체크")
async def health() -> dict[str, str]:
    # 저장소에 의존하지 않는 liveness 체크
    return {
        "status": "OK",
        "message": HEALTH_MESSAGE,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
