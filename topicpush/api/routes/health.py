from __future__ import annotations

from fastapi import APIRouter

from topicpush import __version__

router = APIRouter()


@router.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str]:
  """Return a simple health status."""
  return {"status": "ok", "version": __version__}
