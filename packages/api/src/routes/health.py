# This project was developed with assistance from AI tools.
"""Liveness endpoint."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def health() -> dict[str, str]:
    """Process is up. Does not touch the record store."""
    return {"status": "ok"}
