"""
api/routes/v1/supplies.py -- Read-only supply listing routes.

Routes:
  GET /supplies          -- every supply document
  GET /supplies/{id}     -- one supply document, 404 if absent

Supplies are loaded out of band (see `python main.py seed-supplies`); the
API exposes no write path for them. Documents are returned as stored, with
the id under "_id".
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from api.context import AppContext, get_context
from core.ids import is_valid_id
from listings.models import SUPPLIES

router = APIRouter()


@router.get("/supplies")
def list_supplies(ctx: AppContext = Depends(get_context)) -> list[dict[str, Any]]:
    return [{"_id": doc.id, **doc.data} for doc in ctx.listings.find_all(SUPPLIES)]


@router.get("/supplies/{supply_id}")
def get_supply(supply_id: str, ctx: AppContext = Depends(get_context)) -> dict[str, Any]:
    """Return one supply. A malformed id is reported the same way as a missing one."""
    doc = ctx.listings.find_one(SUPPLIES, supply_id) if is_valid_id(supply_id) else None
    if doc is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "Supply not found"},
        )
    return {"_id": doc.id, **doc.data}
