"""
api/routes/v1/posts.py -- Post listing CRUD routes.

Routes:
  POST   /posts          -- store the request body as a new post
  GET    /posts          -- every post document
  PUT    /posts/{id}     -- set the given post fields (upsert)
  DELETE /posts/{id}     -- remove one post

Posts are schema-less: POST stores whatever JSON object it receives. PUT
only writes the known post fields (image, category, title, quantity,
description) that appear in the body; a PUT to an unused id creates the
post. Write routes return the store's acknowledgement unchanged.

Malformed ids (anything but 24 lowercase hex chars) get 404 before the
store is touched.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from api.context import AppContext, get_context
from api.models import (
    DeleteResultResponse,
    InsertResultResponse,
    PostCreatedResponse,
    PostUpdate,
    UpdateResultResponse,
)
from core.ids import is_valid_id
from listings.models import POSTS

router = APIRouter()


def _require_valid_id(post_id: str) -> None:
    if not is_valid_id(post_id):
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "Post not found"},
        )


@router.post("/posts", response_model=PostCreatedResponse)
def create_post(
    body: dict[str, Any] = Body(...),
    ctx: AppContext = Depends(get_context),
) -> PostCreatedResponse:
    result = ctx.listings.insert_one(POSTS, body)
    return PostCreatedResponse(data=InsertResultResponse.from_result(result))


@router.get("/posts")
def list_posts(ctx: AppContext = Depends(get_context)) -> list[dict[str, Any]]:
    return [{"_id": doc.id, **doc.data} for doc in ctx.listings.find_all(POSTS)]


@router.put("/posts/{post_id}", response_model=UpdateResultResponse)
def update_post(
    post_id: str,
    body: PostUpdate,
    ctx: AppContext = Depends(get_context),
) -> UpdateResultResponse:
    """Set the post fields present in the body; create the post if it does not exist."""
    _require_valid_id(post_id)
    result = ctx.listings.update_one(POSTS, post_id, body.model_dump(exclude_unset=True), upsert=True)
    return UpdateResultResponse.from_result(result)


@router.delete("/posts/{post_id}", response_model=DeleteResultResponse)
def delete_post(post_id: str, ctx: AppContext = Depends(get_context)) -> DeleteResultResponse:
    _require_valid_id(post_id)
    return DeleteResultResponse.from_result(ctx.listings.delete_one(POSTS, post_id))
