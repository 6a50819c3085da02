"""
api/routes/v1/auth.py -- Registration and login REST endpoints.

Routes:
  POST /api/v1/register   -- create an account; 201, or 400 duplicate_user
  POST /api/v1/login      -- exchange email + password for a JWT; 200, or 401

Security:
  [C1] login_user() goes through authenticate_user(), which runs bcrypt even
       for unknown emails. Do NOT inline get_by_email() + verify_password().
  Unknown email and wrong password produce byte-identical 401 responses so
  the endpoint cannot be used to discover which emails are registered.
  [M5] Cache-Control: no-store on every login response (it may carry a token).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.context import AppContext, get_context
from api.models import (
    ErrorDetail,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from auth.service import DuplicateUserError, InvalidCredentialsError, login_user, register_user

router = APIRouter()


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump(exclude_none=True),
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(body: RegisterRequest, ctx: AppContext = Depends(get_context)):
    """Create an account. Nothing about the new user is echoed back."""
    try:
        register_user(ctx.user_store, body.name, body.email, body.password)
    except DuplicateUserError as exc:
        return _error(400, exc.code, exc.message)
    return RegisterResponse()


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, ctx: AppContext = Depends(get_context)) -> JSONResponse:
    """Authenticate with email and password; return a signed access token."""
    try:
        token = login_user(ctx.user_store, ctx.settings, body.email, body.password)
    except InvalidCredentialsError as exc:
        resp = _error(401, exc.code, exc.message)
    else:
        resp = JSONResponse(status_code=200, content=LoginResponse(token=token).model_dump())
    resp.headers["Cache-Control"] = "no-store"  # [M5]
    return resp
