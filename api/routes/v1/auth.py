"""
api/routes/v1/auth.py -- Account REST endpoints.

Routes:
  POST /api/v1/auth/signup   -- create account; returns token + user
  POST /api/v1/auth/login    -- password login; returns token + user
  GET  /api/v1/auth/me       -- current user (requires auth)

Security:
  login() in auth/accounts.py provides timing equalization -- use it, never
  inline get_by_email() + verify_password().
  Unknown email and wrong password return the same 401 message.
  Cache-Control: no-store on every response that carries a token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.models import AuthResponse, LoginRequest, MeResponse, SignupRequest, UserOut
from auth import accounts
from auth.dependencies import get_current_user
from auth.models import User

# Auth policy:
# - POST /api/v1/auth/signup: public
# - POST /api/v1/auth/login:  public
# - GET  /api/v1/auth/me:     requires auth (get_current_user)
router = APIRouter()


@router.post("/auth/signup", response_model=AuthResponse, status_code=201)
def signup(request: Request, response: Response, body: SignupRequest) -> AuthResponse:
    """Register a new account and log it in.

    Fails with 400 on a duplicate email or a password below the configured
    minimum length.
    """
    settings = request.app.state.settings
    user, token = accounts.signup(
        request.app.state.user_store,
        request.app.state.tokens,
        body.name,
        body.email,
        body.password,
        rounds=settings.bcrypt_rounds,
        min_password_length=settings.min_password_length,
    )
    response.headers["Cache-Control"] = "no-store"
    return AuthResponse(token=token, user=UserOut.from_user(user))


@router.post("/auth/login", response_model=AuthResponse)
def login(request: Request, response: Response, body: LoginRequest) -> AuthResponse:
    """Authenticate with email and password."""
    user, token = accounts.login(
        request.app.state.user_store,
        request.app.state.tokens,
        body.email,
        body.password,
    )
    response.headers["Cache-Control"] = "no-store"
    return AuthResponse(token=token, user=UserOut.from_user(user))


@router.get("/auth/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)) -> MeResponse:
    """Return the account the presented token belongs to."""
    return MeResponse(user=UserOut.from_user(current_user))
