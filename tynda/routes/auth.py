"""
Tynda Backend — Account Route Handlers
=======================================

What:  Registration, login, logout and the current-user endpoint. These
       are the only handlers that write to the session.
"""

import logging

from fastapi import APIRouter, Depends, Request

from tynda.auth import RequestContext, get_request_context, login_session, logout_session
from tynda.dependencies import get_auth_service
from tynda.exceptions import AuthenticationError
from tynda.schemas.common import ErrorResponse, MessageResponse
from tynda.schemas.user import LoginRequest, RegisterRequest, UserResponse
from tynda.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=201,
    responses={400: {"description": "Invalid or taken credentials", "model": ErrorResponse}},
    summary="Create an account and log in",
)
async def register(
    payload: RegisterRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    user = await service.register(payload)
    login_session(request, user)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=UserResponse,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
    summary="Log in with email and password",
)
async def login(
    payload: LoginRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    user = await service.authenticate(payload)
    login_session(request, user)
    return UserResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse, summary="End the session")
async def logout(request: Request) -> MessageResponse:
    logout_session(request)
    return MessageResponse(message="Logged out")


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "No valid session", "model": ErrorResponse}},
    summary="The logged-in user",
)
async def me(
    ctx: RequestContext = Depends(get_request_context),
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    user = await service.get_user(ctx.user_id)
    if user is None:
        raise AuthenticationError()
    return UserResponse.model_validate(user)
