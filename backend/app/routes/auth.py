"""
User and credential routes for the Taskboard API.

These are the only routes reachable without a bearer token.
"""

import uuid
from fastapi import APIRouter, Depends, Response, status

from app.exceptions import ErrorResponse
from app.routes.deps import get_user_service
from app.schemas import LoginRequest, LogoutRequest, TokenResponse, UserCreate, UserRead
from app.services.users import UserService

router = APIRouter()


@router.post(
    "/users",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_user(
    user_in: UserCreate,
    users: UserService = Depends(get_user_service),
):
    """Sign up a new user."""
    return await users.create_user(user_in)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_user(
    user_id: uuid.UUID,
    users: UserService = Depends(get_user_service),
) -> None:
    """Delete a user and remove them from every project and task."""
    await users.delete_user(user_id)


@router.post("/login", response_model=TokenResponse, responses={401: {"model": ErrorResponse}})
async def login(
    credentials: LoginRequest,
    response: Response,
    users: UserService = Depends(get_user_service),
) -> TokenResponse:
    """Exchange email and password for an access token (also sent as x-auth)."""
    token = await users.login(credentials.email, credentials.password)
    response.headers["x-auth"] = token
    return TokenResponse(access_token=token)


@router.post("/logout", responses={400: {"model": ErrorResponse}})
async def logout(
    body: LogoutRequest,
    users: UserService = Depends(get_user_service),
) -> dict:
    await users.logout(body.token)
    return {"message": "Successful logout"}
