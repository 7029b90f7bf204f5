from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..container import Container, get_container
from ..schemas import UserCreate, UserOut

router = APIRouter(
    prefix="/api/v1/users",
    tags=["users"],
)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Register a new user. The email is normalized and must not already be in use.",
    responses={
        201: {"description": "User created successfully"},
        400: {"description": "Invalid name/email or email already in use"},
    },
)
def create_user(payload: UserCreate, container: Container = Depends(get_container)) -> UserOut:
    """
    Create a new User.
    """
    return container.create_user.execute(payload)


# PUBLIC_INTERFACE
@router.get(
    "/{user_id}",
    response_model=UserOut,
    summary="Get User",
    description="Get a single user by ID.",
    responses={
        200: {"description": "User found"},
        404: {"description": "User not found"},
    },
)
def get_user(user_id: str, container: Container = Depends(get_container)) -> UserOut:
    """
    Retrieve a single User by its ID.
    """
    return container.get_user.execute(user_id)
