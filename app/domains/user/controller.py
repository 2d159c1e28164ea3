"""User controller endpoints."""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_user, validate_token
from app.schemas.user import UserResponse
from models.user import User

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(validate_token)],
)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get the user the bearer token resolves to."""
    return UserResponse.model_validate(current_user)
