from fastapi import APIRouter, Depends
from schemas.profile import CurrentUser
from routes.dependencies import get_current_user

router = APIRouter(tags=["users"])


@router.get("/me", response_model=CurrentUser)
async def get_me(user: CurrentUser = Depends(get_current_user)):
    return user
