from fastapi import APIRouter, Depends

from app.api.deps import get_auth_service, get_current_user
from app.schemas.common import ApiResponse
from app.schemas.user import LoginRequest, LoginResponse, ProfileResponse, UserCreate, UserData
from app.services.auth import AuthContext, AuthService

router = APIRouter()


@router.post("/register", response_model=ApiResponse[UserData], status_code=201)
async def register(body: UserCreate, service: AuthService = Depends(get_auth_service)):
    """
    Create a regular user account.
    """
    user = await service.register_user(body.username, body.email, body.password)
    return {"success": True, "data": {"user": user}, "message": "Account created successfully"}


@router.post("/login", response_model=ApiResponse[LoginResponse])
async def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """
    Exchange credentials for an access token.
    """
    user, token = await service.authenticate(body.email, body.password)
    return {"success": True, "data": {"user": user, "token": token}, "message": "Login successful"}


@router.post("/logout", response_model=ApiResponse[None])
async def logout(user: AuthContext = Depends(get_current_user)):
    """
    Acknowledge a logout. Tokens are stateless, the client discards its copy.
    """
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=ApiResponse[ProfileResponse])
async def read_profile(
    user: AuthContext = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """
    Get the caller's profile and activity counters.
    """
    profile = await service.get_profile(user.user_id)
    return {"success": True, "data": profile}
