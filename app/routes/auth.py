"""
Authentication routes for registration, login and profile management.
"""

from fastapi import APIRouter, status, Depends
from loguru import logger

from app.models.user import (
    AuthResponse,
    PasswordChange,
    ProfileUpdate,
    TokenData,
    UserCreate,
    UserLogin,
    public_user,
)
from app.services.database import UserDB
from app.utils.auth import check_password, create_access_token, hash_password
from app.utils.errors import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from app.middleware.auth_middleware import get_current_user

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate):
    """
    Register a new user account.

    Args:
        user: Name, email and password

    Returns:
        JWT token plus the user's email and name

    Raises:
        ValidationError: If a field is missing
        DuplicateEmail: If the email is already registered
    """
    if not user.name or not user.email or not user.password:
        raise ValidationError("All fields are required")

    logger.info(f"Registration attempt: {user.email}")

    existing_user = await UserDB.get_user_by_email(user.email)

    if existing_user:
        logger.warning(f"User already exists: {user.email}")
        raise DuplicateEmail()

    hashed_password = await hash_password(user.password)

    created_user = await UserDB.create_user(user.name, user.email, hashed_password)

    token = create_access_token(created_user["_id"], created_user["email"])

    logger.info(f"New user registered: {user.email}")

    return {
        "success": True,
        "message": "User registered successfully",
        "jwtToken": token,
        "email": created_user["email"],
        "name": created_user["name"],
    }


@router.post("/login", response_model=AuthResponse)
async def login(user: UserLogin):
    """
    Authenticate user and return JWT token.

    Unknown email and wrong password give the same error so callers
    cannot discover which accounts exist.
    """
    if not user.email or not user.password:
        raise ValidationError("Email and password are required")

    db_user = await UserDB.get_user_by_email(user.email)

    if not db_user:
        logger.warning(f"Login failed, unknown email: {user.email}")
        raise InvalidCredentials()

    if not await check_password(user.password, db_user["hashed_password"]):
        logger.warning(f"Login failed, wrong password: {user.email}")
        raise InvalidCredentials()

    token = create_access_token(db_user["_id"], db_user["email"])

    logger.info(f"User logged in: {user.email}")

    return {
        "success": True,
        "message": "Login successful",
        "jwtToken": token,
        "email": db_user["email"],
        "name": db_user["name"],
    }


@router.get("/verify")
async def verify(current_user: TokenData = Depends(get_current_user)):
    """Confirm the token still belongs to an existing user."""
    db_user = await UserDB.get_user_by_id(current_user.user_id)

    if not db_user:
        logger.warning(f"User not found during verification: {current_user.user_id}")
        raise NotFound("User not found")

    return {"success": True, "user": public_user(db_user)}


@router.get("/profile")
async def get_profile(current_user: TokenData = Depends(get_current_user)):
    db_user = await UserDB.get_user_by_id(current_user.user_id)

    if not db_user:
        raise NotFound("User not found")

    return {"success": True, "user": public_user(db_user, include_created=True)}


@router.put("/profile")
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: TokenData = Depends(get_current_user)
):
    """
    Update the display name. Without a name the profile is returned unchanged.

    Raises:
        NotFound: If the user no longer exists
    """
    if profile_data.name:
        updated_user = await UserDB.update_name(current_user.user_id, profile_data.name)
    else:
        updated_user = await UserDB.get_user_by_id(current_user.user_id)
        if not updated_user:
            raise NotFound("User not found")

    logger.info(f"Profile updated for user: {current_user.email}")

    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": public_user(updated_user),
    }


@router.put("/change-password")
async def change_password(
    password_data: PasswordChange,
    current_user: TokenData = Depends(get_current_user)
):
    """
    Change user password.

    Raises:
        ValidationError: If either password is missing
        InvalidCredentials: If the current password is incorrect
        NotFound: If the user no longer exists
    """
    if not password_data.current_password or not password_data.new_password:
        raise ValidationError("Current password and new password are required")

    db_user = await UserDB.get_user_with_password(current_user.user_id)

    if not db_user:
        raise NotFound("User not found")

    if not await check_password(password_data.current_password, db_user["hashed_password"]):
        raise InvalidCredentials("Current password is incorrect")

    new_hashed_password = await hash_password(password_data.new_password)
    await UserDB.update_password_hash(current_user.user_id, new_hashed_password)

    logger.info(f"Password changed for user: {current_user.email}")

    return {
        "success": True,
        "message": "Password changed successfully"
    }
