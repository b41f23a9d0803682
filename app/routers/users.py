"""Users router - API endpoints for user records."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_database
from app.exceptions import InvalidIdentifier, NotFound, StoreError
from app.models.user import InsertionAck, User, UserCreate, UserUpdate
from app.services.user_service import UserService


router = APIRouter(tags=["users"])

DELETED_MESSAGE = "User deleted successfully."


def _require_id(user_id: str) -> None:
    """Reject an empty path identifier before touching the database."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID is required",
        )


def _to_http_error(error: Exception) -> HTTPException:
    """Map a user store error onto its HTTP status."""
    if isinstance(error, InvalidIdentifier):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


@router.post("/user", response_model=InsertionAck)
async def create_user(user: UserCreate, db=Depends(get_database)):
    """
    Create a new user.

    - Password is stored as a bcrypt hash
    - Returns the ID assigned by MongoDB
    """
    service = UserService(db)
    try:
        return await service.create_user(user)
    except StoreError as e:
        raise _to_http_error(e)


# The path converter lets "/user/" reach the handler so an empty ID gets a 400.
@router.get("/user/{user_id:path}", response_model=User)
async def get_user(user_id: str, db=Depends(get_database)):
    """
    Get a single user by ID.

    - 400 if the ID is empty or malformed
    - 404 if no user has this ID
    """
    _require_id(user_id)
    service = UserService(db)
    try:
        return await service.get_user(user_id)
    except (InvalidIdentifier, NotFound, StoreError) as e:
        raise _to_http_error(e)


@router.put("/user/{user_id:path}", response_model=User)
async def update_user(user_id: str, user_update: UserUpdate, db=Depends(get_database)):
    """
    Update a user's name, email and password.

    - Password is hashed again before it is stored
    - Responds with the user re-read after the update
    - 404 if no user has this ID
    """
    _require_id(user_id)
    service = UserService(db)
    try:
        updated = await service.update_user(user_id, user_update)
        if updated.id is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return await service.get_user(updated.id)
    except (InvalidIdentifier, NotFound, StoreError) as e:
        raise _to_http_error(e)


@router.delete("/user/{user_id:path}")
async def delete_user(user_id: str, db=Depends(get_database)):
    """
    Delete a user.

    - Removes the document from the collection
    - 404 if no user has this ID
    """
    _require_id(user_id)
    service = UserService(db)
    try:
        deleted = await service.delete_user(user_id)
    except (InvalidIdentifier, NotFound, StoreError) as e:
        raise _to_http_error(e)

    if deleted.id is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return DELETED_MESSAGE


@router.get("/users", response_model=list[User])
async def list_users(db=Depends(get_database)):
    """List every user."""
    service = UserService(db)
    try:
        return await service.list_users()
    except StoreError as e:
        raise _to_http_error(e)
