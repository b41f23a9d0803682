"""User model definitions."""
from typing import Optional

from pydantic import BaseModel, Field


class UserBase(BaseModel):
    """Base user fields."""

    name: str
    email: str


class UserCreate(UserBase):
    """User creation model with plain text password."""

    password: str


class UserUpdate(UserBase):
    """User update model - replaces name, email and password."""

    password: str


class User(UserBase):
    """Stored user record; password holds the bcrypt hash."""

    id: Optional[str] = Field(default=None, alias="_id", serialization_alias="id")
    password: str

    model_config = {"populate_by_name": True}


class InsertionAck(BaseModel):
    """Acknowledgment returned after inserting a user."""

    # Serialized as "inserted_id", not the driver-style "insertedId" key
    inserted_id: str
