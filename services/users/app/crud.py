"""
CRUD (Create, Read, Update, Delete) operations for the Users service.

This module contains all database operations for user management.
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from . import models, schemas

def get_user(db: Session, user_id: int) -> Optional[models.User]:
    """
    Retrieve a single user by ID.

    Args:
        db: Database session
        user_id: ID of the user to retrieve

    Returns:
        User object or None if not found
    """
    return db.query(models.User).filter(models.User.id == user_id).first()

def get_user_by_username(db: Session, username: str) -> Optional[models.User]:
    """
    Retrieve a user by login name.

    Args:
        db: Database session
        username: Username to search for

    Returns:
        User object or None if not found
    """
    return db.query(models.User).filter(models.User.username == username).first()

def get_users(db: Session, skip: int = 0, limit: int = 100) -> List[models.User]:
    """
    Retrieve a list of users with pagination.

    Args:
        db: Database session
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return

    Returns:
        List of User objects
    """
    return db.query(models.User).order_by(models.User.id).offset(skip).limit(limit).all()

def count_admins(db: Session) -> int:
    """Number of users currently holding the admin role."""
    return db.query(models.User).filter(models.User.role == "admin").count()

def create_user(db: Session, user: schemas.UserBase, password_hash: str, role: str) -> models.User:
    """
    Create a new user in the database.

    Args:
        db: Database session
        user: User data to create
        password_hash: Already hashed password
        role: Role to store for the user

    Returns:
        Created User object
    """
    db_user = models.User(
        name=user.name.strip(),
        username=user.username.strip(),
        password_hash=password_hash,
        role=role,
        is_active=True,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def update_user(db: Session, user_id: int, user: schemas.UserUpdate) -> Optional[models.User]:
    """
    Update an existing user.

    Args:
        db: Database session
        user_id: ID of the user to update
        user: Updated user data (only provided fields will be updated)

    Returns:
        Updated User object or None if not found
    """
    db_user = get_user(db, user_id)
    if db_user is None:
        return None

    update_data = user.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(db_user, key, value)

    db.commit()
    db.refresh(db_user)
    return db_user

def set_role(db: Session, user_id: int, role: str) -> Optional[models.User]:
    """Store a new role for a user. Returns None if the user does not exist."""
    db_user = get_user(db, user_id)
    if db_user is None:
        return None
    db_user.role = role
    db.commit()
    db.refresh(db_user)
    return db_user

def delete_user(db: Session, user_id: int) -> bool:
    """
    Delete a user from the database.

    Args:
        db: Database session
        user_id: ID of the user to delete

    Returns:
        True if user was deleted, False if not found
    """
    db_user = get_user(db, user_id)
    if db_user is None:
        return False

    db.delete(db_user)
    db.commit()
    return True
