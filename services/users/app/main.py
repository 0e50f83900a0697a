"""
Users Service FastAPI Application.

This module implements the users microservice of the fabric inventory app.
It issues JWT tokens for username/password logins and lets admins manage who
may use the app and with which role.

The service includes:
- Authentication endpoints (register, login, current profile)
- One-time promotion of the first account to master admin
- Admin endpoints for creating users, assigning roles and resetting passwords
- A health check endpoint for service monitoring and orchestration

Attributes:
    app (FastAPI): The FastAPI application instance configured with the title "users-service".
"""
from typing import List
import logging
import secrets
import string
from fastapi import FastAPI, Depends, HTTPException, status
from sqlalchemy.orm import Session

from . import crud, models, schemas, auth
from .config import DEFAULT_ROLE
from .database import engine, get_db

logger = logging.getLogger(__name__)

# Create database tables
models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="users-service")

@app.get("/healthz", response_model=dict)
def health():
    """
    Health check endpoint for the users service.

    Returns:
        dict: A dictionary containing the health status of the service.
            - status (str): Always returns "healthy" when the service is operational.

    Example:
        GET /healthz
        Response: {"status": "healthy"}
    """
    return {"status": "healthy"}

@app.post("/register", response_model=schemas.Token, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserRegister, db: Session = Depends(get_db)):
    """
    Register a new account. New accounts start as guests until an admin assigns a role.

    Args:
        user: Registration data (name, username, password)
        db: Database session (injected)

    Returns:
        JWT access token

    Raises:
        HTTPException: 400 if the username is already taken
    """
    if crud.get_user_by_username(db, username=user.username.strip()):
        raise HTTPException(status_code=400, detail="Username already exists")

    db_user = crud.create_user(db, user, auth.get_password_hash(user.password), DEFAULT_ROLE)
    logger.info(f"Registered user '{db_user.username}' as {db_user.role}")
    return auth.token_for(db_user)

@app.post("/login", response_model=schemas.Token)
def login(credentials: schemas.UserLogin, db: Session = Depends(get_db)):
    """
    Authenticate with username and password.

    Args:
        credentials: Login credentials (username, password)
        db: Database session (injected)

    Returns:
        JWT access token

    Raises:
        HTTPException: 401 if credentials are invalid
        HTTPException: 403 if the account is inactive
    """
    user = auth.authenticate_user(db, credentials.username.strip(), credentials.password)
    if not user:
        logger.warning(f"Failed login for '{credentials.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")
    return auth.token_for(user)

@app.get("/me", response_model=schemas.User)
def get_current_user_info(current_user: models.User = Depends(auth.get_current_user)):
    """Return the profile of the authenticated caller."""
    return current_user

@app.post("/me/promote", response_model=schemas.Token)
def promote_to_master_admin(
    promotion: schemas.MasterAdminPromotion,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.get_current_user)
):
    """
    Promote the caller to master admin.

    Only possible while the system has no admin at all; the caller re-confirms
    their password. Returns a fresh token carrying the admin role.

    Raises:
        HTTPException: 401 if the password does not match
        HTTPException: 409 if an admin already exists
    """
    if not auth.verify_password(promotion.password, current_user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")
    if crud.count_admins(db) > 0:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A master admin already exists")

    db_user = crud.set_role(db, current_user.id, "admin")
    logger.info(f"User '{db_user.username}' promoted to master admin")
    return auth.token_for(db_user)

@app.post("/", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def create_user_admin(
    user: schemas.UserCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin)
):
    """
    Create a new user with an initial password and role (admin only).

    Raises:
        HTTPException: 400 if the username is already taken
    """
    if crud.get_user_by_username(db, username=user.username.strip()):
        raise HTTPException(status_code=400, detail="Username already exists")

    db_user = crud.create_user(db, user, auth.get_password_hash(user.password), user.role)
    logger.info(f"Admin {current_user.id} created user '{db_user.username}' as {db_user.role}")
    return db_user

@app.get("/", response_model=List[schemas.User])
def list_users(
    skip: int = 0,
    limit: int = 500,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin)
):
    """
    List all users with pagination (admin only).

    Args:
        skip: Number of records to skip (default: 0)
        limit: Maximum number of records to return (default: 500)
        db: Database session (injected)
        current_user: Current authenticated admin user (injected)

    Returns:
        List of user objects
    """
    return crud.get_users(db, skip=skip, limit=limit)

@app.get("/{user_id}", response_model=schemas.User)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.get_current_user)
):
    """
    Get a single user by ID (authenticated users only).

    Raises:
        HTTPException: 404 if user not found
    """
    db_user = crud.get_user(db, user_id=user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user

@app.put("/{user_id}", response_model=schemas.User)
def update_user(
    user_id: int,
    user: schemas.UserUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.get_current_user)
):
    """
    Update an existing user's profile (self or admin).

    Raises:
        HTTPException: 403 if not authorized
        HTTPException: 404 if user not found
    """
    if current_user.id != user_id and not auth.has_role(current_user.role, "admin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to update this user"
        )

    db_user = crud.update_user(db, user_id=user_id, user=user)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user

@app.put("/{user_id}/role", response_model=schemas.User)
def assign_role(
    user_id: int,
    assignment: schemas.RoleAssignment,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin)
):
    """
    Assign a role to a user (admin only).

    Admins cannot demote themselves, so the system always keeps at least the
    acting admin.

    Raises:
        HTTPException: 400 if an admin tries to demote themselves
        HTTPException: 404 if user not found
    """
    if current_user.id == user_id and assignment.role != "admin":
        raise HTTPException(status_code=400, detail="Admins cannot change their own role")

    db_user = crud.set_role(db, user_id, assignment.role)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"Admin {current_user.id} assigned role {assignment.role} to user {user_id}")
    return db_user

@app.post("/{user_id}/reset_password", response_model=dict)
def reset_password(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin)
):
    """
    Reset a user's password (admin only). Returns a new temporary password once.
    """
    db_user = crud.get_user(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    alphabet = string.ascii_letters + string.digits
    temp_pw = "".join(secrets.choice(alphabet) for _ in range(12))
    db_user.password_hash = auth.get_password_hash(temp_pw)
    db.commit()
    return {"temp_password": temp_pw}

@app.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin)
):
    """
    Delete a user (admin only).

    Raises:
        HTTPException: 400 if an admin tries to delete themselves
        HTTPException: 404 if user not found
    """
    if current_user.id == user_id:
        raise HTTPException(status_code=400, detail="Admins cannot delete themselves")
    success = crud.delete_user(db, user_id=user_id)
    if not success:
        raise HTTPException(status_code=404, detail="User not found")
