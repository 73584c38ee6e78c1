"""
User Routes
============
GET /api/users/{id} is open to the account owner; everything else is
ADMIN-only (see modules.auth.policy).
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from config.database import get_db
from modules.user.schemas import UserResponse
from modules.user.service import user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db)):
    return user_service.list_all(db)


# Declared before /{user_id} so "enabled" is not parsed as an id
@router.get("/enabled", response_model=List[UserResponse])
def list_enabled_users(db: Session = Depends(get_db)):
    return user_service.list_enabled(db)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_service.get(db, user_id)


@router.patch("/{user_id}/status", response_model=UserResponse)
def update_user_status(
    user_id: int,
    enabled: bool = Query(...),
    db: Session = Depends(get_db),
):
    user = user_service.update_status(db, user_id, enabled)
    db.commit()
    return user


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user_service.delete(db, user_id)
    db.commit()
    return Response(status_code=204)
