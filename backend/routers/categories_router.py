from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from backend.db import get_db
from backend.routers.dependencies import EntityId
from backend.schemas.category_schemas import CategoryOut, CreateCategoryRequest, UpdateCategoryRequest
from backend.services import category_service
from backend.utils.security import get_current_user_id

categories_router = APIRouter(prefix="/api/categories", tags=["categories"])


@categories_router.get("", response_model=List[CategoryOut])
def list_categories(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return category_service.get_categories(db, user_id)


@categories_router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: EntityId, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return category_service.get_category(db, category_id, user_id)


@categories_router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(body: CreateCategoryRequest, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return category_service.create_category(db, body, user_id)


@categories_router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: EntityId,
    body: UpdateCategoryRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return category_service.update_category(db, category_id, body, user_id)


@categories_router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: EntityId, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    category_service.delete_category(db, category_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
