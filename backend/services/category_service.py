from sqlalchemy import asc, func
from sqlalchemy.orm import Session

from backend.models import Budget, Category, Transaction
from backend.schemas.category_schemas import CategoryOut, CreateCategoryRequest, UpdateCategoryRequest
from backend.utils.exceptions import BusinessRuleViolationException, ConflictException, NotFoundException
from backend.utils.logger import get_logger

logger = get_logger("categories")

# Seeded for every new user, flagged is_default so they cannot be deleted
DEFAULT_CATEGORIES = [
    {"name": "Salary", "color": "#10b981", "description": "Regular income"},
    {"name": "Food And Drink", "color": "#3b82f6", "description": None},
    {"name": "Transportation", "color": "#0ea5e9", "description": None},
    {"name": "Rent And Utilities", "color": "#d97706", "description": None},
    {"name": "Entertainment", "color": "#f59e0b", "description": None},
    {"name": "Medical", "color": "#e11d48", "description": None},
    {"name": "Personal Care", "color": "#f472b6", "description": None},
    {"name": "General Merchandise", "color": "#8b5cf6", "description": None},
]


def get_owned_category(db: Session, category_id: int, user_id: int) -> Category:
    category = db.query(Category).filter_by(id=category_id, user_id=user_id).first()
    if not category:
        raise NotFoundException("Category", category_id)
    return category


def _name_taken(db: Session, user_id: int, name: str, exclude_id: int = None) -> bool:
    query = db.query(Category).filter(
        Category.user_id == user_id,
        func.lower(Category.name) == name.lower(),
    )
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    return query.first() is not None


def seed_default_categories(db: Session, user_id: int) -> int:
    """Add the default categories the user does not have yet. Returns how many were added."""
    added = 0
    for cat in DEFAULT_CATEGORIES:
        if _name_taken(db, user_id, cat["name"]):
            continue
        db.add(Category(
            user_id=user_id,
            name=cat["name"],
            description=cat["description"],
            color=cat["color"],
            is_default=True,
        ))
        added += 1
    db.flush()
    return added


def get_categories(db: Session, user_id: int):
    categories = (
        db.query(Category)
        .filter_by(user_id=user_id)
        .order_by(asc(Category.name))
        .all()
    )
    return [CategoryOut.model_validate(c) for c in categories]


def get_category(db: Session, category_id: int, user_id: int) -> CategoryOut:
    return CategoryOut.model_validate(get_owned_category(db, category_id, user_id))


def create_category(db: Session, req: CreateCategoryRequest, user_id: int) -> CategoryOut:
    if _name_taken(db, user_id, req.name):
        raise ConflictException("Category", "name already exists")

    category = Category(
        user_id=user_id,
        name=req.name,
        description=req.description,
        color=req.color,
        is_default=False,
    )
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info(f"Category {category.id} created for user {user_id}")
    return CategoryOut.model_validate(category)


def update_category(db: Session, category_id: int, req: UpdateCategoryRequest, user_id: int) -> CategoryOut:
    category = get_owned_category(db, category_id, user_id)

    if _name_taken(db, user_id, req.name, exclude_id=category_id):
        raise ConflictException("Category", "name already exists")

    category.name = req.name
    category.description = req.description
    category.color = req.color

    db.commit()
    db.refresh(category)
    return CategoryOut.model_validate(category)


def delete_category(db: Session, category_id: int, user_id: int):
    category = get_owned_category(db, category_id, user_id)

    if db.query(Transaction.id).filter_by(category_id=category.id).first():
        raise BusinessRuleViolationException(
            "CATEGORY_HAS_TRANSACTIONS",
            "Category cannot be deleted because it has associated transactions",
        )
    if db.query(Budget.id).filter_by(category_id=category.id).first():
        raise BusinessRuleViolationException(
            "CATEGORY_HAS_BUDGETS",
            "Category cannot be deleted because it has associated budgets",
        )
    if category.is_default:
        raise BusinessRuleViolationException(
            "DEFAULT_CATEGORY_READONLY",
            "Default categories cannot be deleted",
        )

    db.delete(category)
    db.commit()
    logger.info(f"Category {category_id} deleted for user {user_id}")
