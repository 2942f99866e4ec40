"""Category service - per-user task category labels."""

from sqlalchemy.orm import Session

from syariahos.db.enums import DEFAULT_CATEGORIES
from syariahos.db.models import Category


def seed_default_categories(db: Session, user_id: int) -> list[Category]:
    """Create the six default categories for a user (flush only)."""
    categories = [Category(user_id=user_id, name=name) for name in DEFAULT_CATEGORIES]
    db.add_all(categories)
    db.flush()
    return categories


def list_categories(db: Session, user_id: int) -> list[Category]:
    return (
        db.query(Category)
        .filter(Category.user_id == user_id)
        .order_by(Category.id)
        .all()
    )
