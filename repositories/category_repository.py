"""
Category Repository - data access layer for Category model.
"""

from typing import Optional, List
from sqlmodel import Session, select

from db_engine import get_engine
from models import Category


class CategoryRepository:
    """Repository for Category CRUD operations."""

    @staticmethod
    def add(name: str, description: str = "", session: Optional[Session] = None) -> Category:
        """Add a new category to the database."""
        def _create_category(sess: Session) -> Category:
            category = Category(name=name, description=description)
            sess.add(category)
            sess.commit()
            sess.refresh(category)
            return category

        if session is not None:
            return _create_category(session)
        else:
            with Session(get_engine()) as session:
                return _create_category(session)

    @staticmethod
    def get_all(session: Optional[Session] = None) -> List[Category]:
        """Retrieve all categories from the database."""
        def _get_all(sess: Session) -> List[Category]:
            statement = select(Category).order_by(Category.id)
            return list(sess.exec(statement).all())

        if session is not None:
            return _get_all(session)
        else:
            with Session(get_engine()) as session:
                return _get_all(session)

    @staticmethod
    def get_by_id(category_id: int, session: Optional[Session] = None) -> Optional[Category]:
        """Retrieve a category by its ID."""
        def _get_by_id(sess: Session) -> Optional[Category]:
            return sess.get(Category, category_id)

        if session is not None:
            return _get_by_id(session)
        else:
            with Session(get_engine()) as session:
                return _get_by_id(session)

    @staticmethod
    def update(
        category_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        session: Optional[Session] = None
    ) -> Optional[Category]:
        """
        Update an existing category.
        Only updates fields that are provided (not None).

        Returns:
            Updated Category object or None if not found
        """
        def _update(sess: Session) -> Optional[Category]:
            category = sess.get(Category, category_id)
            if category:
                if name is not None:
                    category.name = name
                if description is not None:
                    category.description = description
                sess.add(category)
                sess.commit()
                sess.refresh(category)
                return category
            return None

        if session is not None:
            return _update(session)
        else:
            with Session(get_engine()) as session:
                return _update(session)

    @staticmethod
    def delete(category_id: int, session: Optional[Session] = None) -> bool:
        """
        Delete a category by its ID.

        Returns:
            True if deleted, False if not found
        """
        def _delete(sess: Session) -> bool:
            try:
                category = sess.get(Category, category_id)
                if category:
                    sess.delete(category)
                    sess.commit()
                    return True
                return False
            except Exception:
                sess.rollback()
                raise

        if session is not None:
            return _delete(session)
        else:
            with Session(get_engine()) as session:
                return _delete(session)
