"""
Product Repository - data access layer for Product model.
Optimized with optional session parameter for transaction reuse.
"""

from typing import Optional, List
from sqlmodel import Session, select

from db_engine import get_engine
from models import Product

_UPDATABLE_FIELDS = ('name', 'description', 'category_id', 'sku', 'min_stock', 'price', 'image', 'barcode')


class ProductRepository:
    """Repository for Product CRUD operations."""

    @staticmethod
    def add(product: Product, session: Optional[Session] = None) -> Product:
        """
        Add a new product to the database.

        Args:
            product: Unsaved Product object
            session: Optional existing session for transaction reuse

        Returns:
            Created Product object
        """
        def _create_product(sess: Session) -> Product:
            try:
                sess.add(product)
                sess.commit()
                sess.refresh(product)
            except Exception:
                sess.rollback()
                raise
            return product

        if session is not None:
            return _create_product(session)
        else:
            with Session(get_engine()) as session:
                return _create_product(session)

    @staticmethod
    def get_all(session: Optional[Session] = None) -> List[Product]:
        """Retrieve all products from the database."""
        def _get_all(sess: Session) -> List[Product]:
            statement = select(Product).order_by(Product.id)
            return list(sess.exec(statement).all())

        if session is not None:
            return _get_all(session)
        else:
            with Session(get_engine()) as session:
                return _get_all(session)

    @staticmethod
    def get_by_id(product_id: int, session: Optional[Session] = None) -> Optional[Product]:
        """Retrieve a product by its ID."""
        def _get_by_id(sess: Session) -> Optional[Product]:
            return sess.get(Product, product_id)

        if session is not None:
            return _get_by_id(session)
        else:
            with Session(get_engine()) as session:
                return _get_by_id(session)

    @staticmethod
    def get_by_sku(sku: str, session: Optional[Session] = None) -> Optional[Product]:
        """Retrieve a product by SKU (exact match)."""
        def _get_by_sku(sess: Session) -> Optional[Product]:
            statement = select(Product).where(Product.sku == sku)
            return sess.exec(statement).first()

        if session is not None:
            return _get_by_sku(session)
        else:
            with Session(get_engine()) as session:
                return _get_by_sku(session)

    @staticmethod
    def get_by_category(category_id: int, session: Optional[Session] = None) -> List[Product]:
        """Retrieve all products in a category."""
        def _get_by_category(sess: Session) -> List[Product]:
            statement = select(Product).where(Product.category_id == category_id).order_by(Product.id)
            return list(sess.exec(statement).all())

        if session is not None:
            return _get_by_category(session)
        else:
            with Session(get_engine()) as session:
                return _get_by_category(session)

    @staticmethod
    def update(product_id: int, session: Optional[Session] = None, **changes) -> Optional[Product]:
        """
        Update an existing product.
        Every field passed is written as given, None included.

        Returns:
            Updated Product object or None if not found
        """
        unknown = set(changes) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise TypeError(f"Unknown product fields: {sorted(unknown)}")

        def _update(sess: Session) -> Optional[Product]:
            product = sess.get(Product, product_id)
            if product:
                for name, value in changes.items():
                    setattr(product, name, value)
                sess.add(product)
                sess.commit()
                sess.refresh(product)
                return product
            return None

        if session is not None:
            return _update(session)
        else:
            with Session(get_engine()) as session:
                return _update(session)

    @staticmethod
    def delete(product_id: int, session: Optional[Session] = None) -> bool:
        """
        Delete a product by its ID.

        Returns:
            True if deleted, False if not found
        """
        def _delete(sess: Session) -> bool:
            try:
                product = sess.get(Product, product_id)
                if product:
                    sess.delete(product)
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
