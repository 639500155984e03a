"""
Inventory service: catalog management, the stock movement write path and
valuation queries.

Exits are validated against current stock inside the same session that
appends them, so the sufficiency check and the write form one unit of work.
"""

import logging
import math
import uuid
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Union

from sqlmodel import Session

from config import get_settings
from db_engine import get_engine
from exceptions import (
    BusinessRuleViolation,
    DuplicateResourceError,
    InsufficientStockError,
    InvalidTransactionError,
    ResourceNotFoundError,
)
from models import Category, Product, Transaction, TransactionKind
from repositories import CategoryRepository, ProductRepository, TransactionRepository
from services.stock import current_stock, is_low_stock
from services.valuation import CostingMethod, DateLike, ValuationResult, as_date, filter_window, valuate

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _parse_kind(kind: Union[TransactionKind, str]) -> TransactionKind:
    try:
        return TransactionKind(kind)
    except ValueError:
        raise InvalidTransactionError(f"Unknown transaction kind: {kind!r}")


class InventoryService:
    """
    Entry point for the application shell.
    Wraps the repositories with catalog rules and stock validation.
    """

    # ==================== Categories ====================

    @staticmethod
    def add_category(name: str, description: str = "") -> Category:
        """Create a category."""
        if not name or not name.strip():
            raise BusinessRuleViolation("Category name is required.")
        category = CategoryRepository.add(name=name.strip(), description=description)
        logger.info(f"Added category {category.id} ({category.name})")
        return category

    @staticmethod
    def update_category(
        category_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> Category:
        """Update a category's name and/or description."""
        if name is not None:
            name = name.strip()
            if not name:
                raise BusinessRuleViolation("Category name is required.")
        category = CategoryRepository.update(category_id, name=name, description=description)
        if category is None:
            raise ResourceNotFoundError(f"Category {category_id} not found.")
        return category

    @staticmethod
    def delete_category(category_id: int) -> None:
        """Delete a category. Rejected while any product still belongs to it."""
        with Session(get_engine()) as session:
            if CategoryRepository.get_by_id(category_id, session=session) is None:
                raise ResourceNotFoundError(f"Category {category_id} not found.")
            if ProductRepository.get_by_category(category_id, session=session):
                logger.warning(f"Refused to delete category {category_id}: in use by products")
                raise BusinessRuleViolation("Cannot delete category that is in use by products.")
            CategoryRepository.delete(category_id, session=session)
        logger.info(f"Deleted category {category_id}")

    # ==================== Products ====================

    @staticmethod
    def add_product(
        name: str,
        sku: Optional[str] = None,
        category_id: Optional[int] = None,
        min_stock: float = 0.0,
        price: float = 0.0,
        description: str = "",
        image: str = "",
        barcode: Optional[str] = None
    ) -> Product:
        """
        Create a product.

        Args:
            name: Product name
            sku: Stock keeping unit; generated when omitted or blank
            category_id: Optional owning category, must exist
            min_stock: Low stock threshold (inclusive)
            price: Sale price per unit

        Returns:
            Created Product object
        """
        if not name or not name.strip():
            raise BusinessRuleViolation("Product name is required.")
        if not _is_number(min_stock) or min_stock < 0:
            raise BusinessRuleViolation("Minimum stock must be a non-negative number.")
        if not _is_number(price) or price < 0:
            raise BusinessRuleViolation("Price must be a non-negative number.")

        sku = (sku or "").strip() or uuid.uuid4().hex[:12].upper()

        with Session(get_engine()) as session:
            if category_id is not None and CategoryRepository.get_by_id(category_id, session=session) is None:
                raise ResourceNotFoundError(f"Category {category_id} not found.")
            if ProductRepository.get_by_sku(sku, session=session) is not None:
                raise DuplicateResourceError(f"A product with SKU {sku} already exists.")

            product = ProductRepository.add(
                Product(
                    name=name.strip(),
                    sku=sku,
                    category_id=category_id,
                    min_stock=min_stock,
                    price=price,
                    description=description,
                    image=image,
                    barcode=barcode,
                ),
                session=session,
            )
        logger.info(f"Added product {product.id} (SKU {product.sku})")
        return product

    @staticmethod
    def update_product(
        product_id: int,
        name: Optional[str] = None,
        sku: Optional[str] = None,
        category_id: Optional[int] = None,
        min_stock: Optional[float] = None,
        price: Optional[float] = None,
        description: Optional[str] = None,
        image: Optional[str] = None,
        barcode: Optional[str] = None,
        clear_category: bool = False
    ) -> Product:
        """
        Update product fields. Same rules as add_product for name, SKU and category.

        Arguments left as None are unchanged. Pass clear_category=True to
        remove the product from its category.
        """
        if clear_category and category_id is not None:
            raise BusinessRuleViolation("Pass either category_id or clear_category, not both.")

        changes = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise BusinessRuleViolation("Product name is required.")
            changes['name'] = name
        if sku is not None:
            sku = sku.strip()
            if not sku:
                raise BusinessRuleViolation("SKU cannot be blank.")
            changes['sku'] = sku
        for field_name, value in (('min_stock', min_stock), ('price', price)):
            if value is not None:
                if not _is_number(value) or value < 0:
                    raise BusinessRuleViolation(f"{field_name} must be a non-negative number.")
                changes[field_name] = value
        for field_name, value in (('description', description), ('image', image), ('barcode', barcode)):
            if value is not None:
                changes[field_name] = value
        if category_id is not None:
            changes['category_id'] = category_id
        elif clear_category:
            changes['category_id'] = None

        with Session(get_engine()) as session:
            product = ProductRepository.get_by_id(product_id, session=session)
            if product is None:
                raise ResourceNotFoundError(f"Product {product_id} not found.")

            if sku is not None and sku != product.sku:
                if ProductRepository.get_by_sku(sku, session=session) is not None:
                    raise DuplicateResourceError(f"A product with SKU {sku} already exists.")
            if category_id is not None and CategoryRepository.get_by_id(category_id, session=session) is None:
                raise ResourceNotFoundError(f"Category {category_id} not found.")

            return ProductRepository.update(product_id, session=session, **changes)

    @staticmethod
    def delete_product(product_id: int) -> None:
        """Delete a product. Rejected once the product has any transaction."""
        with Session(get_engine()) as session:
            if ProductRepository.get_by_id(product_id, session=session) is None:
                raise ResourceNotFoundError(f"Product {product_id} not found.")
            if TransactionRepository.exists_for_product(product_id, session=session):
                logger.warning(f"Refused to delete product {product_id}: has transactions")
                raise BusinessRuleViolation("Cannot delete product that has transactions.")
            ProductRepository.delete(product_id, session=session)
        logger.info(f"Deleted product {product_id}")

    # ==================== Stock movements ====================

    @staticmethod
    def add_transaction(
        product_id: int,
        kind: Union[TransactionKind, str],
        quantity: float,
        unit_cost: float = 0.0,
        transaction_date: Optional[DateLike] = None,
        notes: str = ""
    ) -> Transaction:
        """
        Record an entry or exit.

        Args:
            product_id: Product the movement belongs to
            kind: "entry" or "exit"
            quantity: Units moved, must be positive
            unit_cost: Cost per unit, must be non-negative (entries only)
            transaction_date: Movement date, defaults to today
            notes: Free text

        Returns:
            The stored Transaction

        Raises:
            InvalidTransactionError: malformed quantity, cost or kind
            ResourceNotFoundError: unknown product
            InsufficientStockError: exit larger than current stock
        """
        kind = _parse_kind(kind)
        if not _is_number(quantity) or quantity <= 0:
            raise InvalidTransactionError("Quantity must be a positive number.")
        if not _is_number(unit_cost) or unit_cost < 0:
            raise InvalidTransactionError("Unit cost must be a non-negative number.")
        try:
            tx_date = as_date(transaction_date) if transaction_date is not None else date.today()
        except (TypeError, ValueError):
            raise InvalidTransactionError(f"Invalid transaction date: {transaction_date!r}")

        with Session(get_engine()) as session:
            if ProductRepository.get_by_id(product_id, session=session) is None:
                raise ResourceNotFoundError(f"Product {product_id} not found.")

            if kind == TransactionKind.EXIT:
                available = current_stock(TransactionRepository.list(product_id, session=session))
                if available < quantity:
                    logger.warning(
                        f"Rejected exit of {quantity:g} for product {product_id}: only {available:g} in stock"
                    )
                    raise InsufficientStockError(available=available, requested=quantity)

            transaction = TransactionRepository.append(
                Transaction(
                    product_id=product_id,
                    kind=kind,
                    quantity=quantity,
                    unit_cost=unit_cost,
                    transaction_date=tx_date,
                    notes=notes,
                ),
                session=session,
            )

        logger.info(
            f"Recorded {kind.value} of {quantity:g} for product {product_id} on {tx_date.isoformat()}"
        )
        return transaction

    # ==================== Stock queries ====================

    @staticmethod
    def get_product_stock(product_id: int) -> float:
        """Current net stock of a product over its whole history."""
        return current_stock(TransactionRepository.list(product_id))

    @staticmethod
    def get_category_stock(category_id: int) -> List[Dict]:
        """Stock of every product in a category."""
        with Session(get_engine()) as session:
            products = ProductRepository.get_by_category(category_id, session=session)
            return [
                {
                    'product_id': product.id,
                    'stock': current_stock(TransactionRepository.list(product.id, session=session)),
                }
                for product in products
            ]

    @staticmethod
    def get_stock_levels() -> Dict[int, float]:
        """Current stock keyed by product id, for every product in the catalog."""
        with Session(get_engine()) as session:
            products = ProductRepository.get_all(session=session)
            by_product = _group_by_product(TransactionRepository.list_all(session=session))
        return {product.id: current_stock(by_product.get(product.id, [])) for product in products}

    @staticmethod
    def get_low_stock_products() -> List[Product]:
        """Products whose stock is at or below their minimum."""
        with Session(get_engine()) as session:
            products = ProductRepository.get_all(session=session)
            by_product = _group_by_product(TransactionRepository.list_all(session=session))
        return [
            product for product in products
            if is_low_stock(product, by_product.get(product.id, []))
        ]

    @staticmethod
    def get_product_transactions(product_id: int, start_date: DateLike, end_date: DateLike) -> List[Transaction]:
        """Transactions of a product within [start_date, end_date], inclusive."""
        return filter_window(TransactionRepository.list(product_id), start_date, end_date)

    # ==================== Valuation ====================

    @staticmethod
    def calculate_inventory_cost(
        product_id: int,
        method: Optional[Union[CostingMethod, str]] = None,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
        strict: Optional[bool] = None
    ) -> ValuationResult:
        """
        Value a product's stock over a date window.

        Args:
            product_id: Product to value
            method: Costing method or tag; defaults to the configured method
            start_date: Window start (inclusive); defaults to the earliest date
            end_date: Window end (inclusive); defaults to today
            strict: Raise on unmatched exits; defaults to the configured value

        Returns:
            ValuationResult from the valuation engine
        """
        settings = get_settings()
        if method is None:
            method = settings.default_valuation_method
        if strict is None:
            strict = settings.strict_valuation
        if start_date is None:
            start_date = date.min
        if end_date is None:
            end_date = date.today()

        if ProductRepository.get_by_id(product_id) is None:
            raise ResourceNotFoundError(f"Product {product_id} not found.")

        transactions = TransactionRepository.list(product_id)
        return valuate(
            transactions,
            method,
            start_date,
            end_date,
            product_id=product_id,
            strict=strict,
        )


def _group_by_product(transactions: List[Transaction]) -> Dict[int, List[Transaction]]:
    grouped: Dict[int, List[Transaction]] = defaultdict(list)
    for tx in transactions:
        grouped[tx.product_id].append(tx)
    return grouped
