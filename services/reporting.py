"""
Reporting service for dashboard figures and valuation tables.
Returns plain dictionaries for summary cards and pandas DataFrames for tables.
"""

import logging
from typing import Dict, List, Optional, Union

import pandas as pd

from models import TransactionKind
from repositories import CategoryRepository, ProductRepository, TransactionRepository
from services.inventory import InventoryService
from services.stock import current_stock, is_low_stock
from services.valuation import CostingMethod, DateLike, valuate

logger = logging.getLogger(__name__)

VALUATION_COLUMNS = [
    'product_id', 'sku', 'name', 'entries', 'exits',
    'remaining_stock', 'total_cost', 'average_cost', 'unsatisfied_quantity',
]

TRANSACTION_COLUMNS = ['id', 'date', 'kind', 'quantity', 'unit_cost', 'total', 'notes']


class ReportingService:
    """Read-only aggregates over the catalog and stock movements."""

    @staticmethod
    def dashboard_summary() -> Dict:
        """
        Headline figures for the dashboard.

        Returns:
            Dictionary with catalog counts, movement totals and the
            inventory value at sale price
        """
        products = ProductRepository.get_all()
        categories = CategoryRepository.get_all()
        transactions = TransactionRepository.list_all()

        by_product: Dict[int, list] = {}
        for tx in transactions:
            by_product.setdefault(tx.product_id, []).append(tx)

        inventory_value = 0.0
        low_stock = 0
        for product in products:
            history = by_product.get(product.id, [])
            inventory_value += current_stock(history) * product.price
            if is_low_stock(product, history):
                low_stock += 1

        total_entries = sum(tx.quantity for tx in transactions if tx.kind == TransactionKind.ENTRY)
        total_exits = sum(tx.quantity for tx in transactions if tx.kind == TransactionKind.EXIT)

        return {
            'total_products': len(products),
            'total_categories': len(categories),
            'low_stock_products': low_stock,
            'total_entries': round(total_entries, 4),
            'total_exits': round(total_exits, 4),
            'inventory_value': round(inventory_value, 2),
        }

    @staticmethod
    def recent_transactions(limit: int = 5) -> List:
        """Most recent transactions, newest date first."""
        transactions = TransactionRepository.list_all()
        transactions.sort(key=lambda tx: tx.transaction_date, reverse=True)
        return transactions[:limit]

    @staticmethod
    def top_stock_products(limit: int = 5) -> List[Dict]:
        """Products with the highest stock."""
        stock_levels = InventoryService.get_stock_levels()
        rows = [
            {
                'product_id': product.id,
                'name': product.name,
                'stock': stock_levels.get(product.id, 0.0),
                'min_stock': product.min_stock,
            }
            for product in ProductRepository.get_all()
        ]
        rows.sort(key=lambda row: row['stock'], reverse=True)
        return rows[:limit]

    @staticmethod
    def category_distribution() -> List[Dict]:
        """Total stock per category. Categories without stock are left out."""
        distribution = []
        for category in CategoryRepository.get_all():
            total = sum(item['stock'] for item in InventoryService.get_category_stock(category.id))
            if total > 0:
                distribution.append({'category_id': category.id, 'name': category.name, 'stock': total})
        return distribution

    @staticmethod
    def valuation_report(
        method: Union[CostingMethod, str],
        start_date: DateLike,
        end_date: DateLike
    ) -> pd.DataFrame:
        """
        Valuation of every product over one window.

        Returns:
            DataFrame with one row per product (see VALUATION_COLUMNS)
        """
        method = CostingMethod.parse(method)
        transactions = TransactionRepository.list_all()

        rows = []
        for product in ProductRepository.get_all():
            result = valuate(transactions, method, start_date, end_date, product_id=product.id)
            figures = result.to_dict()
            rows.append({
                'product_id': product.id,
                'sku': product.sku,
                'name': product.name,
                'entries': figures['entries'],
                'exits': figures['exits'],
                'remaining_stock': figures['remaining_stock'],
                'total_cost': figures['total_cost'],
                'average_cost': figures['average_cost'],
                'unsatisfied_quantity': figures['unsatisfied_quantity'],
            })
            if result.has_unsatisfied_exits:
                logger.warning(
                    f"Valuation of {product.sku} dropped {result.unsatisfied_quantity:g} unmatched exit units"
                )

        return pd.DataFrame(rows, columns=VALUATION_COLUMNS)

    @staticmethod
    def transactions_frame(
        product_id: int,
        start_date: DateLike,
        end_date: DateLike,
        kind: Optional[Union[TransactionKind, str]] = None
    ) -> pd.DataFrame:
        """Window transactions of a product as a table, optionally one kind only."""
        transactions = InventoryService.get_product_transactions(product_id, start_date, end_date)
        if kind is not None:
            kind = TransactionKind(kind)
            transactions = [tx for tx in transactions if tx.kind == kind]

        df = pd.DataFrame(
            [
                {
                    'id': tx.id,
                    'date': tx.transaction_date,
                    'kind': tx.kind.value,
                    'quantity': tx.quantity,
                    'unit_cost': tx.unit_cost,
                    'notes': tx.notes,
                }
                for tx in transactions
            ],
            columns=[c for c in TRANSACTION_COLUMNS if c != 'total'],
        )
        df['total'] = df['quantity'] * df['unit_cost']
        return df[TRANSACTION_COLUMNS]
