"""
Transaction Repository - data access layer for Transaction model.
Append-only: transactions are never updated or deleted once stored.
Optimized with optional session parameter for transaction reuse.
"""

import logging
from typing import Callable, List, Optional
from datetime import date
from sqlmodel import Session, select

from db_engine import get_engine
from models import Transaction

logger = logging.getLogger(__name__)

TransactionListener = Callable[[Transaction], None]

# Change listeners, notified after each committed append
_listeners: List[TransactionListener] = []


class TransactionRepository:
    """Repository for appending and reading Transaction records."""

    @staticmethod
    def append(transaction: Transaction, session: Optional[Session] = None) -> Transaction:
        """
        Persist a new transaction and notify subscribers.

        Args:
            transaction: Unsaved Transaction object
            session: Optional existing session for transaction reuse

        Returns:
            The stored Transaction with its id assigned
        """
        def _append(sess: Session) -> Transaction:
            try:
                sess.add(transaction)
                sess.commit()
                sess.refresh(transaction)
            except Exception:
                sess.rollback()
                raise
            return transaction

        if session is not None:
            stored = _append(session)
        else:
            with Session(get_engine(), expire_on_commit=False) as session:
                stored = _append(session)

        TransactionRepository._notify(stored)
        return stored

    @staticmethod
    def list(product_id: int, session: Optional[Session] = None) -> List[Transaction]:
        """
        Retrieve all transactions for a product in insertion order.

        Args:
            product_id: Product ID to look up
            session: Optional existing session for transaction reuse

        Returns:
            List of Transaction objects
        """
        def _list(sess: Session) -> List[Transaction]:
            statement = (
                select(Transaction)
                .where(Transaction.product_id == product_id)
                .order_by(Transaction.id)
            )
            return list(sess.exec(statement).all())

        if session is not None:
            return _list(session)
        else:
            with Session(get_engine()) as session:
                return _list(session)

    @staticmethod
    def list_between(
        product_id: int,
        start_date: date,
        end_date: date,
        session: Optional[Session] = None
    ) -> List[Transaction]:
        """Transactions of a product dated within [start_date, end_date], in insertion order."""
        def _list_between(sess: Session) -> List[Transaction]:
            statement = (
                select(Transaction)
                .where(
                    Transaction.product_id == product_id,
                    Transaction.transaction_date >= start_date,
                    Transaction.transaction_date <= end_date,
                )
                .order_by(Transaction.id)
            )
            return list(sess.exec(statement).all())

        if session is not None:
            return _list_between(session)
        else:
            with Session(get_engine()) as session:
                return _list_between(session)

    @staticmethod
    def list_all(session: Optional[Session] = None) -> List[Transaction]:
        """Retrieve every transaction in insertion order."""
        def _list_all(sess: Session) -> List[Transaction]:
            statement = select(Transaction).order_by(Transaction.id)
            return list(sess.exec(statement).all())

        if session is not None:
            return _list_all(session)
        else:
            with Session(get_engine()) as session:
                return _list_all(session)

    @staticmethod
    def get_by_id(transaction_id: int, session: Optional[Session] = None) -> Optional[Transaction]:
        """Retrieve a transaction by its ID, or None if not found."""
        def _get_by_id(sess: Session) -> Optional[Transaction]:
            return sess.get(Transaction, transaction_id)

        if session is not None:
            return _get_by_id(session)
        else:
            with Session(get_engine()) as session:
                return _get_by_id(session)

    @staticmethod
    def exists_for_product(product_id: int, session: Optional[Session] = None) -> bool:
        """Check whether a product has any recorded transaction."""
        def _exists(sess: Session) -> bool:
            statement = select(Transaction.id).where(Transaction.product_id == product_id).limit(1)
            return sess.exec(statement).first() is not None

        if session is not None:
            return _exists(session)
        else:
            with Session(get_engine()) as session:
                return _exists(session)

    # ==================== Change subscription ====================

    @staticmethod
    def subscribe(listener: TransactionListener) -> Callable[[], None]:
        """
        Register a listener called with each appended transaction.

        Returns:
            Callable that removes the listener
        """
        _listeners.append(listener)

        def _unsubscribe():
            if listener in _listeners:
                _listeners.remove(listener)

        return _unsubscribe

    @staticmethod
    def clear_listeners():
        """Remove every registered listener."""
        _listeners.clear()

    @staticmethod
    def _notify(transaction: Transaction):
        for listener in list(_listeners):
            try:
                listener(transaction)
            except Exception as e:
                # The write is already committed; a failing listener must not undo it
                logger.error(f"Transaction listener {listener!r} failed: {e}")
