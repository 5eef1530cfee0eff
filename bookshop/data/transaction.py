# bookshop/data/transaction.py
import threading
from typing import Callable, TypeVar

from sqlalchemy.orm import Session, sessionmaker

from bookshop.domain.errors import TransactionFailure, TransactionCancelled
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def run_in_transaction(
    session_factory: sessionmaker,
    work: Callable[[Session], T],
    cancel_event: threading.Event | None = None,
) -> T:
    """
    Runs `work` against one session inside a single transaction.

    - work succeeds -> commit; a failing commit raises TransactionFailure
      wrapping the commit error
    - work fails -> rollback; a failing rollback raises TransactionFailure
      wrapping the rollback error, otherwise the work error is wrapped
    - cancel_event set before commit -> rollback and TransactionCancelled

    Every failure path leaves the database as it was before the call.
    """
    db = session_factory()
    try:
        try:
            db.begin()
            #forces connection checkout so a dead database fails here and not inside work
            db.connection()
        except Exception as e:
            raise TransactionFailure("failed beginning transaction", e) from e

        try:
            result = work(db)
            if cancel_event is not None and cancel_event.is_set():
                raise TransactionCancelled("transaction cancelled before commit")
        except TransactionCancelled:
            _rollback(db)
            raise
        except Exception as e:
            _rollback(db)
            raise TransactionFailure("failed executing transaction", e) from e
        except BaseException:
            #interrupts and worker time limits still must not leave writes behind
            _rollback(db)
            raise

        try:
            db.commit()
        except Exception as e:
            raise TransactionFailure("failed committing transaction", e) from e

        return result
    finally:
        db.close()


def _rollback(db: Session) -> None:
    try:
        db.rollback()
    except Exception as e:
        logger.error(f"Rollback failed: {e}")
        raise TransactionFailure("failed rolling back transaction", e) from e
