import threading

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from bookshop.data.database import make_engine
from bookshop.data.models.category import CategoryModel
from bookshop.data.transaction import run_in_transaction
from bookshop.domain.errors import TransactionFailure, TransactionCancelled


class FailingCommitSession(Session):
    def commit(self):
        raise RuntimeError("commit transaction failed")


class FailingRollbackSession(Session):
    def rollback(self):
        raise RuntimeError("rollback transaction failed")


def _add_category(name):
    def work(db):
        db.add(CategoryModel(name=name))
        db.flush()
        return name

    return work


def _category_names(session_factory):
    with session_factory() as s:
        return list(s.execute(select(CategoryModel.name)).scalars())


def test_success_commits(session_factory):
    assert run_in_transaction(session_factory, _add_category("Poetry")) == "Poetry"
    assert _category_names(session_factory) == ["Poetry"]


def test_failing_work_rolls_back(session_factory):
    def work(db):
        _add_category("Poetry")(db)
        raise ValueError("boom")

    with pytest.raises(TransactionFailure) as exc:
        run_in_transaction(session_factory, work)

    assert str(exc.value) == "failed executing transaction: boom"
    assert isinstance(exc.value.cause, ValueError)
    assert _category_names(session_factory) == []


def test_failing_commit_leaves_nothing_behind(db_engine, session_factory):
    failing = sessionmaker(bind=db_engine, class_=FailingCommitSession)

    with pytest.raises(TransactionFailure) as exc:
        run_in_transaction(failing, _add_category("Poetry"))

    assert str(exc.value) == "failed committing transaction: commit transaction failed"
    assert _category_names(session_factory) == []


def test_failing_rollback_is_reported_instead_of_work_error(db_engine, session_factory):
    failing = sessionmaker(bind=db_engine, class_=FailingRollbackSession)

    def work(db):
        _add_category("Poetry")(db)
        raise ValueError("boom")

    with pytest.raises(TransactionFailure) as exc:
        run_in_transaction(failing, work)

    assert str(exc.value) == "failed rolling back transaction: rollback transaction failed"
    assert isinstance(exc.value.cause, RuntimeError)
    #closing the session still discards the writes
    assert _category_names(session_factory) == []


def test_failing_begin(tmp_path):
    broken = sessionmaker(bind=make_engine(f"sqlite:///{tmp_path / 'missing' / 'db.sqlite'}"))
    called = []

    with pytest.raises(TransactionFailure) as exc:
        run_in_transaction(broken, lambda db: called.append(db))

    assert str(exc.value).startswith("failed beginning transaction")
    assert called == []


def test_cancelled_before_commit_rolls_back(session_factory):
    cancel = threading.Event()

    def work(db):
        _add_category("Poetry")(db)
        cancel.set()

    with pytest.raises(TransactionCancelled):
        run_in_transaction(session_factory, work, cancel_event=cancel)

    assert _category_names(session_factory) == []


def test_not_cancelled_event_commits(session_factory):
    run_in_transaction(session_factory, _add_category("Poetry"), cancel_event=threading.Event())
    assert _category_names(session_factory) == ["Poetry"]


def test_interrupt_rolls_back_and_propagates(session_factory):
    def work(db):
        _add_category("Poetry")(db)
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        run_in_transaction(session_factory, work)

    assert _category_names(session_factory) == []
