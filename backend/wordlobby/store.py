"""Document store with optimistic transactions.

Documents live in the ``document`` table keyed by path. ``run_transaction`` reads
the current value, hands a private copy to an update function and commits the
result only if nobody else wrote the document in between; otherwise the update
function is run again against the fresh value.
"""

import copy
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional

from flask import current_app
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError

from wordlobby import db
from wordlobby.models import Document


class _Abort:
    def __repr__(self):
        return 'ABORT'


# Returned by a transaction body to leave the document untouched and report
# a non-committed transaction.
ABORT = _Abort()


@dataclass
class TransactionResult:
    committed: bool
    value: Optional[Any]

    @property
    def exists(self) -> bool:
        return self.value is not None


def get_document(path: str):
    row = db.session.execute(
        select(Document.value).where(Document.path == path)
    ).first()
    return copy.deepcopy(row.value) if row else None


def set_document(path: str, value) -> None:
    """Unconditionally overwrite (or create) the document at ``path``."""
    if not _overwrite(path, value):
        try:
            db.session.execute(insert(Document).values(path=path, value=value, version=1))
            db.session.commit()
            return
        except IntegrityError:
            # Created by another writer since our update missed it.
            db.session.rollback()
            _overwrite(path, value)
    db.session.commit()


def _overwrite(path: str, value) -> bool:
    result = db.session.execute(
        update(Document)
        .where(Document.path == path)
        .values(value=value, version=Document.version + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


def push_document(collection: str, value) -> str:
    """Create a new document under ``collection`` and return its generated key."""
    key = uuid.uuid4().hex
    db.session.execute(
        insert(Document).values(path=f"{collection}/{key}", value=value, version=1)
    )
    db.session.commit()
    return key


def run_transaction(path: str, update_fn: Callable[[Any], Any]) -> TransactionResult:
    """Run ``update_fn`` against the current value of ``path`` and commit it.

    ``update_fn`` receives a copy of the current value (``None`` when the
    document does not exist) and returns the new value, ``None`` to delete,
    or ``ABORT``. It may be called several times and must not have side
    effects beyond its argument.
    """
    max_retries = int(current_app.config.get('STORE_TRANSACTION_MAX_RETRIES', 25))
    for attempt in range(1, max_retries + 1):
        row = db.session.execute(
            select(Document.value, Document.version).where(Document.path == path)
        ).first()
        current = copy.deepcopy(row.value) if row else None

        new_value = update_fn(current)
        if new_value is ABORT:
            db.session.rollback()
            return TransactionResult(committed=False, value=row.value if row else None)

        if _compare_and_set(path, row, new_value):
            db.session.commit()
            return TransactionResult(committed=True, value=copy.deepcopy(new_value))

        db.session.rollback()
        current_app.logger.info(f"[txn-retry] path={path} attempt={attempt}")

    current_app.logger.warning(f"[txn-giveup] path={path} retries={max_retries}")
    return TransactionResult(committed=False, value=None)


def _compare_and_set(path: str, row, new_value) -> bool:
    if row is None:
        if new_value is None:
            return True
        try:
            db.session.execute(insert(Document).values(path=path, value=new_value, version=1))
        except IntegrityError:
            # Someone created the document after our read.
            return False
        return True

    if new_value is None:
        stmt = (
            delete(Document)
            .where(Document.path == path, Document.version == row.version)
            .execution_options(synchronize_session=False)
        )
    else:
        stmt = (
            update(Document)
            .where(Document.path == path, Document.version == row.version)
            .values(value=new_value, version=row.version + 1)
            .execution_options(synchronize_session=False)
        )
    return db.session.execute(stmt).rowcount == 1
