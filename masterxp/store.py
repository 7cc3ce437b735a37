# masterxp/store.py
"""
Persistence helpers over the shared SQLAlchemy `db` handle.

Accounts:
- get_account(subject_id) -> Account | None
- create_account(subject_id) -> Account (xp=0, level=1)
- get_or_create_account(subject_id) -> Account
- save_account(account) -> Account
- increment_xp(subject_id, amount) -> Account   atomic, uncommitted

Tasks (always scoped to their owner):
- get_task(subject_id, task_id) -> Task | None
- claim_award(task) -> bool                      atomic, uncommitted
- save_task(task) -> Task
- delete_task(task)
- delete_tasks(tasks) -> int
- list_tasks(subject_id, date) -> list[Task]

Transactions:
- commit(), rollback()
"""

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from .extensions import db
from .leveling import level_for_xp
from .models import Account, Task


def rollback():
    db.session.rollback()


def commit():
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def get_account(subject_id):
    return Account.query.filter_by(subject_id=subject_id).first()


def create_account(subject_id):
    account = Account(subject_id=subject_id, xp=0)
    db.session.add(account)
    commit()
    current_app.logger.info("created account for %s", subject_id)
    return account


def get_or_create_account(subject_id):
    """
    Return the account for subject_id, creating it on first sight.
    Callers never need to tell creation from lookup.
    """
    account = get_account(subject_id)
    if account is not None:
        return account
    try:
        return create_account(subject_id)
    except IntegrityError:
        # another request inserted the same subject first
        current_app.logger.debug("concurrent create for %s, re-reading", subject_id)
        return get_account(subject_id)


def save_account(account):
    account.level = level_for_xp(account.xp)
    db.session.add(account)
    commit()
    return account


def increment_xp(subject_id, amount):
    """
    Add `amount` to the stored xp in one UPDATE and re-derive the level.
    The row stays write-locked until the caller commits.
    """
    db.session.execute(
        update(Account)
        .where(Account.subject_id == subject_id)
        .values(xp=Account.xp + amount),
        execution_options={"synchronize_session": False},
    )
    account = Account.query.filter_by(subject_id=subject_id).populate_existing().one()
    account.level = level_for_xp(account.xp)
    return account


def get_task(subject_id, task_id):
    if not task_id:
        return None
    task = db.session.get(Task, task_id)
    if task is None or task.subject_id != subject_id:
        return None
    return task


def claim_award(task):
    """
    Mark the task completed and awarded unless the stored row is already awarded.
    True only for the one caller whose UPDATE changed the row.
    """
    result = db.session.execute(
        update(Task)
        .where(Task.id == task.id, Task.xp_awarded.is_(False))
        .values(completed=True, xp_awarded=True),
        execution_options={"synchronize_session": False},
    )
    return result.rowcount == 1


def save_task(task):
    db.session.add(task)
    commit()
    return task


def delete_task(task):
    db.session.delete(task)
    commit()


def delete_tasks(tasks):
    for task in tasks:
        db.session.delete(task)
    commit()
    return len(tasks)


def list_tasks(subject_id, date):
    return (
        Task.query.filter_by(subject_id=subject_id, date=date)
        .order_by(Task.created_at.asc(), Task.id.asc())
        .all()
    )
