# masterxp/task_tracker.py
"""
Task service: every todo operation goes through here so routes never touch
the session directly. Completion changes run through the completion gate
and any XP it yields is granted via leveling.add_xp.
"""

from flask import current_app

from . import store
from .completion import toggle
from .errors import NotFound
from .leveling import add_xp
from .models import Task


def _owned_task(subject_id, task_id):
    task = store.get_task(subject_id, task_id)
    if task is None:
        raise NotFound("todo not found")
    return task


def add_task(subject_id: str, text: str, date):
    """Create an incomplete, unawarded task for the given day."""
    store.get_or_create_account(subject_id)
    task = Task(subject_id=subject_id, text=text, date=date, completed=False, xp_awarded=False)
    return store.save_task(task)


def get_tasks(subject_id: str, date):
    return store.list_tasks(subject_id, date)


def update_task(subject_id: str, task_id: str, patch: dict):
    """
    Apply a whitelisted patch. Returns (task, account, xp_delta).
    xp_awarded can only be switched on here; it never earns XP by itself.
    """
    task = _owned_task(subject_id, task_id)
    # make sure no account insert commits halfway through the award below
    store.get_or_create_account(subject_id)

    if "text" in patch:
        task.text = patch["text"]

    xp_delta = 0
    if "completed" in patch:
        # the gate judges the stored state, before this patch's xp_awarded flag
        state, xp_delta = toggle(task, patch["completed"])
        if xp_delta > 0 and not store.claim_award(task):
            # another request already earned this task's XP
            current_app.logger.info("todo %s already awarded, no xp granted", task.id)
            xp_delta = 0
        task.completed = state.completed
        if state.xp_awarded:
            task.xp_awarded = True

    if patch.get("xp_awarded") is True:
        task.xp_awarded = True

    if xp_delta > 0:
        # the pending task change commits together with the grant
        account = add_xp(subject_id, xp_delta)
    else:
        store.save_task(task)
        account = store.get_or_create_account(subject_id)

    current_app.logger.debug(
        "updated todo %s for %s (completed=%s awarded=%s delta=%s)",
        task.id, subject_id, task.completed, task.xp_awarded, xp_delta,
    )
    return task, account, xp_delta


def delete_task(subject_id: str, task_id: str):
    task = _owned_task(subject_id, task_id)
    store.delete_task(task)


def clear_completed(subject_id: str, date):
    """Delete the day's completed tasks. Returns how many were removed."""
    done = [t for t in store.list_tasks(subject_id, date) if t.completed]
    if not done:
        return 0
    return store.delete_tasks(done)


def daily_progress(tasks):
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    percent = int(completed * 100 / total + 0.5) if total else 0
    return {"total": total, "completed": completed, "percent": percent}
