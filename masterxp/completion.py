# masterxp/completion.py
"""
Completion gate: decides whether toggling a task earns XP.

A task earns XP the first time it becomes completed and never again,
however often it is unchecked and rechecked. Unchecking keeps the award.
"""

from collections import namedtuple

from .leveling import XP_PER_TASK

TaskState = namedtuple("TaskState", ["completed", "xp_awarded"])


def toggle(task, requested_completed):
    """
    Return (new_state, xp_delta) for a requested completion change.
    `task` is anything with `completed` and `xp_awarded` attributes.
    """
    completed = bool(task.completed)
    xp_awarded = bool(task.xp_awarded)

    if not requested_completed:
        return TaskState(completed=False, xp_awarded=xp_awarded), 0

    if not completed and not xp_awarded:
        return TaskState(completed=True, xp_awarded=True), XP_PER_TASK

    return TaskState(completed=True, xp_awarded=xp_awarded), 0
