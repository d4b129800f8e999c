"""Weekly task lifecycle: absent -> in progress -> completed, delete from either."""
import logging
import uuid
from typing import List, Optional

from . import config
from .clock import VirtualClock, week_key
from .errors import StateError, ValidationError
from .models import COMPLETION_MARKER, WEEKLY_PROMPT_INDEX, Submission, User, WeeklyTask
from .storage import Storage

logger = logging.getLogger(__name__)


def clamp_points(points) -> int:
    try:
        value = int(points)
    except (TypeError, ValueError):
        value = config.WEEKLY_POINTS_DEFAULT
    return max(config.WEEKLY_POINTS_MIN, min(config.WEEKLY_POINTS_MAX, value))


def load_current_task(clock: VirtualClock, storage: Storage) -> Optional[WeeklyTask]:
    # a task from another week stays on disk but is invisible
    task = storage.load_weekly_task()
    if task is None or task.week_key != week_key(clock.now()):
        return None
    return task


def create_task(user: User, text: str, points, clock: VirtualClock, storage: Storage) -> WeeklyTask:
    text = text.strip()
    if not text:
        raise ValidationError("Please enter a task description")
    if load_current_task(clock, storage) is not None:
        raise StateError("A weekly task already exists for this week")

    now = clock.now()
    task = WeeklyTask(
        id=uuid.uuid4().hex,
        task_text=text,
        points=clamp_points(points),
        created_date=now,
        week_key=week_key(now),
    )
    storage.save_weekly_task(task)

    # zero-point placeholder, replaced in place on completion
    user.submissions.append(Submission(
        id=task.id,
        text=task.task_text,
        points=0,
        date=task.created_date,
        prompt_index=WEEKLY_PROMPT_INDEX,
        day_key=task.week_key,
    ))
    storage.save_user(user)
    logger.info("Weekly task %s created for week %s", task.id, task.week_key)
    return task


def complete_task(user: User, completion_text: str, clock: VirtualClock, storage: Storage,
                  attachments: Optional[List[str]] = None) -> WeeklyTask:
    task = load_current_task(clock, storage)
    if task is None:
        raise StateError("No weekly task for this week")
    if task.is_completed:
        raise StateError("This week's task is already completed")
    completion_text = completion_text.strip()
    if not completion_text and not attachments:
        raise ValidationError("Please describe what you did")

    now = clock.now()
    done = task.completed(completion_text, now, attachments)
    storage.save_weekly_task(done)

    entry = Submission(
        id=done.id,
        text=f"{done.task_text}{COMPLETION_MARKER}{completion_text}",
        points=done.points,
        date=now,
        prompt_index=WEEKLY_PROMPT_INDEX,
        day_key=done.week_key,
        attachments=list(done.attachments),
    )
    replaced = False
    for i, s in enumerate(user.submissions):
        if s.id == done.id:
            user.submissions[i] = entry
            replaced = True
    if not replaced:
        user.submissions.append(entry)
    user.total_points += done.points
    storage.save_user(user)
    logger.info("Weekly task %s completed, +%d", done.id, done.points)
    return done


def delete_task(user: User, clock: VirtualClock, storage: Storage) -> Optional[WeeklyTask]:
    task = load_current_task(clock, storage)
    if task is None:
        return None
    kept, removed = [], []
    for s in user.submissions:
        if s.prompt_index == WEEKLY_PROMPT_INDEX and s.day_key == task.week_key:
            removed.append(s)
        else:
            kept.append(s)
    user.submissions = kept
    # only points still on the log are taken back
    user.total_points -= sum(s.points for s in removed)
    storage.save_user(user)
    storage.delete_weekly_task()
    logger.info("Weekly task %s deleted", task.id)
    return task
