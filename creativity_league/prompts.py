"""Daily prompt rotation and daily submissions."""
import logging
import random
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from . import config
from .clock import VirtualClock, date_only, day_key
from .errors import ValidationError
from .models import DailyPromptState, Submission, User
from .storage import Storage

logger = logging.getLogger(__name__)


def new_prompt_set(now: datetime, rng: Optional[Any] = None) -> DailyPromptState:
    rng = rng or random.Random()
    prompts = [
        {"text": rng.choice(config.PROMPT_POOLS[points]), "points": points}
        for points in sorted(config.PROMPT_POOLS)
    ]
    return DailyPromptState(prompts=prompts, date=now, selected_prompt_index=None)


def load_or_rotate(clock: VirtualClock, storage: Storage, rng: Optional[Any] = None) -> DailyPromptState:
    now = clock.now()
    state = storage.load_daily_prompts()
    if state is not None and date_only(state.date) >= date_only(now):
        return state
    state = new_prompt_set(now, rng)
    storage.save_daily_prompts(state)
    logger.info("Rotated daily prompts for %s", date_only(now).isoformat())
    return state


def select_prompt(state: DailyPromptState, index: int, storage: Storage) -> DailyPromptState:
    if not 0 <= index < len(state.prompts):
        raise ValidationError("Unknown prompt")
    state.selected_prompt_index = index
    storage.save_daily_prompts(state)
    return state


def has_submitted_today(user: User, now: datetime) -> bool:
    key = day_key(now)
    return any(s.day_key == key and not s.is_weekly for s in user.submissions)


def submit_response(user: User, state: DailyPromptState, prompt_index: int, text: str,
                    clock: VirtualClock, storage: Storage,
                    attachments: Optional[List[str]] = None) -> Submission:
    """Record the answer to one of today's prompts and award its points."""
    now = clock.now()
    if has_submitted_today(user, now):
        raise ValidationError("You already submitted today.")
    if not 0 <= prompt_index < len(state.prompts):
        raise ValidationError("Unknown prompt")
    text = text.strip()
    if not text and not attachments:
        raise ValidationError("Please enter your response")

    prompt: Dict[str, Any] = state.prompts[prompt_index]
    submission = Submission(
        id=uuid.uuid4().hex,
        text=text,
        points=int(prompt["points"]),
        date=now,
        prompt_index=prompt_index,
        day_key=day_key(now),
        attachments=list(attachments or []),
    )
    user.submissions.append(submission)
    user.total_points += submission.points
    storage.save_user(user)
    return submission
