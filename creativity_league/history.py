from typing import List, Optional

from .errors import ValidationError
from .models import Submission, User
from .storage import Storage

FILTER_TYPES = ("all", "daily", "weekly")


def filter_submissions(user: User, kind: str = "all", show_in_progress: bool = True,
                       query: str = "", newest_first: bool = True) -> List[Submission]:
    if kind not in FILTER_TYPES:
        raise ValidationError(f"Unknown filter: {kind}")
    needle = query.strip().lower()
    out = []
    for s in user.submissions:
        if kind == "weekly" and not s.is_weekly:
            continue
        if kind == "daily" and s.is_weekly:
            continue
        if not show_in_progress and s.is_in_progress:
            continue
        if needle and needle not in s.text.lower():
            continue
        out.append(s)
    out.sort(key=lambda s: s.date, reverse=newest_first)
    return out


def delete_submission(user: User, submission_id: str, storage: Storage) -> Optional[Submission]:
    for s in user.submissions:
        if s.id == submission_id:
            user.submissions.remove(s)
            user.total_points -= s.points
            storage.save_user(user)
            return s
    return None


def edit_profile(user: User, storage: Storage, username: str, avatar_ref: Optional[str] = None):
    user.username = username.strip() or user.username
    if avatar_ref is not None:
        user.avatar_ref = avatar_ref
    storage.save_user(user)
