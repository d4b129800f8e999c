from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from . import config

WEEKLY_PROMPT_INDEX = -1
COMPLETION_MARKER = "\n\nCompletion: "


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass
class Submission:
    id: str
    text: str
    points: int
    date: datetime
    prompt_index: int
    # day key for daily prompts, week key for the weekly task
    day_key: str
    attachments: List[str] = field(default_factory=list)

    @property
    def is_weekly(self) -> bool:
        return self.prompt_index == WEEKLY_PROMPT_INDEX

    @property
    def is_in_progress(self) -> bool:
        return self.is_weekly and COMPLETION_MARKER not in self.text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "points": self.points,
            "date": _iso(self.date),
            "promptIndex": self.prompt_index,
            "dayKey": self.day_key,
            "attachments": list(self.attachments),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Submission":
        return cls(
            id=str(d["id"]),
            text=d["text"],
            points=int(d["points"]),
            date=_parse(d["date"]),
            prompt_index=int(d["promptIndex"]),
            day_key=d["dayKey"],
            attachments=list(d.get("attachments") or []),
        )


@dataclass
class WeeklyTask:
    id: str
    task_text: str
    points: int
    created_date: datetime
    week_key: str
    completion_text: Optional[str] = None
    completed_date: Optional[datetime] = None
    attachments: List[str] = field(default_factory=list)

    @property
    def is_completed(self) -> bool:
        return self.completion_text is not None and self.completed_date is not None

    def completed(self, text: str, when: datetime, attachments: Optional[List[str]] = None) -> "WeeklyTask":
        return replace(self, completion_text=text, completed_date=when,
                       attachments=list(attachments or []))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "taskText": self.task_text,
            "points": self.points,
            "createdDate": _iso(self.created_date),
            "completionText": self.completion_text,
            "completedDate": _iso(self.completed_date),
            "weekKey": self.week_key,
            "attachments": list(self.attachments),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WeeklyTask":
        return cls(
            id=str(d["id"]),
            task_text=d["taskText"],
            points=int(d.get("points", config.WEEKLY_POINTS_DEFAULT)),
            created_date=_parse(d["createdDate"]),
            week_key=d["weekKey"],
            completion_text=d.get("completionText"),
            completed_date=_parse(d.get("completedDate")),
            attachments=list(d.get("attachments") or []),
        )


@dataclass
class Competitor:
    name: str
    points: int
    daily_probability: float
    avatar_ref: Optional[str] = None
    # last instant catch-up ran for; only its date is compared
    last_update: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "avatarImagePath": self.avatar_ref,
            "points": self.points,
            "dailyProbability": self.daily_probability,
            "lastUpdate": _iso(self.last_update),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Competitor":
        return cls(
            name=d["name"],
            points=int(d["points"]),
            daily_probability=float(d.get("dailyProbability") or 0.5),
            avatar_ref=d.get("avatarImagePath"),
            last_update=_parse(d.get("lastUpdate")),
        )


@dataclass
class User:
    username: str = config.DEFAULT_USERNAME
    avatar_ref: Optional[str] = None
    total_points: int = 0
    submissions: List[Submission] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "avatarImagePath": self.avatar_ref,
            "totalPoints": self.total_points,
            "submissions": [s.to_dict() for s in self.submissions],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "User":
        return cls(
            username=d["username"],
            avatar_ref=d.get("avatarImagePath"),
            total_points=int(d["totalPoints"]),
            submissions=[Submission.from_dict(s) for s in d["submissions"]],
        )


@dataclass
class DailyPromptState:
    prompts: List[Dict[str, Any]]
    date: datetime
    selected_prompt_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prompts": [dict(p) for p in self.prompts],
            "date": _iso(self.date),
            "selectedPromptIndex": self.selected_prompt_index,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DailyPromptState":
        prompts = [{"text": str(p["text"]), "points": int(p["points"])} for p in d["prompts"]]
        return cls(
            prompts=prompts,
            date=_parse(d["date"]),
            selected_prompt_index=d.get("selectedPromptIndex"),
        )
