"""Uploaded files saved next to the JSON state."""
import os
import uuid
from typing import Any, Callable, List, TypeVar

from . import config

T = TypeVar("T")


def save_uploads(files, directory: str = config.ATTACHMENT_DIR) -> List[str]:
    """Write uploaded files (``.name`` and ``.getbuffer()``) under fresh names."""
    files = [f for f in (files or []) if f is not None]
    if not files:
        return []
    os.makedirs(directory, exist_ok=True)
    paths = []
    for f in files:
        _, ext = os.path.splitext(f.name)
        path = os.path.join(directory, uuid.uuid4().hex + ext)
        with open(path, "wb") as out:
            out.write(f.getbuffer())
        paths.append(path)
    return paths


def discard(paths: List[str]):
    for path in paths:
        if os.path.exists(path):
            os.remove(path)


def with_uploads(files, action: Callable[..., T], *args: Any,
                 directory: str = config.ATTACHMENT_DIR, **kwargs: Any) -> T:
    """Save ``files`` and pass them to ``action`` as ``attachments``.

    If ``action`` raises, the saved files are removed before re-raising.
    """
    paths = save_uploads(files, directory)
    try:
        return action(*args, attachments=paths, **kwargs)
    except Exception:
        discard(paths)
        raise
