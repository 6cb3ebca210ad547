# tagged_ad/core/tags.py
from __future__ import annotations
import itertools
import threading
from contextlib import contextmanager
from typing import Any, Callable, List, Sequence

# Process-wide tag allocator. Tags are plain ints so they can be ordered when
# an elementary function has to pick which infinitesimal to expand first.
_tag_counter = itertools.count(1)
_tag_lock = threading.Lock()

# Each thread keeps its own stack of active tags; no scope state is shared
# between concurrently running differentiations.
_scope = threading.local()


def fresh_tag() -> int:
    """Return a tag that has never been handed out before in this process."""
    with _tag_lock:
        return next(_tag_counter)


def _active_stack() -> List[int]:
    stack = getattr(_scope, "active", None)
    if stack is None:
        stack = _scope.active = []
    return stack


def tag_active(tag: int) -> bool:
    """True while some enclosing `active_tag(tag)` scope is still open."""
    return tag in _active_stack()


def active_tags() -> tuple:
    """Snapshot of the current thread's active tags, innermost last."""
    return tuple(_active_stack())


@contextmanager
def active_tag(tag: int):
    """
    Context manager marking `tag` active for the dynamic extent of the block:
        with active_tag(tag):
            ... evaluate the perturbed function ...

    The marker is popped on every exit path; a leaked marker would make later,
    unrelated differentiations take the reentrant branch.
    """
    stack = _active_stack()
    stack.append(tag)
    try:
        yield tag
    finally:
        stack.pop()


def with_active_tag(tag: int, f: Callable, args: Sequence[Any]):
    """Call `f(*args)` with `tag` marked active."""
    with active_tag(tag):
        return f(*args)
