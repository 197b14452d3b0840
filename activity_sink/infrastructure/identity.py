"""Per-record identity scopes for relational writes.

A scope carries the acting user's id for the duration of one relational
write. It is attached to the short-lived session performing that write, and a
``before_flush`` hook copies it into the ``created_by`` audit column of new
rows, so repositories never receive the user as an explicit argument.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from sqlalchemy import event
from sqlalchemy.orm import Session, sessionmaker

IDENTITY_INFO_KEY = "identity_scope"


class IdentityScopeClosedError(RuntimeError):
    """Raised when a closed identity scope is used for a write."""


@dataclass(eq=False)
class IdentityScope:
    """Identity of the principal acting on one activity record."""

    user_id: str | None
    _open: bool = field(default=True, repr=False)

    @property
    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        self._open = False


@contextmanager
def identity_scope(user_id: str | None) -> Iterator[IdentityScope]:
    """Open a fresh identity scope and close it on every exit path."""

    scope = IdentityScope(user_id=user_id)
    try:
        yield scope
    finally:
        scope.close()


def bind_identity(session: Session, scope: IdentityScope) -> None:
    """Attach ``scope`` to ``session`` for the writes it performs."""

    if not scope.is_open:
        raise IdentityScopeClosedError("Cannot bind a closed identity scope")
    session.info[IDENTITY_INFO_KEY] = scope


def unbind_identity(session: Session) -> None:
    session.info.pop(IDENTITY_INFO_KEY, None)


def current_identity(session: Session) -> IdentityScope | None:
    """Return the scope bound to ``session``, if any."""

    return session.info.get(IDENTITY_INFO_KEY)


def _populate_audit_columns(session: Session, _flush_context, _instances) -> None:
    scope = current_identity(session)
    if scope is None:
        return
    if not scope.is_open:
        raise IdentityScopeClosedError("Identity scope closed before the flush")

    for instance in session.new:
        if hasattr(instance, "created_by") and instance.created_by is None:
            instance.created_by = scope.user_id


def install_identity_hooks(factory: sessionmaker) -> None:
    """Register the audit-column hook on sessions created by ``factory``."""

    event.listen(factory, "before_flush", _populate_audit_columns)


__all__ = [
    "IdentityScope",
    "IdentityScopeClosedError",
    "bind_identity",
    "current_identity",
    "identity_scope",
    "install_identity_hooks",
    "unbind_identity",
]
