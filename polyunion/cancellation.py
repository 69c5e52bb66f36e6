"""Cooperative cancellation for long-running unions."""

import threading
from typing import Optional

from .core.errors import Cancelled


class CancellationToken:
    """Thread-safe flag checked by the engine between sweep events.

    Example:
        ```python
        token = CancellationToken()
        future = executor.submit(union_by_group, records, cancel_token=token)
        token.cancel("user abort")
        report = future.result()  # cancelled groups carry a Cancelled failure
        ```
    """

    def __init__(self):
        self._event = threading.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def raise_if_cancelled(self) -> None:
        """Raise :class:`Cancelled` once :meth:`cancel` has been called."""
        if self._event.is_set():
            raise Cancelled(self._reason or "Union cancelled")

    def __repr__(self) -> str:
        state = 'cancelled' if self.cancelled else 'active'
        return f"CancellationToken({state})"


def check_cancelled(token: Optional[CancellationToken]) -> None:
    """Raise :class:`Cancelled` if ``token`` is set; no-op for ``None``."""
    if token is not None:
        token.raise_if_cancelled()


__all__ = ['CancellationToken', 'check_cancelled']
