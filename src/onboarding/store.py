"""
Persisted Step Store.

A single string slot holding the current wizard step. In the browser this
is a cookie, so it survives reloads; absence means no wizard in progress.

Stores follow a small get/set/clear protocol so the step machine does not
care whether it is talking to a cookie or to memory (tests, CLI).
"""

from typing import Protocol, runtime_checkable

from fastapi import Request, Response

DEFAULT_STEP_KEY = "step"


@runtime_checkable
class StepStore(Protocol):
    """Durable key-value slot for the current step."""

    def get(self) -> str | None:
        """Return the stored step value, or None if absent."""
        ...

    def set(self, value: str) -> None:
        """Overwrite the stored step value."""
        ...

    def clear(self) -> None:
        """Remove the stored value."""
        ...


class MemoryStepStore:
    """In-process store. Shares a dict so several stores can act like one browser."""

    def __init__(self, backing: dict[str, str] | None = None, key: str = DEFAULT_STEP_KEY):
        self.backing = backing if backing is not None else {}
        self.key = key

    def get(self) -> str | None:
        return self.backing.get(self.key)

    def set(self, value: str) -> None:
        self.backing[self.key] = value

    def clear(self) -> None:
        self.backing.pop(self.key, None)


class CookieStepStore:
    """
    Step store backed by a browser cookie.

    Reads the incoming value from the request and writes changes onto the
    outgoing response. Later reads in the same request see the new value.
    """

    def __init__(
        self,
        request: Request,
        response: Response,
        key: str = DEFAULT_STEP_KEY,
        max_age: int | None = None,
    ):
        self.response = response
        self.key = key
        self.max_age = max_age
        self._value = request.cookies.get(key)

    def get(self) -> str | None:
        return self._value

    def set(self, value: str) -> None:
        self._value = value
        self.response.set_cookie(
            self.key,
            value,
            max_age=self.max_age,
            httponly=True,
            samesite="lax",
        )

    def clear(self) -> None:
        self._value = None
        self.response.delete_cookie(self.key, httponly=True, samesite="lax")
