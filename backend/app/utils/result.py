from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class Result:
    """Success or error outcome of an operation that can fail for expected reasons.

    An error keeps the individual messages in ``errors`` and their joined form in
    ``error_msg``. ``data`` on an error is whatever the caller wants to re-display
    (usually the submitted input).
    """

    success: bool
    data: Any = None
    error_msg: str = ""
    errors: tuple[str, ...] = ()

    def and_then(self, fn: Callable[[Any], "Result"]) -> "Result":
        if not self.success:
            return self
        return fn(self.data)

    def map(self, fn: Callable[[Any], Any]) -> "Result":
        if not self.success:
            return self
        return success(fn(self.data))

    def or_else(self, default: Any = None) -> Any:
        return self.data if self.success else default

    def maybe(self) -> Any:
        return self.or_else(None)


def success(data: Any = None) -> Result:
    return Result(success=True, data=data)


def error(error_msg: str, *, errors: list[str] | tuple[str, ...] | None = None, data: Any = None) -> Result:
    msgs = tuple(errors) if errors else (error_msg,)
    return Result(success=False, data=data, error_msg=error_msg, errors=msgs)
