"""Typed outcome of a document library operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ResultStatus(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one service operation.

    Attributes:
        status: Whether the operation succeeded, found nothing, or failed.
        lines: Rendered output lines for display (success only).
        message: Informational or error text.
    """

    status: ResultStatus
    lines: list[str] = field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    @classmethod
    def success(cls, lines: list[str] | None = None, message: str = "") -> OperationResult:
        return cls(status=ResultStatus.SUCCESS, lines=list(lines or []), message=message)

    @classmethod
    def not_found(cls, message: str) -> OperationResult:
        return cls(status=ResultStatus.NOT_FOUND, message=message)

    @classmethod
    def error(cls, message: str) -> OperationResult:
        return cls(status=ResultStatus.ERROR, message=message)

    @classmethod
    def from_exception(cls, context: str, exc: BaseException) -> OperationResult:
        """Build an error result whose message is ``"<context>: <exception text>"``."""
        return cls.error(f"{context}: {exc}")
