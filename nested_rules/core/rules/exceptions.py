"""Errors raised by the rule engine."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple


class RuleEngineError(Exception):
    """Base class for rule engine errors."""


class ConfigurationError(RuleEngineError):
    """Rule tree and function registry do not fit together.

    Attributes:
        missing: (key, role) pairs for keys absent from the registry
    """

    def __init__(self, message: str, missing: Optional[Sequence[Tuple[str, str]]] = None):
        super().__init__(message)
        self.missing: List[Tuple[str, str]] = list(missing or [])


class UnresolvedEvaluationError(RuleEngineError):
    """No condition matched at a level and no default branch applied.

    Attributes:
        path: Keys selected on the way down to the unresolved level
        checked: Keys whose predicates were invoked at that level
    """

    def __init__(self, path: Sequence[str], checked: Sequence[str]):
        self.path = list(path)
        self.checked = list(checked)
        where = " > ".join(self.path) if self.path else "<root>"
        super().__init__(
            f"No condition matched at {where} (checked: {', '.join(self.checked) or 'nothing'}) "
            f"and no default branch applies"
        )


class AsyncContextError(RuleEngineError):
    """An awaitable action result cannot be settled by a synchronous call."""
