"""Pydantic schemas for evaluation outcomes and trace logs."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class BranchKind(str, Enum):
    """What a selected branch resolved to."""

    TERMINAL = "terminal"  # names an action capability
    NESTED = "nested"  # another rule node


class ConditionCheck(BaseModel):
    """A single predicate invocation."""

    key: str
    matched: bool


class TraceEntry(BaseModel):
    """Traversal decision made at one level of the rule tree."""

    depth: int = Field(..., ge=0)
    path: List[str] = Field(default_factory=list, description="Keys selected above this level")
    checks: List[ConditionCheck] = Field(default_factory=list)
    selected: str
    fallback: bool = False  # True when the default branch was taken
    branch: BranchKind
    action: Optional[str] = None  # Set when the branch is terminal


class Outcome(BaseModel):
    """Result of one evaluation."""

    result: Any = None
    logs: List[TraceEntry] = Field(default_factory=list)
