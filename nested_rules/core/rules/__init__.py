"""Nested rule tree compiler, function registry and evaluator."""

from .models import BranchKind, ConditionCheck, TraceEntry, Outcome
from .exceptions import (
    RuleEngineError,
    ConfigurationError,
    UnresolvedEvaluationError,
    AsyncContextError,
)
from .tree import DEFAULT_KEY, Terminal, Nested, RuleNode, compile_rules
from .registry import Capability, FunctionRegistry
from .engine import RuleEngine, execute_engine, execute_engine_async

__all__ = [
    "BranchKind",
    "ConditionCheck",
    "TraceEntry",
    "Outcome",
    "RuleEngineError",
    "ConfigurationError",
    "UnresolvedEvaluationError",
    "AsyncContextError",
    "DEFAULT_KEY",
    "Terminal",
    "Nested",
    "RuleNode",
    "compile_rules",
    "Capability",
    "FunctionRegistry",
    "RuleEngine",
    "execute_engine",
    "execute_engine_async",
]
