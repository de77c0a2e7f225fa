"""Evaluate nested conditional rule trees against an input record."""

from nested_rules.config import PRODUCT_VERSION as __version__
from nested_rules.core.rules import (
    Outcome,
    TraceEntry,
    ConditionCheck,
    BranchKind,
    RuleEngineError,
    ConfigurationError,
    UnresolvedEvaluationError,
    AsyncContextError,
    FunctionRegistry,
    RuleNode,
    compile_rules,
    RuleEngine,
    execute_engine,
    execute_engine_async,
)

__all__ = [
    "Outcome",
    "TraceEntry",
    "ConditionCheck",
    "BranchKind",
    "RuleEngineError",
    "ConfigurationError",
    "UnresolvedEvaluationError",
    "AsyncContextError",
    "FunctionRegistry",
    "RuleNode",
    "compile_rules",
    "RuleEngine",
    "execute_engine",
    "execute_engine_async",
]
