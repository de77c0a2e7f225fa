"""Rule engine for evaluating nested rule trees against an input record."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, List, Mapping, Optional, Tuple, Union

from nested_rules.config import Settings, get_settings
from .exceptions import AsyncContextError, ConfigurationError, UnresolvedEvaluationError
from .models import BranchKind, ConditionCheck, Outcome, TraceEntry
from .registry import Capability, FunctionRegistry
from .tree import Branch, RuleNode, Terminal, compile_rules

logger = logging.getLogger(__name__)


class RuleEngine:
    """Engine that walks a rule tree and invokes the selected action.

    Predicates at each level are tried in insertion order and the first
    truthy one wins; ``default`` is only considered once every sibling has
    failed. The tree and registry are compiled and cross-checked up front,
    and the engine keeps no per-call state, so one instance can serve
    concurrent callers.
    """

    def __init__(
        self,
        functions: Union[FunctionRegistry, Mapping[str, Capability]],
        rules: Union[RuleNode, Mapping[str, Any]],
        trace: Optional[bool] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize the rule engine.

        Args:
            functions: Registry or mapping of key to predicate/action callable
            rules: Compiled root node or nested rules mapping
            trace: Whether outcomes carry trace logs (defaults to settings)
            settings: Engine settings (defaults to the cached environment settings)

        Raises:
            ConfigurationError: If the tree is malformed or references
                keys missing from the registry
        """
        self.settings = settings or get_settings()
        self.trace = self.settings.trace_enabled if trace is None else trace
        self.registry = (
            functions if isinstance(functions, FunctionRegistry) else FunctionRegistry(functions)
        )
        self.root = (
            rules if isinstance(rules, RuleNode) else compile_rules(rules, self.settings.default_key)
        )
        self.registry.validate(self.root)

    def evaluate(self, inputs: Any) -> Outcome:
        """Evaluate the rules synchronously.

        An awaitable action result is run to completion with ``asyncio.run``
        when no event loop is running in this thread.

        Args:
            inputs: Input record handed to every predicate and the action

        Returns:
            Outcome with the action's result and the trace logs

        Raises:
            UnresolvedEvaluationError: If some level has no match and no default
            AsyncContextError: If an awaitable result cannot be settled here
        """
        action_key, logs = self._select(inputs)
        result = self.registry.action(action_key)(inputs)
        if inspect.isawaitable(result):
            result = self._settle(action_key, result)
        return Outcome(result=result, logs=logs)

    async def evaluate_async(self, inputs: Any) -> Outcome:
        """Evaluate the rules, awaiting the action result if it is awaitable."""
        action_key, logs = self._select(inputs)
        result = self.registry.action(action_key)(inputs)
        if inspect.isawaitable(result):
            result = await result
        return Outcome(result=result, logs=logs)

    def _select(self, inputs: Any) -> Tuple[str, List[TraceEntry]]:
        """Walk the tree down to a terminal branch.

        Returns:
            Tuple of (action key, trace logs)
        """
        node = self.root
        path: List[str] = []
        logs: List[TraceEntry] = []

        while True:
            checks: List[ConditionCheck] = []
            selected: Optional[Tuple[str, Branch]] = None
            fallback = False

            for key, branch in node.conditions:
                matched = self._check(key, inputs)
                checks.append(ConditionCheck(key=key, matched=matched))
                if matched:
                    selected = (key, branch)
                    break

            if selected is None and node.default is not None:
                if self._default_applies(node.default_key, inputs, checks):
                    selected = (node.default_key, node.default)
                    fallback = True

            if selected is None:
                checked = [check.key for check in checks]
                logger.warning(f"Unresolved evaluation at depth {len(path)}: checked {checked}")
                raise UnresolvedEvaluationError(path, checked)

            key, branch = selected
            terminal = isinstance(branch, Terminal)
            logger.debug(
                f"Depth {len(path)}: selected '{key}'"
                f"{' (default)' if fallback else ''} -> "
                f"{branch.key if terminal else 'nested'}"
            )

            if self.trace:
                logs.append(
                    TraceEntry(
                        depth=len(path),
                        path=list(path),
                        checks=checks,
                        selected=key,
                        fallback=fallback,
                        branch=BranchKind.TERMINAL if terminal else BranchKind.NESTED,
                        action=branch.key if terminal else None,
                    )
                )

            if terminal:
                return branch.key, logs

            path.append(key)
            node = branch.node

    def _check(self, key: str, inputs: Any) -> bool:
        """Invoke a predicate and coerce its result to bool."""
        value = self.registry.predicate(key)(inputs)
        if inspect.isawaitable(value):
            _discard(value)
            raise ConfigurationError(
                f"Predicate '{key}' returned an awaitable; asynchronous predicates are not supported"
            )
        return bool(value)

    def _default_applies(self, default_key: str, inputs: Any, checks: List[ConditionCheck]) -> bool:
        """Decide whether the default branch may be taken.

        Without a registered default predicate the branch is unconditional.
        """
        if not self.registry.has_default_predicate(default_key):
            return True
        matched = self._check(default_key, inputs)
        checks.append(ConditionCheck(key=default_key, matched=matched))
        return matched

    def _settle(self, action_key: str, awaitable: Awaitable[Any]) -> Any:
        """Run an awaitable action result to completion from synchronous code."""
        if not self.settings.settle_awaitables:
            _discard(awaitable)
            raise AsyncContextError(
                f"Action '{action_key}' returned an awaitable; use evaluate_async"
            )

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(_await(awaitable))

        _discard(awaitable)
        raise AsyncContextError(
            f"Action '{action_key}' returned an awaitable inside a running event loop; "
            f"use evaluate_async"
        )


async def _await(awaitable: Awaitable[Any]) -> Any:
    """Wrap any awaitable in a coroutine so ``asyncio.run`` accepts it."""
    return await awaitable


def _discard(awaitable: Awaitable[Any]) -> None:
    """Release an awaitable that will never be awaited.

    Coroutines are closed, futures and tasks are cancelled, and for any other
    ``__await__`` object the iterator it hands out is closed if it can be.
    """
    if inspect.iscoroutine(awaitable):
        awaitable.close()
    elif asyncio.isfuture(awaitable):
        awaitable.cancel()
    else:
        iterator = awaitable.__await__()
        close = getattr(iterator, "close", None)
        if close is not None:
            close()


def execute_engine(
    inputs: Any,
    functions: Mapping[str, Capability],
    rules: Mapping[str, Any],
    trace: Optional[bool] = None,
) -> Outcome:
    """Evaluate rules once against inputs.

    Shorthand for ``RuleEngine(functions, rules, trace=trace).evaluate(inputs)``.
    """
    return RuleEngine(functions, rules, trace=trace).evaluate(inputs)


async def execute_engine_async(
    inputs: Any,
    functions: Mapping[str, Capability],
    rules: Mapping[str, Any],
    trace: Optional[bool] = None,
) -> Outcome:
    """Evaluate rules once against inputs, awaiting an async action."""
    return await RuleEngine(functions, rules, trace=trace).evaluate_async(inputs)
