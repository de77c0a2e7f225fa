"""Function registry mapping rule keys to capabilities."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, List, Mapping, Tuple

from .exceptions import ConfigurationError
from .tree import RuleNode

logger = logging.getLogger(__name__)

# A capability takes the input record and returns a value or an awaitable
Capability = Callable[[Any], Any]

PREDICATE = "predicate"
ACTION = "action"


class FunctionRegistry(Mapping[str, Capability]):
    """Read-only table of capabilities keyed by rule key.

    The same entry can serve as a predicate or an action; which role it plays
    is decided by where its key appears in the rule tree.
    """

    def __init__(self, functions: Mapping[str, Capability]):
        """Initialize the registry.

        Args:
            functions: Mapping of key to callable

        Raises:
            ConfigurationError: If any entry is not callable
        """
        not_callable = sorted(key for key, fn in functions.items() if not callable(fn))
        if not_callable:
            raise ConfigurationError(
                f"Registry entries must be callable: {', '.join(not_callable)}"
            )
        self._functions: Dict[str, Capability] = dict(functions)

    def __getitem__(self, key: str) -> Capability:
        return self._functions[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def predicate(self, key: str) -> Capability:
        """Get the predicate capability for a condition key."""
        return self._lookup(key, PREDICATE)

    def action(self, key: str) -> Capability:
        """Get the action capability for a terminal key."""
        return self._lookup(key, ACTION)

    def has_default_predicate(self, default_key: str) -> bool:
        """Check if an explicit predicate is registered for the default branch."""
        return default_key in self._functions

    def missing_keys(self, node: RuleNode) -> List[Tuple[str, str]]:
        """List (key, role) pairs referenced by the tree but not registered."""
        missing = [(key, PREDICATE) for key in node.condition_keys() if key not in self._functions]
        missing += [(key, ACTION) for key in node.terminal_keys() if key not in self._functions]
        return sorted(missing)

    def validate(self, node: RuleNode) -> None:
        """Check every key a compiled tree references against the registry.

        Keys registered but never referenced are ignored.

        Raises:
            ConfigurationError: Listing every missing key and its role
        """
        missing = self.missing_keys(node)
        if missing:
            listed = ", ".join(f"{key} ({role})" for key, role in missing)
            raise ConfigurationError(f"Rule tree references unregistered keys: {listed}", missing)
        logger.debug(f"Registry validated: {len(self._functions)} capabilities registered")

    def _lookup(self, key: str, role: str) -> Capability:
        try:
            return self._functions[key]
        except KeyError:
            raise ConfigurationError(f"No {role} registered for '{key}'", [(key, role)]) from None
