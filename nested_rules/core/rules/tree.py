"""Compiled rule tree.

A caller writes rules as nested mappings::

    {
        "is_human": {"is_kind": "book", "is_smart": "homework"},
        "default": "homework",
    }

``compile_rules`` turns that into ``RuleNode`` objects whose branches are
tagged once as either ``Terminal`` (names an action) or ``Nested`` (another
node), so the evaluator never has to inspect value types at run time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple, Union

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_KEY = "default"


@dataclass(frozen=True)
class Terminal:
    """Branch that ends in an action capability."""

    key: str


@dataclass(frozen=True)
class Nested:
    """Branch that descends into another rule node."""

    node: "RuleNode"


Branch = Union[Terminal, Nested]


@dataclass(frozen=True, eq=False)
class RuleNode:
    """One level of a rule tree.

    ``conditions`` keeps the caller's insertion order; the evaluator commits
    to the first one whose predicate is truthy. ``default`` is held apart so
    it is only considered after every condition has failed.

    Nodes compare by identity: a sub-mapping shared by several branches
    compiles to a single node.
    """

    conditions: Tuple[Tuple[str, Branch], ...] = ()
    default: Optional[Branch] = None
    default_key: str = DEFAULT_KEY

    def branches(self) -> Iterator[Tuple[str, Branch]]:
        """Yield (key, branch) pairs, default last."""
        yield from self.conditions
        if self.default is not None:
            yield self.default_key, self.default

    def children(self) -> Iterator["RuleNode"]:
        for _, branch in self.branches():
            if isinstance(branch, Nested):
                yield branch.node

    def walk(self) -> Iterator["RuleNode"]:
        """Yield every distinct node reachable from this one, once each."""
        seen = {id(self)}
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            for child in node.children():
                if id(child) not in seen:
                    seen.add(id(child))
                    stack.append(child)

    def condition_keys(self) -> Set[str]:
        """All predicate keys referenced anywhere in the tree (default excluded)."""
        return {key for node in self.walk() for key, _ in node.conditions}

    def terminal_keys(self) -> Set[str]:
        """All action keys referenced anywhere in the tree."""
        return {
            branch.key
            for node in self.walk()
            for _, branch in node.branches()
            if isinstance(branch, Terminal)
        }

    def depth(self) -> int:
        """Maximum nesting depth; a node with only terminal branches is 1."""
        depths: Dict[int, int] = {}
        stack: List[Tuple[RuleNode, bool]] = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                depths[id(node)] = 1 + max((depths[id(c)] for c in node.children()), default=0)
                continue
            if id(node) in depths:
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in node.children() if id(child) not in depths)
        return depths[id(self)]


def compile_rules(rules: Mapping[str, Any], default_key: str = DEFAULT_KEY) -> RuleNode:
    """Compile a nested rules mapping into a ``RuleNode`` tree.

    The mapping is walked depth-first with an explicit stack, so nesting
    depth is not bounded by the interpreter's recursion limit. A sub-mapping
    reached through several branches is compiled once.

    Args:
        rules: Mapping of condition key to terminal key or nested mapping
        default_key: Reserved key for the fallback branch

    Returns:
        Root node of the compiled tree

    Raises:
        ConfigurationError: If the mapping is malformed, empty at some level,
            or contains itself
    """
    compiled: Dict[int, RuleNode] = {}
    # Mappings entered but not yet built; always the ancestors of the current one
    active: Set[int] = set()
    stack: List[Tuple[Any, List[str], bool]] = [(rules, [], False)]

    while stack:
        mapping, path, expanded = stack.pop()

        if expanded:
            active.discard(id(mapping))
            compiled[id(mapping)] = _build_node(mapping, default_key, compiled)
            continue
        if id(mapping) in compiled:
            continue

        _check_node(mapping, path, active)
        active.add(id(mapping))
        stack.append((mapping, path, True))

        children = []
        for key, value in mapping.items():
            if isinstance(value, Mapping):
                if id(value) not in compiled:
                    children.append((value, path + [key], False))
            elif not isinstance(value, str):
                raise ConfigurationError(
                    f"Branch {' > '.join(path + [key])} must be an action name or a nested "
                    f"rule mapping, got {type(value).__name__}"
                )
        # Reversed so siblings are compiled in declaration order
        stack.extend(reversed(children))

    root = compiled[id(rules)]
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Compiled rule tree: {len(compiled)} node(s), depth={root.depth()}")
    return root


def _check_node(rules: Any, path: List[str], active: Set[int]) -> None:
    """Validate a mapping on entry, before its children are visited."""
    where = " > ".join(path) if path else "<root>"

    if not isinstance(rules, Mapping):
        raise ConfigurationError(
            f"Rule node at {where} must be a mapping, got {type(rules).__name__}"
        )
    if not rules:
        raise ConfigurationError(f"Rule node at {where} has no conditions and no default")
    if id(rules) in active:
        raise ConfigurationError(f"Rule node at {where} contains itself")
    for key in rules:
        if not isinstance(key, str):
            raise ConfigurationError(
                f"Condition keys must be strings, got {key!r} at {where}"
            )


def _build_node(rules: Mapping[str, Any], default_key: str, compiled: Dict[int, RuleNode]) -> RuleNode:
    """Build a node once every nested mapping under it has been compiled."""
    conditions: List[Tuple[str, Branch]] = []
    default: Optional[Branch] = None

    for key, value in rules.items():
        branch: Branch = Terminal(value) if isinstance(value, str) else Nested(compiled[id(value)])
        if key == default_key:
            default = branch
        else:
            conditions.append((key, branch))

    return RuleNode(conditions=tuple(conditions), default=default, default_key=default_key)
