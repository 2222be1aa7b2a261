"""Rule declaration and dispatch engine for the LaTeX renderer.

Handlers declare the document node types they render via the ``@renders``
decorator, which records a lightweight :class:`RuleDefinition` on the callable.
At runtime the :class:`RenderEngine` collects those declarations into a
:class:`RenderRegistry` and dispatches every node to the rule registered for
its type.

Architecture

`Declaration layer`
: ``@renders`` stores a :class:`RuleDefinition` on every handler.

`Registry layer`
: :class:`RenderRegistry` collates definitions into :class:`RenderRule`
  instances keyed by node type and ordered by priority.

`Execution layer`
: :class:`RenderEngine` looks up the rule for a node (walking the node's MRO),
  runs it, and checks that a closed set of node types is fully covered.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast

from .exceptions import InvalidNodeError, MissingRenderRuleError


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .context import FormattingContext


RuleCallable = Callable[[Any, "FormattingContext"], None]


@dataclass
class RenderRule:
    """Concrete rendering rule registered in the engine."""

    priority: int
    node_types: tuple[type, ...]
    name: str
    handler: RuleCallable


@dataclass(frozen=True)
class RuleDefinition:
    """Descriptor installed on handler callables by the decorator."""

    node_types: tuple[type, ...]
    priority: int = 0
    name: str | None = None

    def bind(self, handler: RuleCallable) -> RenderRule:
        """Create a concrete rule instance bound to the callable."""
        name = self.name or getattr(handler, "__name__", handler.__class__.__name__)
        return RenderRule(
            priority=self.priority,
            node_types=self.node_types,
            name=name,
            handler=handler,
        )


class RenderRegistry:
    """Container used to gather render rules before execution."""

    def __init__(self) -> None:
        self._rules: dict[type, list[RenderRule]] = {}

    def register(self, rule: RenderRule) -> None:
        """Register a rule for every node type it targets."""
        for node_type in rule.node_types:
            bucket = self._rules.setdefault(node_type, [])
            bucket.append(rule)
            bucket.sort(key=lambda item: (item.priority, item.name))

    def rules_for(self, node_type: type) -> tuple[RenderRule, ...]:
        """Return the rules registered for ``node_type`` in execution order."""
        return tuple(self._rules.get(node_type, ()))

    def lookup(self, node_type: type) -> RenderRule | None:
        """Return the winning rule for a node type, honouring inheritance."""
        for candidate in node_type.__mro__:
            bucket = self._rules.get(candidate)
            if bucket:
                return bucket[0]
        return None

    def covered_types(self) -> set[type]:
        """Return the node types that have at least one rule."""
        return {node_type for node_type, bucket in self._rules.items() if bucket}

    def describe(self) -> list[dict[str, object]]:
        """Return a serialisable snapshot of the registered rules."""
        entries: list[dict[str, object]] = []
        for node_type in sorted(self._rules, key=lambda item: item.__name__):
            for order, rule in enumerate(self._rules[node_type]):
                entries.append(
                    {
                        "node": node_type.__name__,
                        "name": rule.name,
                        "priority": rule.priority,
                        "order": order,
                    }
                )
        return entries


def renders(
    *node_types: type,
    priority: int = 0,
    name: str | None = None,
) -> Callable[[RuleCallable], RuleCallable]:
    """Decorator used to register node handlers."""
    if not node_types:
        msg = "@renders requires at least one node type"
        raise TypeError(msg)
    definition = RuleDefinition(node_types=tuple(node_types), priority=priority, name=name)

    def decorator(handler: RuleCallable) -> RuleCallable:
        cast(Any, handler).__render_rule__ = definition
        return handler

    return decorator


class RenderEngine:
    """Execution engine dispatching document nodes to registered rules."""

    def __init__(self, registry: RenderRegistry | None = None) -> None:
        self.registry = registry or RenderRegistry()

    def collect_from(self, owner: Any) -> None:
        """Collect decorated callables from an object or module."""
        for attribute in dir(owner):
            handler = getattr(owner, attribute)
            definition = getattr(handler, "__render_rule__", None)
            if definition is None and hasattr(handler, "__func__"):
                definition = getattr(handler.__func__, "__render_rule__", None)
            if isinstance(definition, RuleDefinition):
                self.registry.register(definition.bind(handler))

    def register(self, handler: RuleCallable) -> None:
        """Register a standalone callable decorated with ``@renders``."""
        definition = getattr(handler, "__render_rule__", None)
        if not isinstance(definition, RuleDefinition):
            msg = "Handler must be decorated with @renders"
            raise TypeError(msg)
        self.registry.register(definition.bind(handler))

    def ensure_complete(self, node_types: Iterable[type]) -> None:
        """Raise when any of ``node_types`` has no render rule."""
        missing = [
            node_type for node_type in node_types if self.registry.lookup(node_type) is None
        ]
        if missing:
            raise MissingRenderRuleError(missing)

    def dispatch(self, node: Any, context: FormattingContext) -> None:
        """Render ``node`` with the rule registered for its type."""
        rule = self.registry.lookup(type(node))
        if rule is None:
            raise InvalidNodeError(
                f"Cannot render object of type '{type(node).__name__}': no rule registered"
            )
        rule.handler(node, context)


__all__ = [
    "RenderEngine",
    "RenderRegistry",
    "RenderRule",
    "RuleCallable",
    "RuleDefinition",
    "renders",
]
