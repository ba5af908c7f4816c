"""AST node definitions for Zest. Every buildable XML element maps to one node type.

Nodes are frozen; sequences are tuples in document order. A ``None`` entry in a
sequence marks a child that failed to build.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Optional, Union


class Node:
    """Base for all nodes; no fields so subclasses control field order."""

    @property
    def kind(self) -> str:
        return type(self).__name__


# --- Literals ---

@dataclass(frozen=True)
class NullLiteral(Node):
    pass


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str


@dataclass(frozen=True)
class NumericLiteral(Node):
    value: Union[int, float]


@dataclass(frozen=True)
class BooleanLiteral(Node):
    value: bool


# --- Expressions ---

@dataclass(frozen=True)
class Variable(Node):
    name: str


@dataclass(frozen=True)
class Property(Node):
    """dict entry: key is the entry element's tag"""
    key: str
    value: Optional[Node]


@dataclass(frozen=True)
class Field(Node):
    base: Optional[Node]
    name: str


@dataclass(frozen=True)
class Index(Node):
    base: Optional[Node]
    expression: Optional[Node]


@dataclass(frozen=True)
class BinaryExpression(Node):
    left: Optional[Node]
    operator: str
    right: Optional[Node]


@dataclass(frozen=True)
class UnaryExpression(Node):
    operator: str
    expression: Optional[Node]


@dataclass(frozen=True)
class Parenthesis(Node):
    content: Optional[Node]


@dataclass(frozen=True)
class List(Node):
    items: tuple[Optional[Node], ...] = ()


@dataclass(frozen=True)
class Dict(Node):
    items: tuple[Optional[Property], ...] = ()


@dataclass(frozen=True)
class Template(Node):
    chunks: tuple[Optional[Node], ...] = ()


# --- Statements ---

@dataclass(frozen=True)
class Assign(Node):
    to: Optional[Node]
    value: Optional[Node]


@dataclass(frozen=True)
class Argument(Node):
    name: str
    value: Optional[Node]


@dataclass(frozen=True)
class Call(Node):
    actionword: str
    arguments: tuple[Argument, ...] = ()


@dataclass(frozen=True)
class IfThen(Node):
    condition: Optional[Node]
    then_body: tuple[Optional[Node], ...] = ()
    else_body: tuple[Optional[Node], ...] = ()


@dataclass(frozen=True)
class Step(Node):
    key: str  # role of the payload, e.g. "action", "result", "call"
    value: Optional[Node]


@dataclass(frozen=True)
class While(Node):
    condition: Optional[Node]
    body: tuple[Optional[Node], ...] = ()


# --- Declarations ---

@dataclass(frozen=True)
class Tag(Node):
    key: str
    value: Optional[str] = None


@dataclass(frozen=True)
class Parameter(Node):
    name: str
    default: Optional[Node] = None


@dataclass(frozen=True)
class Actionword(Node):
    name: str
    tags: tuple[Optional[Tag], ...] = ()
    parameters: tuple[Optional[Parameter], ...] = ()
    body: tuple[Optional[Node], ...] = ()


@dataclass(frozen=True)
class Scenario(Node):
    name: str
    description: str = ""
    tags: tuple[Optional[Tag], ...] = ()
    parameters: tuple[Optional[Parameter], ...] = ()
    body: tuple[Optional[Node], ...] = ()


@dataclass(frozen=True)
class Actionwords(Node):
    items: tuple[Optional[Actionword], ...] = ()


@dataclass(frozen=True)
class Scenarios(Node):
    items: tuple[Optional[Scenario], ...] = ()


# --- Project ---

@dataclass(frozen=True)
class Project(Node):
    name: str
    description: str = ""
    scenarios: Scenarios = field(default_factory=Scenarios)
    actionwords: Actionwords = field(default_factory=Actionwords)


def to_dict(node: Optional[Node]) -> Any:
    """JSON-serializable view of a node tree. Gaps stay as None."""
    if node is None:
        return None
    data: dict[str, Any] = {"kind": node.kind}
    for f in fields(node):
        data[f.name] = _value_to_data(getattr(node, f.name))
    return data


def _value_to_data(value: Any) -> Any:
    if isinstance(value, Node):
        return to_dict(value)
    if isinstance(value, tuple):
        return [_value_to_data(v) for v in value]
    return value
