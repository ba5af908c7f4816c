"""XML document -> AST builder. One construction rule per element kind.

Every node is built behind a containment boundary (``Builder.build``): a child
that fails to build becomes a ``None`` gap in its parent instead of aborting
its siblings or ancestors. Only a missing project section is fatal.
"""

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Union

from zest import document
from zest.config import BuilderOptions
from zest.document import Element, first_element, select, select_first, text
from zest.errors import (
    BuildError,
    MalformedValue,
    MissingRequiredChild,
    ProjectStructureError,
    UnknownElementKind,
)
from zest.nodes import (
    Actionword,
    Actionwords,
    Argument,
    Assign,
    BinaryExpression,
    BooleanLiteral,
    Call,
    Dict,
    Field,
    IfThen,
    Index,
    List,
    Node,
    NullLiteral,
    NumericLiteral,
    Parameter,
    Parenthesis,
    Project,
    Property,
    Scenario,
    Scenarios,
    Step,
    StringLiteral,
    Tag,
    Template,
    UnaryExpression,
    Variable,
    While,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """One contained failure: the offending element's XML and what went wrong."""
    element: str
    detail: str
    unexpected: bool = False  # not a BuildError: a defect, not bad input

    def __str__(self) -> str:
        label = "Unexpected error while building" if self.unexpected else "Unable to build"
        return f"{label}:\n{self.element}\n{self.detail}"


@dataclass(frozen=True)
class Built:
    node: Node


@dataclass(frozen=True)
class Failed:
    diagnostic: Diagnostic


BuildResult = Union[Built, Failed]

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def _parse_number(value: str) -> Union[int, float]:
    literal = value.strip()
    if _INTEGER.fullmatch(literal):
        return int(literal)
    if not _DECIMAL.fullmatch(literal):
        raise MalformedValue(f"Not a number: {value!r}")
    number = float(literal)
    if not math.isfinite(number):
        raise MalformedValue(f"Not a finite number: {value!r}")
    return number


def _parse_boolean(value: str) -> bool:
    literal = value.strip().lower()
    if literal == "true":
        return True
    if literal == "false":
        return False
    raise MalformedValue(f"Not a boolean: {value!r}")


class Builder:
    def __init__(
        self,
        root: Element,
        options: Optional[BuilderOptions] = None,
        path: Optional[str] = None,
    ):
        self.root = root
        self.options = options or BuilderOptions()
        self.path = path
        self.project: Optional[Project] = None
        self.failures: list[Diagnostic] = []  # every contained failure
        self.diagnostics: list[Diagnostic] = []  # the ones reported (verbose, or unexpected)

    # --- Containment boundary ---

    def build(self, element: Element) -> BuildResult:
        """Build one element. Never raises: failures come back as Failed."""
        try:
            rule = RULES.get(element.tag)
            if rule is None:
                raise UnknownElementKind(f"No construction rule for <{element.tag}>")
            return Built(rule(self, element))
        except BuildError as e:
            diagnostic = Diagnostic(document.raw(element), str(e))
        except Exception as e:
            logger.exception("Unexpected error while building <%s>", element.tag)
            diagnostic = Diagnostic(document.raw(element), f"{type(e).__name__}: {e}", unexpected=True)
        self._report(diagnostic)
        return Failed(diagnostic)

    def node(self, element: Element) -> Optional[Node]:
        result = self.build(element)
        return result.node if isinstance(result, Built) else None

    def _report(self, diagnostic: Diagnostic) -> None:
        self.failures.append(diagnostic)
        if diagnostic.unexpected or self.options.verbose:
            self.diagnostics.append(diagnostic)
            logger.debug("%s", diagnostic)

    # --- Structural helpers ---

    def _child(self, element: Element, path: str) -> Element:
        found = select_first(element, path)
        if found is None:
            raise MissingRequiredChild(f"<{element.tag}> has no '{path}' child")
        return found

    def _text_at(self, element: Element, path: str) -> str:
        return text(self._child(element, path))

    def _node_at(self, element: Element, path: str) -> Optional[Node]:
        """Build the element at path. The element must exist; its own build may fail to a gap."""
        return self.node(self._child(element, path))

    def _payload(self, wrapper: Element) -> Optional[Node]:
        """Build the first element child of wrapper. An empty wrapper is a contained failure: a gap."""
        payload = first_element(wrapper)
        if payload is None:
            error = MissingRequiredChild(f"<{wrapper.tag}> has no element child")
            self._report(Diagnostic(document.raw(wrapper), str(error)))
            return None
        return self.node(payload)

    def build_nodes(self, elements: Iterable[Element]) -> tuple[Optional[Node], ...]:
        return tuple(self.node(e) for e in elements)

    def build_collection(self, elements: Iterable[Element], container: Callable[..., Node]) -> Node:
        return container(self.build_nodes(elements))

    # --- Literals: accept a native value or an element holding its text ---

    def build_nullliteral(self, value: Any = None) -> NullLiteral:
        return NullLiteral()

    def build_stringliteral(self, value: Union[str, Element]) -> StringLiteral:
        if isinstance(value, str):
            return StringLiteral(value)
        return StringLiteral(text(value))

    def build_numericliteral(self, value: Union[int, float, str, Element]) -> NumericLiteral:
        if isinstance(value, bool):
            raise MalformedValue(f"Not a number: {value!r}")
        if isinstance(value, (int, float)):
            return NumericLiteral(value)
        if not isinstance(value, str):
            value = text(value)
        return NumericLiteral(_parse_number(value))

    def build_booleanliteral(self, value: Union[bool, str, Element]) -> BooleanLiteral:
        if isinstance(value, bool):
            return BooleanLiteral(value)
        if not isinstance(value, str):
            value = text(value)
        return BooleanLiteral(_parse_boolean(value))

    # --- Expressions ---

    def build_var(self, element: Element) -> Variable:
        name = text(element)
        if not name.strip():
            raise MalformedValue("<var> has an empty name")
        return Variable(name)

    def build_field(self, element: Element) -> Field:
        return Field(self._node_at(element, "base/*"), self._text_at(element, "name"))

    def build_index(self, element: Element) -> Index:
        return Index(self._node_at(element, "base/*"), self._node_at(element, "expression/*"))

    def build_operation(self, element: Element) -> Union[BinaryExpression, UnaryExpression]:
        operator = self._text_at(element, "operator")
        if select_first(element, "left") is not None:
            return BinaryExpression(
                self._node_at(element, "left/*"),
                operator,
                self._node_at(element, "right/*"),
            )
        return UnaryExpression(operator, self._node_at(element, "expression/*"))

    def build_parenthesis(self, element: Element) -> Parenthesis:
        return Parenthesis(self._node_at(element, "*"))

    def build_list(self, element: Element) -> List:
        return List(tuple(self._payload(item) for item in select(element, "item")))

    def build_dict(self, element: Element) -> Dict:
        return Dict(tuple(Property(entry.tag, self._payload(entry)) for entry in select(element, "*")))

    def build_template(self, element: Element) -> Template:
        return Template(self.build_nodes(select(element, "*")))

    # --- Statements ---

    def build_assign(self, element: Element) -> Assign:
        return Assign(self._node_at(element, "to/*"), self._node_at(element, "value/*"))

    def build_call(self, element: Element) -> Call:
        arguments = tuple(
            Argument(arg.tag, self._payload(arg))
            for arg in select(element, "arguments/*")
        )
        return Call(self._text_at(element, "actionword"), arguments)

    def build_if(self, element: Element) -> IfThen:
        return IfThen(
            self._node_at(element, "condition/*"),
            self.build_nodes(select(element, "then/*")),
            self.build_nodes(select(element, "else/*")),
        )

    def build_while(self, element: Element) -> While:
        return While(
            self._node_at(element, "condition/*"),
            self.build_nodes(select(element, "body/*")),
        )

    def build_step(self, element: Element) -> Step:
        payload = first_element(element)
        if payload is None:
            raise MissingRequiredChild("<step> has no payload")
        # <step><call>...</call></step>: the payload is a node itself.
        # <step><action><template>...</template></action></step>: a role wrapper.
        if payload.tag in ELEMENT_KINDS:
            return Step(payload.tag, self.node(payload))
        return Step(payload.tag, self._node_at(payload, "*"))

    # --- Declarations ---

    def build_tag(self, element: Element) -> Tag:
        value = select_first(element, "value")
        return Tag(self._text_at(element, "key"), text(value) if value is not None else None)

    def build_parameter(self, element: Element) -> Parameter:
        default = select_first(element, "default_value")
        return Parameter(
            self._text_at(element, "name"),
            self._payload(default) if default is not None else None,
        )

    def build_tags(self, element: Element) -> tuple[Optional[Node], ...]:
        return self.build_nodes(select(element, "tags/tag"))

    def build_parameters(self, element: Element) -> tuple[Optional[Node], ...]:
        return self.build_nodes(select(element, "parameters/parameter"))

    def build_steps(self, element: Element) -> tuple[Optional[Node], ...]:
        return self.build_nodes(select(element, "steps/*"))

    def build_actionword(self, element: Element) -> Actionword:
        return Actionword(
            self._text_at(element, "name"),
            self.build_tags(element),
            self.build_parameters(element),
            self.build_steps(element),
        )

    def build_scenario(self, element: Element) -> Scenario:
        description = select_first(element, "description")
        return Scenario(
            self._text_at(element, "name"),
            text(description) if description is not None else "",
            self.build_tags(element),
            self.build_parameters(element),
            self.build_steps(element),
        )

    def build_actionwords(self, element: Element) -> Actionwords:
        return self.build_collection(select(element, "actionword"), Actionwords)

    def build_scenarios(self, element: Element) -> Scenarios:
        return self.build_collection(select(element, "scenario"), Scenarios)

    # --- Entry point ---

    def build_project(self) -> Project:
        """Build the whole project. Raises ProjectStructureError if a top-level section is missing."""
        self.failures = []
        self.diagnostics = []
        project = document.find_project(self.root)
        if project is None:
            raise ProjectStructureError("Document has no <project> element", path=self.path)

        sections: dict[str, Element] = {}
        for name in ("name", "description", "scenarios", "actionwords"):
            found = select_first(project, name)
            if found is None:
                raise ProjectStructureError(
                    f"<project> has no <{name}> section",
                    element=document.raw(project),
                    path=self.path,
                )
            sections[name] = found

        self.project = Project(
            text(sections["name"]),
            text(sections["description"]),
            self.build_scenarios(sections["scenarios"]),
            self.build_actionwords(sections["actionwords"]),
        )
        logger.debug(
            "Built project %r: %d scenarios, %d actionwords, %d failures",
            self.project.name,
            len(self.project.scenarios.items),
            len(self.project.actionwords.items),
            len(self.failures),
        )
        return self.project


RULES: dict[str, Callable[[Builder, Element], Node]] = {
    "nullliteral": Builder.build_nullliteral,
    "null": Builder.build_nullliteral,
    "stringliteral": Builder.build_stringliteral,
    "string": Builder.build_stringliteral,
    "numericliteral": Builder.build_numericliteral,
    "numeric": Builder.build_numericliteral,
    "booleanliteral": Builder.build_booleanliteral,
    "boolean": Builder.build_booleanliteral,
    "var": Builder.build_var,
    "field": Builder.build_field,
    "index": Builder.build_index,
    "operation": Builder.build_operation,
    "parenthesis": Builder.build_parenthesis,
    "list": Builder.build_list,
    "dict": Builder.build_dict,
    "template": Builder.build_template,
    "assign": Builder.build_assign,
    "call": Builder.build_call,
    "if": Builder.build_if,
    "while": Builder.build_while,
    "step": Builder.build_step,
    "tag": Builder.build_tag,
    "parameter": Builder.build_parameter,
    "actionword": Builder.build_actionword,
    "scenario": Builder.build_scenario,
    "actionwords": Builder.build_actionwords,
    "scenarios": Builder.build_scenarios,
}

ELEMENT_KINDS = frozenset(RULES)


def parse(source: str, path: Optional[str] = None, options: Optional[BuilderOptions] = None) -> Project:
    """Parse Zest XML source into a Project AST."""
    root = document.load(source, path)
    return Builder(root, options, path).build_project()


def parse_file(path: Path, options: Optional[BuilderOptions] = None) -> Project:
    root = document.load_file(path)
    return Builder(root, options, str(path)).build_project()
