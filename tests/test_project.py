"""End-to-end tests: whole documents to a Project AST."""

import pytest

from zest.builder import Builder, parse, parse_file
from zest import document
from zest.config import BuilderOptions
from zest.errors import DocumentError, ProjectStructureError
from zest.nodes import (
    Actionwords,
    Argument,
    Assign,
    BooleanLiteral,
    Call,
    IfThen,
    NumericLiteral,
    Project,
    Scenario,
    Scenarios,
    Step,
    Tag,
    UnaryExpression,
    Variable,
    While,
)

MINIMAL = """
<project>
  <name>Minimal</name>
  <description>One scenario, one call</description>
  <scenarios>
    <scenario>
      <name>Remember me</name>
      <description>Ticks the box</description>
      <steps>
        <step>
          <action>
            <call>
              <actionword>log in</actionword>
              <arguments><remember><booleanliteral>{flag}</booleanliteral></remember></arguments>
            </call>
          </action>
        </step>
      </steps>
    </scenario>
  </scenarios>
  <actionwords/>
</project>
"""


@pytest.mark.parametrize("flag,expected", [("true", True), ("false", False)])
def test_minimal_project(flag, expected):
    project = parse(MINIMAL.format(flag=flag))
    assert isinstance(project, Project)
    assert project.name == "Minimal"
    assert project.description == "One scenario, one call"
    [scenario] = project.scenarios.items
    assert isinstance(scenario, Scenario)
    [step] = scenario.body
    assert step == Step("action", Call("log in", (Argument("remember", BooleanLiteral(expected)),)))
    assert project.actionwords == Actionwords(())


def test_login_example(examples_dir):
    project = parse_file(examples_dir / "login.xml")
    valid, empty = project.scenarios.items
    assert valid.tags == (Tag("smoke"), Tag("priority", "high"))
    assert [p.name for p in valid.parameters] == ["user", "password"]
    assert [type(s) for s in valid.body] == [Call, Call, Assign, While]
    assert valid.body[1].arguments == (Argument("user", Variable("user")), Argument("password", Variable("password")))
    assert valid.body[2] == Assign(Variable("attempts"), NumericLiteral(3))
    assert empty.body == () and empty.description == ""

    names = [a.name for a in project.actionwords.items]
    assert names == ["open login page", "fill in credentials", "submit"]
    [conditional] = project.actionwords.items[1].body
    assert isinstance(conditional, IfThen)
    assert conditional.condition == UnaryExpression("not", BooleanLiteral(False))
    assert conditional.else_body == ()
    assert [s.key for s in conditional.then_body] == ["result"]


def test_broken_example_keeps_building(examples_dir):
    builder = Builder(document.load_file(examples_dir / "broken.xml"), BuilderOptions(verbose=True))
    project = builder.build_project()
    [scenario] = project.scenarios.items
    assert scenario.body == (Assign(Variable("x"), None), None, Call("done"))
    assert len(builder.failures) == 2
    assert any("<teleport" in d.element for d in builder.diagnostics)
    assert any("<index>" in d.element for d in builder.diagnostics)


def test_broken_example_quiet_has_no_diagnostics(examples_dir):
    builder = Builder(document.load_file(examples_dir / "broken.xml"))
    builder.build_project()
    assert builder.diagnostics == []
    assert len(builder.failures) == 2


def test_build_project_caches_and_rebuilds_equal_tree(examples_dir):
    builder = Builder(document.load_file(examples_dir / "broken.xml"))
    first = builder.build_project()
    assert builder.project is first
    second = builder.build_project()
    assert second == first
    assert len(builder.failures) == 2


def test_project_nested_in_export_element():
    project = parse("<export><project><name>P</name><description/><scenarios/><actionwords/></project></export>")
    assert project == Project("P", "", Scenarios(()), Actionwords(()))


@pytest.mark.parametrize("missing", ["name", "description", "scenarios", "actionwords"])
def test_missing_project_section_is_fatal(missing):
    sections = {
        "name": "<name>P</name>",
        "description": "<description/>",
        "scenarios": "<scenarios/>",
        "actionwords": "<actionwords/>",
    }
    del sections[missing]
    with pytest.raises(ProjectStructureError) as exc_info:
        parse("<project>" + "".join(sections.values()) + "</project>", path="p.xml")
    assert missing in str(exc_info.value)


def test_missing_project_element_is_fatal():
    with pytest.raises(ProjectStructureError):
        parse("<scenarios/>")


def test_malformed_xml_is_fatal():
    with pytest.raises(DocumentError):
        parse("<project>")
