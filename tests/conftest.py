"""Shared pytest fixtures."""

import xml.etree.ElementTree as ET

import pytest
from pathlib import Path

from zest.builder import Builder
from zest.config import BuilderOptions


@pytest.fixture
def examples_dir():
    """Path to tests/examples/ containing .xml projects."""
    return Path(__file__).parent / "examples"


@pytest.fixture(params=["login.xml", "broken.xml"])
def example_file(examples_dir, request):
    """Parametrized: one of the example project files."""
    return examples_dir / request.param


@pytest.fixture
def builder():
    """Quiet builder over an empty project; rules are exercised element by element."""
    return Builder(ET.fromstring("<project/>"))


@pytest.fixture
def verbose_builder():
    return Builder(ET.fromstring("<project/>"), BuilderOptions(verbose=True))


@pytest.fixture
def xml():
    """Parse an XML snippet into an element."""
    return ET.fromstring
