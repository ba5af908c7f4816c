"""Zest: build an AST from XML behaviour-driven test projects."""

__version__ = "0.1.0"
