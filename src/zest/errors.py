"""Structured errors for Zest (document, project structure, node building, config)."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ZestError(Exception):
    """Base for all Zest errors."""
    message: str
    element: Optional[str] = None  # raw XML of the offending element
    path: Optional[str] = None

    def __str__(self) -> str:
        loc = f"{self.path}: " if self.path else ""
        return f"{loc}{self.message}"


class DocumentError(ZestError):
    """Source text is not a well-formed XML document."""
    pass


class ProjectStructureError(ZestError):
    """The project element or one of its top-level sections is missing."""
    pass


class ConfigError(ZestError):
    """Options file is missing or does not hold a valid options mapping."""
    pass


class BuildError(ZestError):
    """A single node could not be built. Contained by the builder, never fatal."""
    pass


class UnknownElementKind(BuildError):
    pass


class MissingRequiredChild(BuildError):
    pass


class MalformedValue(BuildError):
    """Literal text cannot be read as its declared kind."""
    pass
