"""Builder options, optionally read from a YAML file."""

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from zest.errors import ConfigError


@dataclass
class BuilderOptions:
    verbose: bool = False  # record and report every node that fails to build


def load_options(path: Path) -> BuilderOptions:
    """Read options from a YAML mapping, e.g. ``verbose: true``."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Options file not found: {path}", path=str(path))
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", path=str(path)) from e
    if data is None:
        return BuilderOptions()
    if not isinstance(data, dict):
        raise ConfigError("Options file must contain a mapping", path=str(path))

    known = {f.name for f in fields(BuilderOptions)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise ConfigError(f"Unknown option(s): {', '.join(unknown)}", path=str(path))
    verbose = data.get("verbose", False)
    if not isinstance(verbose, bool):
        raise ConfigError(f"'verbose' must be true or false, got {verbose!r}", path=str(path))
    return BuilderOptions(verbose=verbose)
