"""Exception types raised while discovering and generating starter projects."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

__all__ = [
    "StarterError",
    "ManifestError",
    "DiscoveryError",
    "ProjectNameError",
    "FlavorError",
    "TargetDirectoryError",
    "TemplateNotFoundError",
    "LIST_HINT",
]


LIST_HINT = "Run with --list to see available templates."


class StarterError(RuntimeError):
    """Base class for every error raised by starterforge."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ManifestError(StarterError):
    """Raised when ``templates/manifest.json`` exists but cannot be used."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason}: {self.path}")


class DiscoveryError(StarterError):
    """Raised when the starters root has no ``templates`` directory."""

    def __init__(self, templates_dir: str | Path) -> None:
        self.path = Path(templates_dir)
        super().__init__(
            f"Templates directory not found: {self.path}\n"
            "Make sure the starters path points to the starters repo root."
        )


class ProjectNameError(StarterError, ValueError):
    """Raised when the project name is blank."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Project name must not be empty: {name!r}")


class FlavorError(StarterError):
    """Raised when no valid flavor can be chosen for a template."""

    def __init__(
        self,
        message: str,
        *,
        template_id: str,
        flavor: str | None = None,
        available: Sequence[str] = (),
    ) -> None:
        self.template_id = template_id
        self.flavor = flavor
        self.available = tuple(available)
        super().__init__(message)


class TargetDirectoryError(StarterError):
    """Raised when the generation target cannot safely receive a project."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(message)


class TemplateNotFoundError(StarterError):
    """Raised when a template/flavor pair does not resolve to a directory."""

    def __init__(self, template_id: str, flavor: str, path: str | Path) -> None:
        self.template_id = template_id
        self.flavor = flavor
        self.path = Path(path)
        super().__init__(
            f"Template not found: {template_id}/{flavor}\n"
            f"Path: {self.path}\n"
            f"{LIST_HINT}"
        )
