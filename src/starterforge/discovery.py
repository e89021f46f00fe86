"""Template discovery for a starters repository.

Layout: ``<starters_root>/templates/<template_id>/<flavor>/``. When
``templates/manifest.json`` is present its declarations are reconciled against
the directories that actually exist; otherwise the layout is scanned.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Callable, Iterable, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from .errors import DiscoveryError
from .manifest import (
    TEMPLATES_DIR,
    ManifestOutcome,
    ManifestStatus,
    TemplateManifest,
    read_manifest,
)

__all__ = [
    "TemplateChoice",
    "TemplateInfo",
    "build_flavor_choices",
    "build_template_choices",
    "discover_templates",
    "format_template_list",
    "get_template_path",
    "resolve_template_flavor_path",
    "resolve_template_next_steps",
    "template_exists",
]


LOGGER = logging.getLogger(__name__)

WarningCallback = Callable[[str], None]


class TemplateInfo(BaseModel):
    """A template available for generation and the flavors found on disk."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., description="Template identifier, also its directory name.")
    name: str | None = Field(None, description="Display name.")
    description: str | None = Field(None, description="One line summary from the manifest.")
    flavors: tuple[str, ...] = Field(..., description="Flavor ids whose directories exist.")
    flavor_paths: dict[str, str] | None = Field(
        None, description="Relative directory per flavor, only where it differs from the flavor id."
    )
    flavor_next_steps: dict[str, tuple[str, ...]] | None = Field(
        None, description="Manifest declared next steps per flavor."
    )
    path: Path = Field(..., description="Template directory.")
    order: float | None = None
    category: str | None = None
    aliases: tuple[str, ...] | None = None
    hidden: bool | None = None
    deprecated: bool | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def flavor_path(self, flavor: str) -> Path:
        """Return the directory holding ``flavor`` for this template."""

        relative = (self.flavor_paths or {}).get(flavor, flavor)
        return self.path / relative


class TemplateChoice(NamedTuple):
    """Entry offered by an interactive selection menu."""

    title: str
    value: str
    description: str | None = None


def _templates_dir(starters_root: str | Path) -> Path:
    return Path(starters_root) / TEMPLATES_DIR


def _report_manifest_problem(outcome: ManifestOutcome, on_warning: WarningCallback | None) -> None:
    message = outcome.warning()
    if message is None:
        return
    if outcome.status is ManifestStatus.UNREADABLE:
        LOGGER.warning("manifest at %s could not be read: %s", outcome.path, outcome.error)
    else:
        LOGGER.info("manifest at %s is invalid: %s", outcome.path, outcome.error)
    if on_warning is not None:
        on_warning(message)


def discover_templates(
    starters_root: str | Path,
    on_warning: WarningCallback | None = None,
) -> list[TemplateInfo]:
    """Return the templates available under ``starters_root``.

    Parameters
    ----------
    starters_root:
        Directory containing ``templates/``.
    on_warning:
        Called with a message starting with ``"Warning:"`` when a manifest
        exists but cannot be used. Discovery then falls back to scanning.

    Raises
    ------
    DiscoveryError
        If ``<starters_root>/templates`` does not exist.
    """

    templates_dir = _templates_dir(starters_root)
    if not templates_dir.is_dir():
        raise DiscoveryError(templates_dir)

    outcome = read_manifest(starters_root)
    if outcome.manifest is not None:
        LOGGER.debug("discovering templates from manifest %s", outcome.path)
        templates = _templates_from_manifest(templates_dir, outcome.manifest)
    else:
        _report_manifest_problem(outcome, on_warning)
        LOGGER.debug("scanning %s for templates", templates_dir)
        templates = _scan_templates(templates_dir)

    return _sort_templates(templates)


def _templates_from_manifest(templates_dir: Path, manifest: TemplateManifest) -> list[TemplateInfo]:
    templates: list[TemplateInfo] = []
    for entry in manifest.templates:
        template_path = templates_dir / entry.id
        if not template_path.is_dir():
            LOGGER.debug("manifest template %s has no directory, skipping", entry.id)
            continue

        flavors: list[str] = []
        flavor_paths: dict[str, str] = {}
        next_steps: dict[str, tuple[str, ...]] = {}
        for flavor in entry.flavors:
            relative = flavor.relative_path
            if not (template_path / relative).is_dir():
                LOGGER.debug("flavor %s/%s not found at %s", entry.id, flavor.id, relative)
                continue
            flavors.append(flavor.id)
            if relative != flavor.id:
                flavor_paths[flavor.id] = relative
            if flavor.next_steps:
                next_steps[flavor.id] = flavor.next_steps

        if not flavors:
            continue

        templates.append(
            TemplateInfo(
                id=entry.id,
                name=entry.name,
                description=entry.description,
                flavors=tuple(flavors),
                flavor_paths=flavor_paths or None,
                flavor_next_steps=next_steps or None,
                path=template_path,
                order=entry.order,
                category=entry.category,
                aliases=entry.aliases,
                hidden=entry.hidden,
                deprecated=entry.deprecated,
            )
        )
    return templates


def _subdirectories(directory: Path) -> list[str]:
    return sorted(child.name for child in directory.iterdir() if child.is_dir())


def _scan_templates(templates_dir: Path) -> list[TemplateInfo]:
    templates: list[TemplateInfo] = []
    for template_id in _subdirectories(templates_dir):
        template_path = templates_dir / template_id
        flavors = _subdirectories(template_path)
        if not flavors:
            continue
        templates.append(
            TemplateInfo(id=template_id, name=template_id, flavors=tuple(flavors), path=template_path)
        )
    return templates


def _sort_templates(templates: Iterable[TemplateInfo]) -> list[TemplateInfo]:
    # sorted() is stable, so ties keep manifest or scan order.
    def key(template: TemplateInfo) -> tuple[float, str]:
        order = template.order if template.order is not None else math.inf
        return order, template.display_name.lower()

    return sorted(templates, key=key)


def get_template_path(starters_root: str | Path, template_id: str, flavor: str) -> Path:
    """Return the conventional ``templates/<id>/<flavor>`` location."""

    return _templates_dir(starters_root) / template_id / flavor


def resolve_template_flavor_path(starters_root: str | Path, template_id: str, flavor: str) -> Path:
    """Return the directory of ``template_id``/``flavor`` honouring manifest overrides.

    Manifest problems are ignored here; the conventional layout is used
    instead, exactly as :func:`discover_templates` would fall back to it.
    """

    outcome = read_manifest(starters_root)
    if outcome.manifest is not None:
        entry = outcome.manifest.find_template(template_id)
        declared = entry.find_flavor(flavor) if entry is not None else None
        if declared is not None:
            return _templates_dir(starters_root) / template_id / declared.relative_path
    return get_template_path(starters_root, template_id, flavor)


def template_exists(starters_root: str | Path, template_id: str, flavor: str) -> bool:
    return resolve_template_flavor_path(starters_root, template_id, flavor).is_dir()


def resolve_template_next_steps(
    starters_root: str | Path, template_id: str, flavor: str
) -> tuple[str, ...] | None:
    """Return the manifest declared next steps for a flavor, if any."""

    outcome = read_manifest(starters_root)
    if outcome.manifest is None:
        return None
    entry = outcome.manifest.find_template(template_id)
    declared = entry.find_flavor(flavor) if entry is not None else None
    if declared is None or not declared.next_steps:
        return None
    return declared.next_steps


def format_template_list(templates: Iterable[TemplateInfo]) -> str:
    """Render the catalog as printed by ``--list``."""

    templates = list(templates)
    if not templates:
        return "No templates found."

    lines = ["Available templates:", ""]
    for template in templates:
        if template.name and template.name != template.id:
            label = f"{template.name} ({template.id})"
        else:
            label = template.id
        lines.append(f"  {label}")
        if template.description:
            lines.append(f"    {template.description}")
        lines.append(f"    flavors: {', '.join(template.flavors)}")
    return "\n".join(lines)


def build_template_choices(templates: Iterable[TemplateInfo]) -> list[TemplateChoice]:
    choices = []
    for template in templates:
        parts = []
        if template.description:
            parts.append(template.description)
        if template.flavors:
            parts.append(f"flavors: {', '.join(template.flavors)}")
        choices.append(
            TemplateChoice(
                title=template.display_name,
                value=template.id,
                description=" | ".join(parts) if parts else None,
            )
        )
    return choices


def build_flavor_choices(template: TemplateInfo) -> list[TemplateChoice]:
    flavor_paths = template.flavor_paths or {}
    choices = []
    for flavor in template.flavors:
        relative = flavor_paths.get(flavor)
        title = f"{flavor} ({relative})" if relative else flavor
        choices.append(TemplateChoice(title=title, value=flavor))
    return choices
