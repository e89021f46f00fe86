"""Schema and loader for ``templates/manifest.json``.

The manifest is optional. Reading it never raises: :func:`read_manifest`
returns a :class:`ManifestOutcome` whose :attr:`~ManifestOutcome.status`
distinguishes a missing file from one that is broken, so callers can fall back
to a directory scan silently or with a warning.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Annotated, Any, Mapping

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ManifestError

__all__ = [
    "MANIFEST_FILENAME",
    "TEMPLATES_DIR",
    "ManifestOutcome",
    "ManifestStatus",
    "TemplateManifest",
    "TemplateManifestEntry",
    "TemplateManifestFlavor",
    "manifest_path",
    "normalize_manifest",
    "read_manifest",
]


TEMPLATES_DIR = "templates"
MANIFEST_FILENAME = "manifest.json"


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must be a non-empty string")
    return value


def _is_absolute(value: str) -> bool:
    return PurePosixPath(value).is_absolute() or PureWindowsPath(value).is_absolute()


NonEmptyStr = Annotated[str, AfterValidator(_require_text)]


class TemplateManifestFlavor(BaseModel):
    """A single flavor declared for a template."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: NonEmptyStr = Field(..., description="Flavor identifier, e.g. ``ts`` or ``py``.")
    path: str | None = Field(None, description="Directory relative to the template, when it differs from the id.")
    next_steps: tuple[str, ...] | None = Field(
        None,
        alias="nextSteps",
        description="Commands suggested to the user after generating this flavor.",
    )

    @field_validator("path")
    @classmethod
    def path_must_be_relative(cls, value: str | None) -> str | None:
        if value and _is_absolute(value):
            raise ValueError("flavor path must be relative")
        return value

    @property
    def relative_path(self) -> str:
        """Directory of the flavor relative to its template directory."""

        return self.path or self.id


class TemplateManifestEntry(BaseModel):
    """Metadata describing one template and its flavors."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: NonEmptyStr
    name: NonEmptyStr
    description: NonEmptyStr
    flavors: tuple[TemplateManifestFlavor, ...] = Field(..., min_length=1)
    order: float | None = None
    category: str | None = None
    aliases: tuple[str, ...] | None = None
    hidden: bool | None = None
    deprecated: bool | None = None

    @field_validator("flavors", mode="before")
    @classmethod
    def expand_flavor_shorthand(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [{"id": item} if isinstance(item, str) else item for item in value]
        return value

    def find_flavor(self, flavor_id: str) -> TemplateManifestFlavor | None:
        for flavor in self.flavors:
            if flavor.id == flavor_id:
                return flavor
        return None


class TemplateManifest(BaseModel):
    """Normalised manifest contents."""

    model_config = ConfigDict(frozen=True)

    version: float | None = None
    templates: tuple[TemplateManifestEntry, ...] = ()

    def find_template(self, template_id: str) -> TemplateManifestEntry | None:
        for entry in self.templates:
            if entry.id == template_id:
                return entry
        return None


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(segment) for segment in error["loc"])
        message = error["msg"]
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def _entry_label(raw: Any, index: int) -> str:
    if isinstance(raw, Mapping):
        template_id = raw.get("id")
        if isinstance(template_id, str) and template_id.strip():
            return f"template entry {template_id!r}"
    return f"template entry at index {index}"


def normalize_manifest(data: Any, path: str | Path) -> TemplateManifest:
    """Validate parsed manifest JSON and return a :class:`TemplateManifest`.

    Flavors given as bare strings are expanded into ``{"id": ...}`` objects.

    Raises
    ------
    ManifestError
        If the root is not an object, ``templates`` is not a list, or any entry
        or flavor violates the schema.
    """

    if not isinstance(data, Mapping):
        raise ManifestError(path, "Manifest must be an object")

    raw_templates = data.get("templates")
    if not isinstance(raw_templates, list):
        raise ManifestError(path, "Manifest must include a templates array")

    entries: list[TemplateManifestEntry] = []
    for index, raw in enumerate(raw_templates):
        if not isinstance(raw, Mapping):
            raise ManifestError(path, f"Invalid template entry at index {index}")
        try:
            entries.append(TemplateManifestEntry.model_validate(raw))
        except ValidationError as exc:
            label = _entry_label(raw, index)
            raise ManifestError(path, f"Invalid {label} ({_describe_validation_error(exc)})") from exc

    version = data.get("version")
    if version is not None and (isinstance(version, bool) or not isinstance(version, (int, float))):
        raise ManifestError(path, "Manifest version must be a number")

    return TemplateManifest(version=version, templates=tuple(entries))


class ManifestStatus(str, Enum):
    """Result kinds produced by :func:`read_manifest`."""

    ABSENT = "absent"
    LOADED = "loaded"
    INVALID = "invalid"
    UNREADABLE = "unreadable"


@dataclass(frozen=True, slots=True)
class ManifestOutcome:
    """What happened when the manifest was read."""

    status: ManifestStatus
    path: Path
    manifest: TemplateManifest | None = None
    error: ManifestError | None = None

    @property
    def failed(self) -> bool:
        """``True`` when a manifest exists but could not be used."""

        return self.status in (ManifestStatus.INVALID, ManifestStatus.UNREADABLE)

    def warning(self) -> str | None:
        """Return the user facing warning for a failed read, if any."""

        if not self.failed or self.error is None:
            return None
        return (
            f"Warning: Unable to read {self.path} ({self.error.reason}). "
            "Falling back to directory scan."
        )


def manifest_path(starters_root: str | Path) -> Path:
    return Path(starters_root) / TEMPLATES_DIR / MANIFEST_FILENAME


def read_manifest(starters_root: str | Path) -> ManifestOutcome:
    """Read and normalise the manifest below ``starters_root``."""

    path = manifest_path(starters_root)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return ManifestOutcome(ManifestStatus.ABSENT, path)
    except OSError as exc:
        error = ManifestError(path, f"Unable to read manifest ({exc.strerror or exc})")
        return ManifestOutcome(ManifestStatus.UNREADABLE, path, error=error)

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        error = ManifestError(path, "Manifest is not valid UTF-8")
        return ManifestOutcome(ManifestStatus.UNREADABLE, path, error=error)

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        error = ManifestError(path, "Invalid JSON in manifest")
        return ManifestOutcome(ManifestStatus.INVALID, path, error=error)

    try:
        manifest = normalize_manifest(data, path)
    except ManifestError as exc:
        return ManifestOutcome(ManifestStatus.INVALID, path, error=exc)

    return ManifestOutcome(ManifestStatus.LOADED, path, manifest=manifest)
