"""Generate new projects from a repository of starter templates.

Templates live under ``<starters_root>/templates/<template_id>/<flavor>/`` and
may be described by an optional ``templates/manifest.json``. The package
discovers the available templates, picks a flavor and copies it into a fresh
directory with project specific placeholders substituted.
"""

from __future__ import annotations

from .config import ProjectConfig, StartersConfig, resolve_starters_path
from .discovery import (
    TemplateChoice,
    TemplateInfo,
    build_flavor_choices,
    build_template_choices,
    discover_templates,
    format_template_list,
    get_template_path,
    resolve_template_flavor_path,
    resolve_template_next_steps,
    template_exists,
)
from .errors import (
    DiscoveryError,
    FlavorError,
    ManifestError,
    ProjectNameError,
    StarterError,
    TargetDirectoryError,
    TemplateNotFoundError,
)
from .flavors import FlavorSelection, FlavorSelectionReason, select_flavor
from .manifest import (
    ManifestOutcome,
    ManifestStatus,
    TemplateManifest,
    TemplateManifestEntry,
    TemplateManifestFlavor,
    normalize_manifest,
    read_manifest,
)
from .naming import project_name_from_path, to_package_name, to_python_package
from .scaffold import (
    GenerateOptions,
    ProjectScaffolder,
    ensure_env_files,
    ensure_gitignore_has_env_entries,
    generate_project,
)
from .template import PlaceholderSubstituter, build_substitutions

__all__ = [
    "DiscoveryError",
    "FlavorError",
    "FlavorSelection",
    "FlavorSelectionReason",
    "GenerateOptions",
    "ManifestError",
    "ManifestOutcome",
    "ManifestStatus",
    "PlaceholderSubstituter",
    "ProjectConfig",
    "ProjectNameError",
    "ProjectScaffolder",
    "StarterError",
    "StartersConfig",
    "TargetDirectoryError",
    "TemplateChoice",
    "TemplateInfo",
    "TemplateManifest",
    "TemplateManifestEntry",
    "TemplateManifestFlavor",
    "TemplateNotFoundError",
    "build_flavor_choices",
    "build_substitutions",
    "build_template_choices",
    "discover_templates",
    "ensure_env_files",
    "ensure_gitignore_has_env_entries",
    "format_template_list",
    "generate_project",
    "get_template_path",
    "normalize_manifest",
    "project_name_from_path",
    "read_manifest",
    "resolve_starters_path",
    "resolve_template_flavor_path",
    "resolve_template_next_steps",
    "select_flavor",
    "template_exists",
    "to_package_name",
    "to_python_package",
]

__version__ = "0.1.0"
