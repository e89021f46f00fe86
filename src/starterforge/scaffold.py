"""Generate a project directory from a starter template."""

from __future__ import annotations

import logging
import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Sequence

from .discovery import resolve_template_flavor_path
from .errors import TargetDirectoryError, TemplateNotFoundError
from .template import PlaceholderSubstituter

__all__ = [
    "ENV_NAMES",
    "EXCLUDED_DIRECTORIES",
    "EXCLUDED_ROOT_FILES",
    "GenerateOptions",
    "ProjectScaffolder",
    "copy_template",
    "ensure_env_files",
    "ensure_gitignore_has_env_entries",
    "generate_project",
    "validate_target_dir",
]


LOGGER = logging.getLogger(__name__)

EXCLUDED_DIRECTORIES = frozenset({".git", "node_modules", "dist", ".tmp", "__pycache__", ".venv", "venv"})
EXCLUDED_ROOT_FILES = frozenset({"package-lock.json", "pnpm-lock.yaml", "yarn.lock", "bun.lockb", ".env"})
ENV_NAMES = ("agent", "client")

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True, slots=True)
class GenerateOptions:
    """Everything needed to generate one project."""

    target_dir: Path
    template_id: str
    flavor: str
    project_name: str
    starters_path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "target_dir", Path(self.target_dir))
        object.__setattr__(self, "starters_path", Path(self.starters_path))


def _is_env_template(name: str) -> bool:
    return name.startswith(".env.") and name.endswith(".template")


def validate_target_dir(target: str | Path) -> None:
    """Fail unless ``target`` is missing or an empty directory."""

    target = Path(target)
    if not target.exists():
        return
    if not target.is_dir():
        raise TargetDirectoryError(target, f"Target path exists but is not a directory: {target}")
    if any(target.iterdir()):
        raise TargetDirectoryError(
            target,
            f"Target directory is not empty: {target}\n"
            "Please choose an empty directory or a new path.",
        )


def _copy_filter(source_root: Path) -> Callable[[str, list[str]], Iterable[str]]:
    def ignore(directory: str, names: list[str]) -> set[str]:
        at_root = Path(directory) == source_root
        ignored = set()
        for name in names:
            if _is_env_template(name):
                ignored.add(name)
            elif name in EXCLUDED_DIRECTORIES and os.path.isdir(os.path.join(directory, name)):
                ignored.add(name)
            elif at_root and name in EXCLUDED_ROOT_FILES:
                ignored.add(name)
        return ignored

    return ignore


def copy_template(source: str | Path, destination: str | Path) -> None:
    """Copy ``source`` to ``destination`` leaving out build and VCS artifacts.

    Symlinks are recreated as symlinks and file timestamps are preserved.
    ``destination`` may already exist as an empty directory.
    """

    source = Path(source)
    shutil.copytree(
        source,
        destination,
        symlinks=True,
        ignore=_copy_filter(source),
        dirs_exist_ok=True,
    )


def ensure_env_files(template_dir: str | Path, target_dir: str | Path, names: Sequence[str] = ENV_NAMES) -> None:
    """Create ``.env.<name>`` files from their ``.env.<name>.template`` sources.

    Existing env files are never overwritten. Content is copied verbatim.
    """

    template_dir = Path(template_dir)
    target_dir = Path(target_dir)
    for name in names:
        env_path = target_dir / f".env.{name}"
        if env_path.exists():
            LOGGER.debug("keeping existing %s", env_path)
            continue

        source = template_dir / f".env.{name}.template"
        if source.is_file():
            shutil.copyfile(source, env_path)
        else:
            LOGGER.warning("Missing %s, skipping env init", source)


def ensure_gitignore_has_env_entries(
    target_dir: str | Path,
    entries: Sequence[str] = tuple(f".env.{name}" for name in ENV_NAMES),
) -> None:
    """Make sure ``.gitignore`` in ``target_dir`` lists every entry in ``entries``."""

    gitignore = Path(target_dir) / ".gitignore"
    if not gitignore.exists():
        gitignore.write_bytes(("\n".join(entries) + "\n").encode("utf-8"))
        return

    content = gitignore.read_bytes().decode("utf-8", errors="surrogateescape")
    existing = {line.strip() for line in _LINE_BREAK.split(content) if line.strip()}
    missing = [entry for entry in entries if entry not in existing]
    if not missing:
        return

    separator = "" if not content or content.endswith("\n") else "\n"
    updated = f"{content}{separator}" + "\n".join(missing) + "\n"
    gitignore.write_bytes(updated.encode("utf-8", errors="surrogateescape"))


@dataclass(slots=True)
class ProjectScaffolder:
    """Copy a template flavor into a new directory and personalise it."""

    env_names: tuple[str, ...] = ENV_NAMES

    def create(self, options: GenerateOptions) -> Path:
        """Generate the project described by ``options`` and return its path.

        Raises
        ------
        TemplateNotFoundError
            If the template flavor does not resolve to a directory.
        TargetDirectoryError
            If the target exists and is not an empty directory.
        ProjectNameError
            If the project name is blank.

        All three are raised before anything is written.
        """

        substituter = PlaceholderSubstituter.for_project(options.project_name)
        template_path = resolve_template_flavor_path(options.starters_path, options.template_id, options.flavor)
        if not template_path.is_dir():
            raise TemplateNotFoundError(options.template_id, options.flavor, template_path)

        target_path = options.target_dir.expanduser().resolve()
        validate_target_dir(target_path)

        LOGGER.info("copying template %s/%s to %s", options.template_id, options.flavor, target_path)
        copy_template(template_path, target_path)

        LOGGER.info("substituting placeholders for %s", options.project_name)
        changed = substituter.substitute_directory(target_path)
        LOGGER.debug("rewrote %d files", len(changed))

        ensure_env_files(template_path, target_path, self.env_names)
        ensure_gitignore_has_env_entries(target_path, [f".env.{name}" for name in self.env_names])

        LOGGER.info("project created at %s", target_path)
        return target_path


def generate_project(options: GenerateOptions) -> Path:
    return ProjectScaffolder().create(options)
