"""Placeholder substitution for generated project files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping

from .config import ProjectConfig
from .naming import BINARY_EXTENSIONS, is_binary_file

__all__ = ["PlaceholderSubstituter", "build_substitutions"]


LOGGER = logging.getLogger(__name__)

SKIPPED_DIRECTORIES = frozenset({"node_modules", ".git"})


def build_substitutions(project_name: str) -> dict[str, str]:
    """Return the ordered placeholder map for ``project_name``."""

    return dict(ProjectConfig.from_name(project_name).substitutions())


@dataclass(slots=True)
class PlaceholderSubstituter:
    """Replace literal placeholder tokens such as ``__PROJECT_NAME__`` in text."""

    substitutions: Mapping[str, str]
    binary_extensions: frozenset[str] = BINARY_EXTENSIONS
    skip_directories: frozenset[str] = SKIPPED_DIRECTORIES

    @classmethod
    def for_project(cls, project_name: str) -> "PlaceholderSubstituter":
        return cls(build_substitutions(project_name))

    def substitute_string(self, text: str) -> str:
        for placeholder, value in self.substitutions.items():
            if placeholder in text:
                text = text.replace(placeholder, value)
        return text

    def substitute_file(self, path: str | Path) -> bool:
        """Rewrite ``path`` in place and return ``True`` when it changed.

        Files with a binary extension are not opened. Files that cannot be
        read or are not UTF-8 are left untouched.
        """

        path = Path(path)
        if is_binary_file(path, self.binary_extensions):
            return False

        try:
            text = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.debug("skipping %s: %s", path, exc)
            return False

        rendered = self.substitute_string(text)
        if rendered == text:
            return False

        path.write_bytes(rendered.encode("utf-8"))
        return True

    def substitute_directory(self, root: str | Path) -> list[Path]:
        """Substitute placeholders in every text file below ``root``.

        Symlinks are neither followed nor rewritten. Returns the files that
        were modified.
        """

        return [path for path in self._walk(Path(root)) if self.substitute_file(path)]

    def _walk(self, root: Path) -> Iterator[Path]:
        pending = [root]
        while pending:
            directory = pending.pop()
            for entry in sorted(directory.iterdir()):
                if entry.is_symlink():
                    continue
                if entry.is_dir():
                    if entry.name not in self.skip_directories:
                        pending.append(entry)
                elif entry.is_file():
                    yield entry

