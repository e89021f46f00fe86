"""String normalisation utilities used throughout the project."""

from __future__ import annotations

import re
from pathlib import Path

__all__ = [
    "BINARY_EXTENSIONS",
    "is_binary_file",
    "project_name_from_path",
    "to_package_name",
    "to_python_package",
]


BINARY_EXTENSIONS = frozenset(
    {
        ".png",
        ".jpg",
        ".jpeg",
        ".gif",
        ".ico",
        ".webp",
        ".svg",
        ".woff",
        ".woff2",
        ".ttf",
        ".eot",
        ".otf",
        ".zip",
        ".tar",
        ".gz",
        ".bz2",
        ".7z",
        ".rar",
        ".pdf",
        ".exe",
        ".dll",
        ".so",
        ".dylib",
        ".node",
        ".wasm",
    }
)

_WHITESPACE = re.compile(r"\s+")

_PACKAGE_INVALID = re.compile(r"[^a-z0-9\-@/]")
_PACKAGE_LEADING = re.compile(r"^[^a-z@]+")
_MULTIPLE_HYPHENS = re.compile(r"-+")

_MODULE_INVALID = re.compile(r"[^a-z0-9_]")
_MODULE_LEADING = re.compile(r"^[^a-z]+")
_MULTIPLE_UNDERSCORES = re.compile(r"_+")


def to_package_name(name: str) -> str:
    """Return an npm style package name derived from ``name``.

    Whitespace runs and underscores become single hyphens, characters outside
    ``[a-z0-9-@/]`` are dropped and the result never starts with anything
    other than a letter or ``@``. Scoped names such as ``@scope/pkg`` are kept.
    Applying the function to its own output returns the same value.
    """

    candidate = _WHITESPACE.sub("-", name.lower())
    candidate = candidate.replace("_", "-")
    candidate = _PACKAGE_INVALID.sub("", candidate)
    candidate = _PACKAGE_LEADING.sub("", candidate)
    candidate = _MULTIPLE_HYPHENS.sub("-", candidate)
    return candidate.strip("-")


def to_python_package(name: str) -> str:
    """Return an importable Python package name derived from ``name``."""

    candidate = _WHITESPACE.sub("_", name.lower())
    candidate = candidate.replace("-", "_")
    candidate = _MODULE_INVALID.sub("", candidate)
    candidate = _MODULE_LEADING.sub("", candidate)
    candidate = _MULTIPLE_UNDERSCORES.sub("_", candidate)
    return candidate.strip("_")


def project_name_from_path(target_dir: str | Path) -> str:
    """Return the project name implied by the generation target directory."""

    return Path(target_dir).expanduser().resolve().name


def is_binary_file(path: str | Path, binary_extensions: frozenset[str] = BINARY_EXTENSIONS) -> bool:
    return Path(path).suffix.lower() in binary_extensions
