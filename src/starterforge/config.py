"""Configuration shared by the generator and the command line interface."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .errors import ProjectNameError
from .naming import to_package_name, to_python_package

__all__ = [
    "DEFAULT_FLAVOR",
    "PLACEHOLDERS",
    "STARTERS_PATH_ENV",
    "ProjectConfig",
    "StartersConfig",
    "resolve_starters_path",
]


DEFAULT_FLAVOR = "ts"
STARTERS_PATH_ENV = "STARTERFORGE_STARTERS_PATH"

PLACEHOLDERS = {
    "PROJECT_NAME": "__PROJECT_NAME__",
    "PACKAGE_NAME": "__PACKAGE_NAME__",
    "PY_PACKAGE": "__PY_PACKAGE__",
}


def resolve_starters_path(
    cli_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Return the starters root from ``cli_path`` or the environment.

    An explicit ``cli_path`` wins over ``STARTERFORGE_STARTERS_PATH``. ``None``
    is returned when neither is set.
    """

    if cli_path:
        return Path(cli_path).expanduser().resolve()

    env = os.environ if environ is None else environ
    value = env.get(STARTERS_PATH_ENV)
    if value:
        return Path(value).expanduser().resolve()
    return None


@dataclass(frozen=True, slots=True)
class StartersConfig:
    """Where templates come from and which flavor is preferred.

    Built once at the command line boundary; library functions receive paths
    explicitly and never consult the environment themselves.
    """

    starters_path: Path
    default_flavor: str = DEFAULT_FLAVOR

    @classmethod
    def from_env(
        cls,
        cli_path: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
        *,
        default_flavor: str = DEFAULT_FLAVOR,
    ) -> "StartersConfig":
        starters_path = resolve_starters_path(cli_path, environ)
        if starters_path is None:
            raise ValueError(
                f"starters path is not configured; pass --starters-path or set {STARTERS_PATH_ENV}"
            )
        return cls(starters_path=starters_path, default_flavor=default_flavor)


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Identifiers derived from the name of the project being generated.

    Attributes
    ----------
    name:
        The project name exactly as given, usually the target directory name.
    package_name:
        An npm style package name, see :func:`~starterforge.naming.to_package_name`.
    python_package:
        An importable module name, see :func:`~starterforge.naming.to_python_package`.
    """

    name: str
    package_name: str
    python_package: str

    @classmethod
    def from_name(cls, name: str) -> "ProjectConfig":
        if not name.strip():
            raise ProjectNameError(name)
        return cls(
            name=name,
            package_name=to_package_name(name),
            python_package=to_python_package(name),
        )

    def substitutions(self) -> Mapping[str, str]:
        """Return the placeholder token to value mapping used in text files."""

        return {
            PLACEHOLDERS["PROJECT_NAME"]: self.name,
            PLACEHOLDERS["PACKAGE_NAME"]: self.package_name,
            PLACEHOLDERS["PY_PACKAGE"]: self.python_package,
        }
