from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Mapping

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


StartersFactory = Callable[..., Path]


def write_tree(root: Path, files: Mapping[str, str | bytes]) -> None:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")


@pytest.fixture()
def make_starters(tmp_path: Path) -> StartersFactory:
    """Build a starters root with ``templates/<id>/<flavor>`` directories.

    ``layout`` maps template ids to flavor directory names (or to a mapping
    of flavor directory name to the files it contains).
    """

    counter = {"value": 0}

    def factory(
        layout: Mapping[str, Any],
        *,
        manifest: Any = None,
        raw_manifest: str | None = None,
    ) -> Path:
        counter["value"] += 1
        root = tmp_path / f"starters-{counter['value']}"
        templates = root / "templates"
        templates.mkdir(parents=True)
        for template_id, flavors in layout.items():
            template_dir = templates / template_id
            template_dir.mkdir()
            if isinstance(flavors, Mapping):
                for flavor, files in flavors.items():
                    (template_dir / flavor).mkdir(parents=True, exist_ok=True)
                    write_tree(template_dir / flavor, files)
            else:
                for flavor in flavors:
                    (template_dir / flavor).mkdir(parents=True, exist_ok=True)
        if raw_manifest is not None:
            (templates / "manifest.json").write_text(raw_manifest, encoding="utf-8")
        elif manifest is not None:
            (templates / "manifest.json").write_text(json.dumps(manifest), encoding="utf-8")
        return root

    return factory


@pytest.fixture()
def tree_writer() -> Callable[[Path, Mapping[str, str | bytes]], None]:
    return write_tree
