from __future__ import annotations

from pathlib import Path

import pytest

from starterforge.discovery import (
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
from starterforge.errors import DiscoveryError


def _entry(template_id: str, flavors, **extra):
    entry = {
        "id": template_id,
        "name": extra.pop("name", template_id.title()),
        "description": f"{template_id} starter",
        "flavors": flavors,
    }
    entry.update(extra)
    return entry


def test_falls_back_to_directory_scan_without_manifest(make_starters):
    root = make_starters({"sample-template": ["ts"]})
    warnings: list[str] = []

    templates = discover_templates(root, on_warning=warnings.append)

    assert len(templates) == 1
    template = templates[0]
    assert template.id == "sample-template"
    assert template.name == "sample-template"
    assert template.description is None
    assert template.flavors == ("ts",)
    assert template.path == root / "templates" / "sample-template"
    assert warnings == []


def test_scan_excludes_templates_without_flavors(make_starters):
    root = make_starters({"empty": [], "full": ["py", "ts"]})
    (root / "templates" / "empty" / "README.md").write_text("no flavors", encoding="utf-8")

    templates = discover_templates(root)

    assert [template.id for template in templates] == ["full"]
    assert templates[0].flavors == ("py", "ts")


def test_warns_and_falls_back_when_manifest_is_invalid(make_starters):
    root = make_starters({"sample-template": ["ts"]}, raw_manifest="{ invalid")
    warnings: list[str] = []

    templates = discover_templates(root, on_warning=warnings.append)

    assert len(warnings) == 1
    assert "Warning:" in warnings[0]
    assert str(root / "templates" / "manifest.json") in warnings[0]
    assert [template.id for template in templates] == ["sample-template"]
    assert templates[0].name == "sample-template"
    assert templates[0].description is None


def test_structurally_invalid_manifest_falls_back(make_starters):
    root = make_starters(
        {"alpha": ["ts"]},
        manifest={"templates": [{"id": "alpha", "name": "Alpha", "flavors": ["ts"]}]},
    )
    warnings: list[str] = []

    templates = discover_templates(root, on_warning=warnings.append)

    assert "description" in warnings[0]
    assert templates[0].name == "alpha"


def test_invalid_manifest_without_callback_still_scans(make_starters):
    root = make_starters({"alpha": ["ts"]}, raw_manifest="[]")
    assert [template.id for template in discover_templates(root)] == ["alpha"]


def test_missing_templates_directory_is_fatal(tmp_path: Path):
    with pytest.raises(DiscoveryError) as excinfo:
        discover_templates(tmp_path)
    assert str(tmp_path / "templates") in str(excinfo.value)


def test_manifest_metadata_is_carried_forward(make_starters):
    root = make_starters(
        {"agent-on-sentinel": ["ts", "python"]},
        manifest={
            "version": 1,
            "templates": [
                _entry(
                    "agent-on-sentinel",
                    ["ts", {"id": "py", "path": "python", "nextSteps": ["python3 -m venv .venv"]}],
                    name="Agent on Sentinel",
                    order=1,
                    category="agents",
                    aliases=["agent"],
                    hidden=False,
                    deprecated=False,
                )
            ],
        },
    )

    [template] = discover_templates(root)

    assert template.name == "Agent on Sentinel"
    assert template.description == "agent-on-sentinel starter"
    assert template.flavors == ("ts", "py")
    assert template.flavor_paths == {"py": "python"}
    assert template.flavor_next_steps == {"py": ("python3 -m venv .venv",)}
    assert template.order == 1
    assert template.category == "agents"
    assert template.aliases == ("agent",)
    assert template.hidden is False
    assert template.deprecated is False
    assert template.flavor_path("py") == root / "templates" / "agent-on-sentinel" / "python"
    assert template.flavor_path("ts") == root / "templates" / "agent-on-sentinel" / "ts"


def test_manifest_flavors_are_filtered_against_disk(make_starters):
    root = make_starters(
        {"alpha": ["ts"], "beta": ["ts"]},
        manifest={
            "templates": [
                _entry("alpha", ["ts", "py"]),
                _entry("beta", ["go", "rust"]),
                _entry("gamma", ["ts"]),
            ]
        },
    )

    templates = discover_templates(root)

    assert [template.id for template in templates] == ["alpha"]
    assert templates[0].flavors == ("ts",)
    assert templates[0].flavor_paths is None


def test_manifest_ignores_undeclared_directories(make_starters):
    root = make_starters({"alpha": ["ts", "py"], "extra": ["ts"]}, manifest={"templates": [_entry("alpha", ["py"])]})

    templates = discover_templates(root)

    assert [(template.id, template.flavors) for template in templates] == [("alpha", ("py",))]


def test_sorting_by_order_then_name(make_starters):
    root = make_starters(
        {name: ["ts"] for name in ("zeta", "alpha", "beta", "gamma", "delta")},
        manifest={
            "templates": [
                _entry("zeta", ["ts"], name="zeta"),
                _entry("alpha", ["ts"], name="Alpha"),
                _entry("beta", ["ts"], name="beta", order=2),
                _entry("gamma", ["ts"], name="Gamma", order=1),
                _entry("delta", ["ts"], name="delta", order=2),
            ]
        },
    )

    assert [template.id for template in discover_templates(root)] == ["gamma", "beta", "delta", "alpha", "zeta"]


def test_sorting_ties_keep_manifest_order(make_starters):
    root = make_starters(
        {"one": ["ts"], "two": ["ts"]},
        manifest={"templates": [_entry("two", ["ts"], name="Same"), _entry("one", ["ts"], name="same")]},
    )

    assert [template.id for template in discover_templates(root)] == ["two", "one"]


def test_resolve_template_flavor_path_uses_manifest_override(make_starters):
    root = make_starters(
        {"alpha": ["ts", "python"]},
        manifest={"templates": [_entry("alpha", ["ts", {"id": "py", "path": "python"}])]},
    )

    assert resolve_template_flavor_path(root, "alpha", "py") == root / "templates" / "alpha" / "python"
    assert resolve_template_flavor_path(root, "alpha", "ts") == root / "templates" / "alpha" / "ts"
    assert resolve_template_flavor_path(root, "alpha", "go") == get_template_path(root, "alpha", "go")
    assert template_exists(root, "alpha", "py")
    assert not template_exists(root, "alpha", "python-missing")


def test_resolved_path_matches_discovery(make_starters):
    root = make_starters(
        {"alpha": ["ts", "python"]},
        manifest={"templates": [_entry("alpha", ["ts", {"id": "py", "path": "python"}])]},
    )

    [template] = discover_templates(root)

    for flavor in template.flavors:
        assert resolve_template_flavor_path(root, template.id, flavor) == template.flavor_path(flavor)


def test_resolve_falls_back_when_manifest_invalid(make_starters):
    root = make_starters({"alpha": ["py"]}, raw_manifest="not json")

    assert resolve_template_flavor_path(root, "alpha", "py") == root / "templates" / "alpha" / "py"
    assert template_exists(root, "alpha", "py")


def test_template_exists_false_for_unknown_template(make_starters):
    root = make_starters({"alpha": ["ts"]})
    assert template_exists(root, "alpha", "ts")
    assert not template_exists(root, "non-existent", "ts")


def test_resolve_template_next_steps(make_starters):
    root = make_starters(
        {"alpha": ["ts", "py"]},
        manifest={"templates": [_entry("alpha", ["ts", {"id": "py", "nextSteps": ["pip install -e ."]}])]},
    )

    assert resolve_template_next_steps(root, "alpha", "py") == ("pip install -e .",)
    assert resolve_template_next_steps(root, "alpha", "ts") is None
    assert resolve_template_next_steps(root, "beta", "ts") is None

    scanned = make_starters({"alpha": ["ts"]})
    assert resolve_template_next_steps(scanned, "alpha", "ts") is None


def _template(**overrides) -> TemplateInfo:
    values = {
        "id": "agent-on-sentinel",
        "name": "Agent on Sentinel",
        "description": "Starter agent with Sentinel runtime",
        "flavors": ("ts", "py"),
        "path": Path("/starters/templates/agent-on-sentinel"),
    }
    values.update(overrides)
    return TemplateInfo(**values)


def test_format_template_list():
    output = format_template_list([_template(), _template(id="plain", name="plain", description=None, flavors=("ts",))])

    assert output.splitlines() == [
        "Available templates:",
        "",
        "  Agent on Sentinel (agent-on-sentinel)",
        "    Starter agent with Sentinel runtime",
        "    flavors: ts, py",
        "  plain",
        "    flavors: ts",
    ]


def test_format_empty_template_list():
    assert format_template_list([]) == "No templates found."


def test_build_template_choices():
    [choice] = build_template_choices([_template()])
    assert choice.title == "Agent on Sentinel"
    assert choice.value == "agent-on-sentinel"
    assert choice.description == "Starter agent with Sentinel runtime | flavors: ts, py"

    [bare] = build_template_choices([_template(name=None, description=None)])
    assert bare.title == "agent-on-sentinel"
    assert bare.description == "flavors: ts, py"


def test_build_flavor_choices():
    choices = build_flavor_choices(_template(flavor_paths={"py": "python"}))
    assert [(choice.title, choice.value) for choice in choices] == [("ts", "ts"), ("py (python)", "py")]
