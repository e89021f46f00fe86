"""Command line interface for generating projects from starter templates."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Sequence

from .config import StartersConfig
from .discovery import (
    TemplateChoice,
    TemplateInfo,
    build_flavor_choices,
    build_template_choices,
    discover_templates,
    format_template_list,
    resolve_template_next_steps,
    template_exists,
)
from .errors import LIST_HINT, StarterError, TemplateNotFoundError
from .flavors import FlavorSelectionReason, select_flavor
from .naming import project_name_from_path
from .scaffold import GenerateOptions, generate_project

InputFunc = Callable[[str], str]

DEFAULT_NEXT_STEPS = ("npm install", "npm run build", "npm run dev")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="starterforge",
        description="Scaffold a new project from a starter template",
    )
    parser.add_argument("target_dir", nargs="?", type=Path, help="Directory to create the project in")
    parser.add_argument("-t", "--template", help="Template id, e.g. agent-on-sentinel")
    parser.add_argument("-f", "--flavor", help="Template flavor, e.g. ts or py")
    parser.add_argument("-l", "--list", action="store_true", help="List available templates and exit")
    parser.add_argument(
        "--starters-path",
        type=Path,
        help="Path to the starters repo (defaults to $STARTERFORGE_STARTERS_PATH)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each generation step")
    return parser


def _print_warning(message: str) -> None:
    print(message, file=sys.stderr)


def _prompt_choice(message: str, choices: Sequence[TemplateChoice], input_func: InputFunc) -> str | None:
    """Ask the user to pick one of ``choices`` by number; ``None`` means cancelled."""

    print(message)
    for index, choice in enumerate(choices, start=1):
        line = f"  {index}) {choice.title}"
        if choice.description:
            line = f"{line} - {choice.description}"
        print(line)

    try:
        answer = input_func("> ").strip()
    except EOFError:
        return None
    if not answer.isdigit():
        return None
    index = int(answer)
    if not 1 <= index <= len(choices):
        return None
    return choices[index - 1].value


def _resolve_template(
    templates: Sequence[TemplateInfo], template_id: str | None, input_func: InputFunc
) -> TemplateInfo:
    if template_id is None:
        template_id = _prompt_choice("Select a template:", build_template_choices(templates), input_func)
        if template_id is None:
            raise StarterError("Template selection cancelled")

    for template in templates:
        if template.id == template_id:
            return template
    raise StarterError(f"Template not found: {template_id}\n{LIST_HINT}")


def _print_next_steps(target_dir: Path, steps: Sequence[str] | None) -> None:
    print("Next steps:\n")
    print(f"  cd {target_dir}")
    for step in steps or DEFAULT_NEXT_STEPS:
        print(f"  {step}")
    print("")


def _handle_list(config: StartersConfig) -> int:
    templates = discover_templates(config.starters_path, on_warning=_print_warning)
    print(format_template_list(templates))
    return 0


def _handle_generate(args: argparse.Namespace, config: StartersConfig, input_func: InputFunc) -> int:
    templates = discover_templates(config.starters_path, on_warning=_print_warning)
    if not templates:
        raise StarterError("No templates found in starters repo")

    template = _resolve_template(templates, args.template, input_func)
    selection = select_flavor(
        template,
        default_flavor=config.default_flavor,
        cli_flavor=args.flavor,
        prompt=lambda item: _prompt_choice("Select a flavor:", build_flavor_choices(item), input_func),
    )
    if selection.reason is FlavorSelectionReason.DEFAULT and len(template.flavors) > 1:
        print(f"Using flavor: {selection.flavor}")

    if not template_exists(config.starters_path, template.id, selection.flavor):
        raise TemplateNotFoundError(template.id, selection.flavor, template.flavor_path(selection.flavor))

    options = GenerateOptions(
        target_dir=args.target_dir,
        template_id=template.id,
        flavor=selection.flavor,
        project_name=project_name_from_path(args.target_dir),
        starters_path=config.starters_path,
    )
    print(f"Copying template {template.id}/{selection.flavor}...")
    project_path = generate_project(options)
    print("Initialized .env.agent and .env.client (if templates present)")
    print(f"Project created at {project_path}\n")

    steps = resolve_template_next_steps(config.starters_path, template.id, selection.flavor)
    _print_next_steps(args.target_dir, steps)
    return 0


def main(argv: Sequence[str] | None = None, *, input_func: InputFunc = input) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = StartersConfig.from_env(args.starters_path)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        if args.list:
            return _handle_list(config)
        if args.target_dir is None:
            parser.error("target directory is required unless --list is given")
        return _handle_generate(args, config, input_func)
    except StarterError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
