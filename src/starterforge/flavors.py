"""Choose which flavor of a template to generate."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .discovery import TemplateInfo
from .errors import LIST_HINT, FlavorError

__all__ = ["FlavorPrompt", "FlavorSelection", "FlavorSelectionReason", "select_flavor"]


FlavorPrompt = Callable[[TemplateInfo], "str | None"]


class FlavorSelectionReason(str, Enum):
    """Why a flavor was chosen."""

    CLI = "cli"
    DEFAULT = "default"
    ONLY = "only"
    PROMPT = "prompt"


@dataclass(frozen=True, slots=True)
class FlavorSelection:
    flavor: str
    reason: FlavorSelectionReason


def _not_found(template: TemplateInfo, flavor: str) -> FlavorError:
    available = ", ".join(template.flavors)
    message = (
        f'Flavor "{flavor}" not found for template "{template.id}". '
        f"Available flavors: {available}.\n"
        f"{LIST_HINT}"
    )
    return FlavorError(message, template_id=template.id, flavor=flavor, available=template.flavors)


def select_flavor(
    template: TemplateInfo,
    *,
    default_flavor: str,
    cli_flavor: str | None = None,
    prompt: FlavorPrompt | None = None,
) -> FlavorSelection:
    """Pick a flavor of ``template``.

    The first rule that applies wins: an explicit ``cli_flavor``, then
    ``default_flavor`` when the template offers it, then the template's only
    flavor, then whatever ``prompt`` returns.

    Raises
    ------
    FlavorError
        If ``cli_flavor`` or the prompted value is not offered by the template,
        the prompt was cancelled, or the choice is ambiguous and there is no
        prompt.
    """

    flavors = template.flavors
    if not flavors:
        raise FlavorError(f"Template {template.id} has no flavors", template_id=template.id)

    if cli_flavor:
        if cli_flavor not in flavors:
            raise _not_found(template, cli_flavor)
        return FlavorSelection(cli_flavor, FlavorSelectionReason.CLI)

    if default_flavor in flavors:
        return FlavorSelection(default_flavor, FlavorSelectionReason.DEFAULT)

    if len(flavors) == 1:
        return FlavorSelection(flavors[0], FlavorSelectionReason.ONLY)

    if prompt is None:
        raise FlavorError(
            f'Flavor selection required for template "{template.id}". '
            f"Available flavors: {', '.join(flavors)}.\n"
            f"Pass --flavor to choose one. {LIST_HINT}",
            template_id=template.id,
            available=flavors,
        )

    selected = prompt(template)
    if not selected:
        raise FlavorError(
            f"Flavor selection cancelled for template \"{template.id}\". "
            f"Available flavors: {', '.join(flavors)}.\n"
            f"{LIST_HINT}",
            template_id=template.id,
            available=flavors,
        )
    if selected not in flavors:
        raise _not_found(template, selected)

    return FlavorSelection(selected, FlavorSelectionReason.PROMPT)
