"""Rich/JSON output helpers.

The CLI renders a ServiceResult either for people (Rich text) or for
scripts (``--json``). :func:`format_result` picks the mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from nkt.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from nkt.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output switches taken from the global CLI flags."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON mode wins over quiet mode; quiet wins over the Rich renderers.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2, exclude_none=False)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
