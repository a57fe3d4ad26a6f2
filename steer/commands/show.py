"""Show command implementation - render a steering document."""

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel

from ..errors import LookupFailure, RequestError
from ..power import Power
from ..retrieval import SteeringReader, normalize_steering_file


def run_show(power: Power, steering_file: str, raw: bool = False) -> int:
    """Print one steering document through read_steering.

    Args:
        power: Loaded power
        steering_file: File name (``async-parallel.md``) or bare rule id
        raw: Print the Markdown source instead of rendering it

    Returns:
        Exit code (0 = success, 1 = not found or malformed request)
    """
    console = Console(stderr=True)
    reader = SteeringReader(power)

    try:
        text = reader.read_steering(power.name, steering_file)
    except (LookupFailure, RequestError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    if raw:
        print(text)
        return 0

    rule_id = normalize_steering_file(steering_file, power.config.extension)
    descriptor = power.catalog.get(rule_id)
    out = Console()
    out.print(
        Panel(
            f"[bold]{descriptor.id}[/] - {escape(descriptor.summary)}\n"
            f"[dim]{descriptor.category.name} ({descriptor.tier.value})[/]",
            expand=False,
        )
    )
    out.print(Markdown(text))
    return 0
