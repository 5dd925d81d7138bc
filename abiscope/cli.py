"""Command-line interface for abiscope."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from abiscope.codec import (
    BreakdownPart,
    CallBreakdown,
    CorruptLayout,
    EncodeError,
    MalformedCalldata,
    SelectorMismatch,
    ValueSyntaxError,
    decode_call,
    encode_call,
    parse_arguments,
)
from abiscope.signature import (
    MalformedSignature,
    SizeCalculator,
    canonical_signature,
    canonical_type,
    parse,
    selector_hex,
)

_ERRORS = (
    MalformedSignature,
    EncodeError,
    ValueSyntaxError,
    CorruptLayout,
    SelectorMismatch,
    MalformedCalldata,
)


@contextmanager
def _reporting_errors() -> Iterator[None]:
    try:
        yield
    except _ERRORS as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output")
def cli(verbose: bool) -> None:
    """Encode function calls and break calldata down into its parts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@cli.command()
@click.argument("signature")
def selector(signature: str) -> None:
    """Print the canonical signature and its 4-byte selector."""
    with _reporting_errors():
        sig = parse(signature)
        canonical = canonical_signature(sig.name, sig.inputs)
    click.echo(canonical)
    click.echo(selector_hex(canonical))


@cli.command()
@click.argument("signature")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(signature: str, output_json: bool) -> None:
    """Display parameters with their static/dynamic classification."""
    with _reporting_errors():
        sig = parse(signature)
    canonical = canonical_signature(sig.name, sig.inputs)
    sizes = SizeCalculator()

    if output_json:
        data: dict = {"signature": canonical, "selector": selector_hex(canonical), "inputs": []}
        for c in sig.inputs:
            size = sizes.calc_type_size(c.type)
            data["inputs"].append(
                {
                    "name": c.name,
                    "type": canonical_type(c.type),
                    "kind": size.kind.value,
                    "head_words": size.head_words,
                }
            )
        click.echo(json.dumps(data, indent=2))
        return

    console = Console()
    console.print(f"[bold cyan]{escape(canonical)}[/bold cyan]  [green]{selector_hex(canonical)}[/green]")

    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Name", style="white")
    table.add_column("Type", style="yellow")
    table.add_column("Kind", style="dim")
    table.add_column("Head words", style="green", justify="right")
    for c in sig.inputs:
        size = sizes.calc_type_size(c.type)
        table.add_row(c.name, escape(canonical_type(c.type)), size.kind.value, str(size.head_words))

    console.print(table)
    console.print(f"Head region: {sizes.head_size(sig.inputs)} bytes")


@cli.command()
@click.argument("signature")
@click.argument("values", nargs=-1)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("--regions", "show_regions", is_flag=True, help="Also list byte regions")
def encode(signature: str, values: tuple[str, ...], output_json: bool, show_regions: bool) -> None:
    """Encode a call. Each VALUE is one argument; arrays take 1,2,3 or [1,2,3]."""
    with _reporting_errors():
        sig = parse(signature)
        result = encode_call(sig, parse_arguments(sig.inputs, list(values)))

    if output_json:
        _output_json(result, show_regions)
    else:
        _output_plain(result, show_regions)


@cli.command()
@click.argument("signature")
@click.argument("calldata")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def decode(signature: str, calldata: str, output_json: bool) -> None:
    """Break existing calldata down against a signature."""
    with _reporting_errors():
        result = decode_call(signature, calldata)

    if output_json:
        _output_json(result, False)
    else:
        _output_plain(result, False)


def _output_json(result: CallBreakdown, show_regions: bool) -> None:
    data: dict = {
        "signature": result.canonical,
        "selector": result.selector_hex,
        "calldata": result.calldata_hex,
        "parts": [part.to_dict() for part in result.parts],
    }
    if show_regions:
        data["regions"] = [region.to_dict() for region in result.regions]
    click.echo(json.dumps(data, indent=2))


def _add_parts(tree: Tree, parts: list[BreakdownPart], label: Callable[[BreakdownPart], str]) -> None:
    for part in parts:
        branch = tree.add(label(part))
        _add_parts(branch, part.children, label)


def _part_label(part: BreakdownPart) -> str:
    label = f"[bold]{escape(part.name)}[/bold] [yellow]{escape(part.type)}[/yellow] [dim]@{part.offset}[/dim]"
    if not part.children:
        label += f"\n[green]{part.value}[/green]"
    if part.description:
        label += f"\n[italic dim]{escape(part.description)}[/italic dim]"
    return label


def _output_plain(result: CallBreakdown, show_regions: bool) -> None:
    console = Console()

    console.print("[bold cyan]Calldata[/bold cyan]")
    console.print(f"[green]{result.calldata_hex}[/green]", soft_wrap=True)
    console.print()

    tree = Tree(f"[bold cyan]{escape(result.canonical)}[/bold cyan]")
    _add_parts(tree, result.parts, _part_label)
    console.print(tree)

    if show_regions:
        console.print()
        table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
        table.add_column("Start", style="yellow", justify="right")
        table.add_column("Length", style="yellow", justify="right")
        table.add_column("Kind", style="dim")
        table.add_column("Owner", style="white")
        for region in result.regions:
            table.add_row(str(region.start), str(region.length), region.kind.value, escape(region.path))
        console.print(table)


def main() -> None:
    """Main entry point."""
    cli(auto_envvar_prefix="ABISCOPE")


if __name__ == "__main__":
    main()
