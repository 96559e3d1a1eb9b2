import json
import logging
import time
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from abidec.abi_json import load_interface
from abidec.core.config import BatchDecodeConfig
from abidec.core.errors import AbiError
from abidec.decoding.grammar import parse_types
from abidec.decoding.registry import ContractInterface
from abidec.decoding.signatures import error_selector, selector, to_hex, topic
from abidec.decoding.specs import DecodedParams
from abidec.decoding.types import is_dynamic, render_type

console = Console()


def _load(abi: Path) -> ContractInterface:
    try:
        return load_interface(abi)
    except AbiError as e:
        raise click.ClickException(f"cannot load {abi}: {e}") from e


def _print_params(title: str, params: DecodedParams) -> None:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("name")
    table.add_column("type")
    table.add_column("value", overflow="fold")
    for i, ((param, _), (_, value)) in enumerate(zip(params, params.to_python())):
        shown = value if isinstance(value, str) else json.dumps(value)
        marker = " [dim](indexed)[/]" if param.is_indexed else ""
        table.add_row(str(i), escape(param.name) or "[dim]-[/]", escape(param.canonical_type) + marker, escape(shown))
    console.print(table)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """abidec: decode Ethereum ABI call data and event logs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@cli.command("parse-type")
@click.argument("texts", nargs=-1, required=True)
def parse_type_cmd(texts: tuple[str, ...]) -> None:
    """Parse ABI type strings and print their canonical forms."""
    try:
        types = parse_types(texts)
    except AbiError as e:
        raise click.ClickException(str(e)) from e
    for typ in types:
        kind = "dynamic" if is_dynamic(typ) else "static"
        console.print(f"[bold]{escape(render_type(typ))}[/]  ({kind})")


@cli.command("signatures")
@click.argument("abi", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def signatures_cmd(abi: Path) -> None:
    """List function selectors, event topics and error selectors of an ABI."""
    interface = _load(abi)

    table = Table(show_header=True, header_style="bold")
    table.add_column("kind")
    table.add_column("id")
    table.add_column("signature")
    for function in interface.functions:
        table.add_row("function", to_hex(selector(function)), escape(function.signature))
    for event in interface.events:
        ident = "[dim]anonymous[/]" if event.anonymous else to_hex(topic(event))
        table.add_row("event", ident, escape(event.signature))
    for error in interface.errors:
        table.add_row("error", to_hex(error_selector(error)), escape(error.signature))
    console.print(table)


@cli.command("decode-input")
@click.argument("abi", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("calldata")
def decode_input_cmd(abi: Path, calldata: str) -> None:
    """Decode transaction call data (hex, with or without 0x)."""
    interface = _load(abi)
    try:
        function, params = interface.decode_function_input_hex(calldata)
    except AbiError as e:
        raise click.ClickException(str(e)) from e
    _print_params(f"function {escape(function.signature)}", params)


@cli.command("decode-log")
@click.argument("abi", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--topic", "topics", multiple=True, help="Log topic (hex); repeat in log order")
@click.option("--data", default="0x", show_default=True, help="Log data (hex)")
def decode_log_cmd(abi: Path, topics: tuple[str, ...], data: str) -> None:
    """Decode one event log from its topics and data."""
    interface = _load(abi)
    try:
        event, params = interface.decode_event_log(list(topics), data)
    except AbiError as e:
        raise click.ClickException(str(e)) from e
    _print_params(f"event {escape(event.signature)}", params)


@cli.command("decode-logs")
@click.argument("abi", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("logs", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--out", "out_root", type=click.Path(file_okay=False, path_type=Path), default=Path("./decoded"), show_default=True)
@click.option("--codec", default="zstd", show_default=True, help="Parquet compression codec")
@click.option(
    "--keep-errors/--no-keep-errors",
    default=False,
    show_default=True,
    help="Record undecodable logs as error rows instead of aborting",
)
@click.option(
    "--skip-unknown/--no-skip-unknown",
    default=True,
    show_default=True,
    help="Skip logs whose topic matches no event of the ABI",
)
def decode_logs_cmd(abi: Path, logs: Path, out_root: Path, codec: str, keep_errors: bool, skip_unknown: bool) -> None:
    """Decode an NDJSON file of raw logs into one Parquet table per event."""
    from abidec.orchestrator import run_batch_decode

    config = BatchDecodeConfig(
        abi_path=abi,
        logs_path=logs,
        out_root=out_root,
        codec=codec,
        keep_errors=keep_errors,
        skip_unknown=skip_unknown,
    )

    t0 = time.time()
    try:
        result = run_batch_decode(config)
    except AbiError as e:
        raise click.ClickException(str(e)) from e
    elapsed = time.time() - t0

    stats = result.stats
    for path in result.written:
        console.print(f"[bold]wrote[/] {path}")
    console.print(f"[bold]done[/]: {stats.total_logs} logs • {elapsed:.2f}s")
    console.print(
        f"[bold]summary[/]: "
        f"[green]decoded[/]={stats.decoded}  "
        f"[yellow]unknown[/]={stats.unknown}  "
        f"[red]failed[/]={stats.failed}"
    )
