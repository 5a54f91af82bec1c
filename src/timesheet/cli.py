"""Timesheet CLI - categorized Timewarrior reports."""

import json
import logging
import sys
from dataclasses import asdict

import click

from .adapters.timew_export import ExportFormatError, parse_export, read_extension_input
from .config import load_config
from .core.report import COLUMNS, ReportRow
from .workflows import generate_timesheet, get_metadata_fetcher

CLICK_COLORS = {
    "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white",
    "bright_black", "bright_red", "bright_green", "bright_yellow",
    "bright_blue", "bright_magenta", "bright_cyan", "bright_white",
}
RIGHT_ALIGNED = {"time", "total"}

_DATE = click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"])


@click.group()
@click.version_option(package_name="timesheet")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Timesheet - categorized Timewarrior reports."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


def id_style(color_spec: str):
    """Build a styler for interval ids from a colour spec such as "bold blue"."""
    words = color_spec.lower().replace("bright ", "bright_").split()
    # "on <colour>" is a background, never the foreground
    foreground = [w for i, w in enumerate(words) if w != "on" and (i == 0 or words[i - 1] != "on")]
    fg = next((w for w in foreground if w in CLICK_COLORS), None)
    if fg is None:
        return None
    bold = True if "bold" in words else None
    return lambda text: click.style(text, fg=fg, bold=bold)


def render_table(rows: list[ReportRow], color: bool = False) -> str:
    """Lay rows out as aligned text columns."""
    columns = [(attr, name) for attr, name in COLUMNS if attr != "title" or any(r.title for r in rows)]

    widths = {}
    for attr, name in columns:
        cells = [click.unstyle(getattr(r, attr)) for r in rows]
        widths[attr] = max([len(name)] + [len(c) for c in cells])

    def cell(attr: str, text: str) -> str:
        pad = widths[attr] - len(click.unstyle(text))
        return " " * pad + text if attr in RIGHT_ALIGNED else text + " " * pad

    header = " ".join(cell(attr, name) for attr, name in columns).rstrip()
    lines = [click.style(header, underline=True) if color else header]

    for row in rows:
        if row.underline:
            width = widths["total"]
            rule = click.style(" " * width, underline=True) if color else "-" * width
            row = ReportRow(total=rule)
        lines.append(" ".join(cell(attr, getattr(row, attr)) for attr, _ in columns).rstrip())

    return "\n".join(lines)


def _show_rows(rows: list[ReportRow], as_json: bool, color: bool) -> None:
    """Shared row display logic."""
    if as_json:
        click.echo(json.dumps([asdict(r) for r in rows], indent=2))
        return

    if not rows:
        click.echo("No tracked intervals.")
        return

    click.echo()
    click.echo(render_table(rows, color))
    click.echo()


@main.command()
@click.argument("export_file", type=click.File("r"), default="-")
@click.option("--start", type=_DATE, default=None, help="First day (default: earliest interval)")
@click.option("--end", type=_DATE, default=None, help="End, exclusive (default: now)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--color/--no-color", default=None, help="Highlight interval ids")
@click.option("--metadata", "metadata_file", type=click.Path(dir_okay=False), help="Task metadata JSON file")
@click.option("--sort", is_flag=True, help="Sort categories, tasks by number")
def report(export_file, start, end, as_json: bool, color: bool | None, metadata_file: str | None, sort: bool):
    """Report categorized time from `timew export` JSON."""
    config = load_config()
    if sort:
        config.sort_entries = True
    color = config.color if color is None else color

    try:
        intervals = parse_export(export_file.read())
    except ExportFormatError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    style = id_style(config.id_color) if color and not as_json else None
    rows = generate_timesheet(
        intervals,
        config,
        start=start,
        end=end,
        fetcher=get_metadata_fetcher(config, metadata_file),
        style_id=style,
    )
    _show_rows(rows, as_json, color and not as_json)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def extension(as_json: bool):
    """Run as a Timewarrior report extension, reading its input on stdin."""
    config = load_config()

    try:
        data = read_extension_input(click.get_text_stream("stdin").read())
    except ExportFormatError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    color = data.color and not as_json
    style = None
    if color:
        style = id_style(data.id_color) or id_style(config.id_color)

    rows = generate_timesheet(
        data.intervals,
        config,
        start=data.start,
        end=data.end,
        fetcher=get_metadata_fetcher(config),
        style_id=style,
    )
    _show_rows(rows, as_json, color)
