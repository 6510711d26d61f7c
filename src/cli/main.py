"""Command line entry point for the kpi-dashboard application."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import click
import marshmallow as ma
import requests
import structlog

from kpi_dashboard.data import DashboardDataBuilder, DashboardHttpClient, FiltersResponse
from kpi_dashboard.data.endpoints import BASE_URL
from kpi_dashboard.data.pipeline import DashboardSnapshot, refresh_dashboard, snapshot_from_file
from kpi_dashboard.filters import FilterStateReconciler, month_options_for
from kpi_dashboard.logging import LOG_FORMATS, LOG_LEVELS, configure_logging
from kpi_dashboard.output import render_kpi_chart, write_grouped_csv, write_table_csv
from kpi_dashboard.output.utils import format_number
from kpi_dashboard.views import KpiView

API_URL_HELP = "Base URL of the dashboard API. May also be set via the KPI_DASHBOARD_API_URL env var."
TIMEOUT_HELP = "Request timeout in seconds. May also be set via the KPI_DASHBOARD_TIMEOUT env var."

LOG_FORMAT_CHOICES = LOG_FORMATS
LOG_LEVEL_CHOICES = tuple(LOG_LEVELS)

logger = structlog.get_logger(__name__)


def _filter_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the shared filter selection options to a command."""
    options = [
        click.option("--department", "departments", multiple=True, help="Department to include; repeatable."),
        click.option("--location", "locations", multiple=True, help="Location to include; repeatable."),
        click.option("--designation", "designations", multiple=True, help="Designation to include; repeatable."),
        click.option("--gender", default=None, help="Single gender to include, or 'all'."),
        click.option("--start", "start_month", default=None, help="First month key (YYYY-MM-01), or 'all'."),
        click.option("--end", "end_month", default=None, help="Last month key (YYYY-MM-01), or 'all'."),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _reconcile(
    *,
    departments: Sequence[str],
    locations: Sequence[str],
    designations: Sequence[str],
    gender: str | None,
    start_month: str | None,
    end_month: str | None,
) -> FilterStateReconciler:
    """Drive a reconciler through the selections given on the command line and apply them."""
    reconciler = FilterStateReconciler()
    for dimension, values in (
        ("departments", departments),
        ("locations", locations),
        ("designations", designations),
    ):
        for value in dict.fromkeys(values):
            reconciler.toggle_member(dimension, value)
    if gender is not None:
        reconciler.set_single("genders", gender)
    if start_month is not None:
        reconciler.set_range("start", start_month)
    if end_month is not None:
        reconciler.set_range("end", end_month)
    reconciler.commit()
    return reconciler


def _builder(ctx: click.Context) -> DashboardDataBuilder:
    """Return a data builder configured from the group options."""
    ctx.ensure_object(dict)
    client = DashboardHttpClient(
        base_url=ctx.obj.get("api_url") or BASE_URL,
        timeout=ctx.obj.get("timeout") or 30.0,
    )
    return DashboardDataBuilder(client=client)


def _api_error(exc: requests.RequestException) -> click.ClickException:
    """Convert a transport or HTTP failure into a user-facing error."""
    response = getattr(exc, "response", None)
    if response is not None:
        return click.ClickException(f"Dashboard API returned HTTP {response.status_code}: {exc}")
    return click.ClickException(f"Could not reach the dashboard API: {exc}")


def _echo_filters(filters: FiltersResponse) -> None:
    for dimension in ("departments", "locations", "designations", "genders"):
        options = filters.options(dimension)
        click.echo(f"{dimension.capitalize()} ({len(options)}):")
        for option in options:
            suffix = "" if option.count is None else f" ({format_number(option.count)})"
            click.echo(f"  {option.label}{suffix}")
    months = month_options_for(filters)
    if months:
        click.echo(f"Months: {months[0].label} - {months[-1].label} ({len(months)} options)")
    else:
        click.echo("Months: unavailable")


def _echo_view(view: KpiView) -> None:
    """Print a one-line digest of a KPI card."""
    if view.is_empty:
        detail = "no data"
    elif view.number is not None:
        detail = format_number(view.number.value)
    elif view.series is not None:
        detail = f"{len(view.series)} points"
    elif view.grouped is not None:
        detail = f"{len(view.grouped)} groups x {len(view.grouped.secondaries)} segments"
    else:
        detail = f"{view.table.total_rows} rows"
    if view.summary is not None:
        detail += f", total {format_number(view.summary.total)}, average {format_number(view.summary.average)}"
    click.echo(f"[{view.chart_kind}] {view.kpi_name}: {detail}")


def _write_snapshot(output: Path, snapshot: DashboardSnapshot) -> None:
    """Serialize the dashboard view models to disk."""
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(snapshot.to_dict(), indent=2))
    click.echo(f"Wrote dashboard snapshot to {output}")
    logger.debug("dashboard.snapshot_written", output=str(output))


def _render_plots(plots_dir: Path, views: Sequence[KpiView]) -> int:
    rendered = 0
    for view in views:
        if view.chart_kind in ("number", "table") or view.is_empty:
            continue
        try:
            report = render_kpi_chart(view, output_dir=plots_dir)
        except ValueError as exc:
            logger.warning("dashboard.chart_skipped", kpi_id=view.kpi_id, error=str(exc))
            click.echo(f"Skipped chart for {view.kpi_id}: {exc}", err=True)
            continue
        logger.debug("dashboard.chart_rendered", kpi_id=view.kpi_id, path=str(report.path))
        rendered += 1
    return rendered


def _export_tables(export_dir: Path, snapshot: DashboardSnapshot) -> int:
    """Write full CSV exports for table and stacked bar KPIs."""
    payloads = {payload.kpi_id: payload for payload in snapshot.response.kpis}
    written = 0
    for view in snapshot.views:
        if view.chart_kind == "table":
            write_table_csv(payloads[view.kpi_id].records, export_dir / f"{view.kpi_id}.csv")
        elif view.chart_kind == "stacked_bar" and view.grouped is not None:
            write_grouped_csv(view.grouped, export_dir / f"{view.kpi_id}.csv")
        else:
            continue
        written += 1
    return written


@click.group()
@click.option("--api-url", envvar="KPI_DASHBOARD_API_URL", default=BASE_URL, show_default=True, help=API_URL_HELP)
@click.option(
    "--timeout",
    envvar="KPI_DASHBOARD_TIMEOUT",
    type=click.FloatRange(min=0, min_open=True),
    default=30.0,
    show_default=True,
    help=TIMEOUT_HELP,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    envvar="KPI_DASHBOARD_LOG_LEVEL",
    default="info",
    show_default=True,
    help="Verbosity for structured logs.",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMAT_CHOICES, case_sensitive=False),
    envvar="KPI_DASHBOARD_LOG_FORMAT",
    default="console",
    show_default=True,
    help="Render logs as console-friendly text or JSON.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    api_url: str,
    timeout: float,
    log_level: str,
    log_format: str,
) -> None:
    """Inspect workforce KPIs, filters and dashboard snapshots."""
    configure_logging(level=log_level, log_format=log_format)
    ctx.ensure_object(dict)
    ctx.obj.update({"api_url": api_url, "timeout": timeout})
    logger.bind(command_group="kpi-dashboard").debug(
        "cli.initialized",
        api_url=api_url,
        timeout=timeout,
        log_level=log_level.lower(),
        log_format=log_format.lower(),
    )


@cli.command("filters")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the raw filter options as JSON.")
@click.pass_context
def filters_command(ctx: click.Context, *, as_json: bool) -> None:
    """List filter options and the selectable month range."""
    builder = _builder(ctx)
    try:
        filters = builder.load_filters()
    except requests.RequestException as exc:
        raise _api_error(exc) from exc
    finally:
        builder.close()
    if as_json:
        payload = {
            dimension: [
                {"value": option.value, "label": option.label, "count": option.count}
                for option in filters.options(dimension)
            ]
            for dimension in ("departments", "locations", "designations", "genders")
        }
        payload["months"] = [{"value": month.value, "label": month.label} for month in month_options_for(filters)]
        click.echo(json.dumps(payload, indent=2))
        return
    _echo_filters(filters)


@cli.command("kpis")
@click.pass_context
def kpis_command(ctx: click.Context) -> None:
    """List the KPIs the backend can compute."""
    builder = _builder(ctx)
    try:
        definitions = builder.client.fetch_kpis()
    except requests.RequestException as exc:
        raise _api_error(exc) from exc
    finally:
        builder.close()
    for definition in definitions:
        click.echo(f"{definition.id}\t{definition.chart_type}\t{definition.category}\t{definition.name}")
    logger.info("kpis.listed", count=len(definitions))


@cli.command("health")
@click.pass_context
def health_command(ctx: click.Context) -> None:
    """Report backend connectivity."""
    builder = _builder(ctx)
    try:
        health = builder.client.fetch_health()
    except requests.RequestException as exc:
        raise _api_error(exc) from exc
    finally:
        builder.close()
    click.echo(
        f"status={health.status} tools={health.available_tools} kpis={health.available_kpis} "
        f"mcp={health.mcp_connection or '-'} ai={health.ai_connection or '-'}"
    )
    if not health.is_healthy:
        raise click.ClickException("Dashboard backend reports an unhealthy status.")


@cli.command("query")
@_filter_options
def query_command(**selection: Any) -> None:
    """Show the request parameters a filter selection produces."""
    reconciler = _reconcile(**selection)
    click.echo(json.dumps(reconciler.query(), indent=2, sort_keys=True))
    click.echo(f"Active filters: {reconciler.active_filter_count(reconciler.applied)}")


@cli.command("dashboard")
@_filter_options
@click.option(
    "--input",
    "input_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read a saved dashboard JSON payload instead of calling the API.",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional path to write the KPI view models as JSON.",
)
@click.option(
    "--plots-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Render a chart per KPI into this directory.",
)
@click.option(
    "--export-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Write full CSV exports for table and stacked bar KPIs into this directory.",
)
@click.pass_context
def dashboard_command(
    ctx: click.Context,
    *,
    input_path: Path | None,
    output: Path | None,
    plots_dir: Path | None,
    export_dir: Path | None,
    **selection: Any,
) -> None:
    """Fetch the dashboard for a filter selection and summarize every KPI."""
    cmd_log = logger.bind(command="dashboard", source="file" if input_path else "api")
    if input_path is not None:
        if any(selection.values()):
            raise click.UsageError("Filter options cannot be combined with --input.")
        try:
            snapshot = snapshot_from_file(input_path)
        except (ValueError, ma.ValidationError) as exc:
            raise click.ClickException(f"Could not read dashboard payload {input_path}: {exc}") from exc
    else:
        reconciler = _reconcile(**selection)
        cmd_log.info("command.start", filters=reconciler.query())
        builder = _builder(ctx)
        try:
            snapshot = refresh_dashboard(reconciler, builder=builder)
        except requests.RequestException as exc:
            raise _api_error(exc) from exc
        finally:
            builder.close()

    if not snapshot.views:
        click.echo("No KPIs were returned for the requested filters.")
    for view in snapshot.views:
        _echo_view(view)
    if snapshot.response.failed_tools:
        click.echo(f"Failed KPIs: {', '.join(snapshot.response.failed_tools)}", err=True)

    if output:
        _write_snapshot(output, snapshot)
    if plots_dir:
        rendered = _render_plots(plots_dir, snapshot.views)
        click.echo(f"Rendered {rendered} charts to {plots_dir}")
    if export_dir:
        written = _export_tables(export_dir, snapshot)
        click.echo(f"Exported {written} CSV files to {export_dir}")
    cmd_log.info("command.completed", kpis=len(snapshot.views))


if __name__ == "__main__":
    cli()
