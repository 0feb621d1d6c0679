"""
CLI for running and inspecting missed-call diagnostics
"""

import json
import logging

import click

from ..analysis.classifier import BusinessHours
from ..analysis.engine import DiagnosticAnalyzer
from ..config.settings import Settings
from ..database import SessionManager, ConnectionStore, DiagnosticStore
from ..providers import build_provider, DiagnosticError, SUPPORTED_PROVIDERS
from ..utils.formatting import format_currency

logger = logging.getLogger(__name__)


def create_stores(settings: Settings):
    """Create the connection and diagnostic stores"""
    session_manager = SessionManager(settings.database_url)
    session_manager.init_db()
    return ConnectionStore(session_manager), DiagnosticStore(session_manager)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, verbose):
    """Missed-Call Diagnostic CLI"""
    settings = Settings()
    log_level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    ctx.obj = settings


@cli.command('init-db')
@click.pass_obj
def init_db(settings):
    """Create database tables"""
    SessionManager(settings.database_url).init_db()
    click.echo("Database initialized")


@cli.command()
@click.option('--provider', '-p', required=True,
              type=click.Choice(SUPPORTED_PROVIDERS + ('ringcentral', 'zoom'), case_sensitive=False),
              help='Connected phone system')
@click.option('--revenue', '-r', type=float, help='Average revenue per call')
@click.option('--company', '-c', help='Company name')
@click.option('--industry', '-i', help='Industry (detected from company name if omitted)')
@click.option('--email', '-e', help='Business email to attach to the saved diagnostic')
@click.option('--save/--no-save', default=True, help='Persist the result')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
@click.pass_obj
def analyze(settings, provider, revenue, company, industry, email, save, as_json):
    """Analyze the last 30 days of calls for a connected provider"""
    connection_store, diagnostic_store = create_stores(settings)

    try:
        bundle = build_provider(provider, settings, connection_store)
        analyzer = DiagnosticAnalyzer(
            bundle,
            connection_store,
            business_hours=BusinessHours(
                settings.business_timezone,
                settings.business_hours_start,
                settings.business_hours_end
            ),
            window_days=settings.analysis_window_days
        )
        result = analyzer.analyze(
            avg_revenue_per_call=revenue,
            company_name=company,
            industry=industry
        )
    except (DiagnosticError, ValueError) as e:
        click.echo(f"Error running analysis: {e}", err=True)
        raise SystemExit(1)

    if result is None:
        click.echo(f"No {bundle.name} connection found. Connect the account and try again.", err=True)
        raise SystemExit(1)

    output = result.to_dict()
    if save:
        output['id'] = diagnostic_store.save(result, business_email=email)

    if as_json:
        click.echo(json.dumps(output, indent=2))
        return

    click.echo(f"\n{result.provider} - {result.month}")
    click.echo("-" * 40)
    click.echo(f"Inbound calls:      {result.total_inbound_calls}")
    click.echo(f"Missed calls:       {result.missed_calls}")
    click.echo(f"  After hours:      {result.after_hours_calls}")
    click.echo(f"Accepted calls:     {result.accepted_calls}")
    if result.avg_callback_time_minutes is not None:
        click.echo(f"Avg callback time:  {result.avg_callback_time_minutes} min")
    click.echo(f"Revenue per call:   {format_currency(result.avg_revenue_per_call)}")
    click.echo(f"Estimated loss:     {format_currency(result.total_loss)}")
    if 'id' in output:
        click.echo(f"Saved as:           {output['id']}")


@cli.command('list')
@click.option('--email', '-e', help='Only diagnostics for this business email')
@click.pass_obj
def list_diagnostics(settings, email):
    """List saved diagnostics, newest first"""
    _, diagnostic_store = create_stores(settings)
    diagnostics = diagnostic_store.list_by_email(email) if email else diagnostic_store.list_all()

    if not diagnostics:
        click.echo("No diagnostics found")
        return

    for d in diagnostics:
        click.echo(
            f"{d['id']}  {d['createdAt']}  {d['provider']:<12} "
            f"missed={d['missedCalls']:<4} loss={format_currency(d['totalLoss'])}"
        )


@cli.command()
@click.argument('diagnostic_id')
@click.pass_obj
def show(settings, diagnostic_id):
    """Show one saved diagnostic as JSON"""
    _, diagnostic_store = create_stores(settings)
    diagnostic = diagnostic_store.get(diagnostic_id)
    if not diagnostic:
        click.echo(f"Diagnostic {diagnostic_id} not found", err=True)
        raise SystemExit(1)
    click.echo(json.dumps(diagnostic, indent=2))


@cli.command()
@click.argument('provider', type=click.Choice(SUPPORTED_PROVIDERS + ('ringcentral', 'zoom'), case_sensitive=False))
@click.pass_obj
def status(settings, provider):
    """Show provider connection status"""
    connection_store, _ = create_stores(settings)
    bundle = build_provider(provider, settings, connection_store)
    info = connection_store.status(bundle.name)

    if not info['connected']:
        click.echo(f"{bundle.name}: not connected")
        return

    state = "expired" if info['expired'] else "valid"
    click.echo(f"{bundle.name}: connected (account {info['accountId']}, token {state})")


if __name__ == '__main__':
    cli()
