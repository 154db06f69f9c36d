import asyncio
import json

import click

from .agent import ListingRadarAgent
from .formatting import (
    describe_cron,
    format_timestamp,
    relevance_percent,
    status_kind,
    time_ago,
)
from .models import HistoryEntry, HistoryFilter


@click.group()
@click.option('--config', '-c', default='config.yaml', help='Configuration file path')
@click.pass_context
def cli(ctx, config):
    """ListingRadar CLI"""
    ctx.ensure_object(dict)
    ctx.obj['config'] = config


def _agent(ctx) -> ListingRadarAgent:
    if 'agent' not in ctx.obj:
        ctx.obj['agent'] = ListingRadarAgent(ctx.obj['config'])
    return ctx.obj['agent']


def _echo_entry(entry: HistoryEntry, show_listings: bool = False):
    result = entry.result
    email = f", email to {result.email_recipient or '--'}" if result.email_sent else ""
    click.echo(
        f"[{entry.id}] {format_timestamp(entry.timestamp)} ({time_ago(entry.timestamp)}) "
        f"{result.scan_status or 'unknown'} [{status_kind(result.scan_status)}] - "
        f"{result.total_listings_found} found "
        f"({result.job_listings_count} jobs, {result.apartment_listings_count} apartments){email}"
    )
    if show_listings:
        for listing in result.listings:
            kind = listing.kind.value if listing.kind else listing.listing_type or '?'
            click.echo(
                f"  - {listing.title} | {listing.company} | {listing.location} "
                f"[{kind}, {relevance_percent(listing.relevance_score)}%]"
            )
            if listing.source_url:
                click.echo(f"    {listing.source_name}: {listing.source_url}")


@cli.command()
@click.pass_context
def scan(ctx):
    """Run a scan now"""
    agent = _agent(ctx)
    click.echo("Scanning for listings... This may take a minute.")
    asyncio.run(agent.run_scan())
    message = agent.orchestrator.status_message
    if message:
        click.echo(message.text)
        if message.type == 'error':
            ctx.exit(1)


@cli.command()
@click.option('--filter', '-f', 'mode',
              type=click.Choice([m.value for m in HistoryFilter]),
              default=HistoryFilter.ALL.value, help='Listing kind filter')
@click.option('--sample', is_flag=True, help='Show sample data instead of real history')
@click.option('--limit', '-n', default=20, show_default=True, help='Maximum entries to show')
@click.option('--listings', is_flag=True, help='Show the listings of each scan')
@click.option('--json', 'as_json', is_flag=True, help='Output JSON')
@click.pass_context
def history(ctx, mode, sample, limit, listings, as_json):
    """Show scan history, newest first"""
    entries = _agent(ctx).get_history(HistoryFilter(mode), sample_mode=sample)[:limit]

    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return

    if not entries:
        click.echo("No scans recorded yet.")
        return
    for entry in entries:
        _echo_entry(entry, show_listings=listings)


@cli.command()
@click.option('--sample', is_flag=True, help='Show the sample scan')
@click.pass_context
def latest(ctx, sample):
    """Show the most recent scan and its listings"""
    view = _agent(ctx).history_view(sample_mode=sample)
    entry = view.latest()
    stats = view.stats()

    click.echo(f"Total scans: {stats['total_scans']}  Emails sent: {stats['emails_sent']}")
    if entry is None:
        click.echo("No scans recorded yet.")
        return
    _echo_entry(entry, show_listings=True)
    if entry.result.summary_message:
        click.echo("")
        click.echo(entry.result.summary_message)


@cli.group()
def schedule():
    """Automated schedule management"""
    pass


def _echo_snapshot(snapshot):
    sched = snapshot.schedule
    if sched is None:
        click.echo("No schedule information available.")
        return
    click.echo(f"Schedule: {sched.id}")
    click.echo(f"Status: {'Active' if sched.is_active else 'Paused'}")
    click.echo(f"Frequency: {describe_cron(sched.cron_expression)}")
    click.echo(f"Timezone: {sched.timezone or 'America/New_York'}")
    if sched.next_run_time:
        click.echo(f"Next run: {format_timestamp(sched.next_run_time)}")
    elif snapshot.projected_next_run:
        click.echo(f"Next run (projected): {format_timestamp(snapshot.projected_next_run.isoformat())}")
    if sched.last_run_at:
        click.echo(f"Last run: {time_ago(sched.last_run_at)}")
    if snapshot.logs:
        click.echo("Recent executions:")
        for log in snapshot.logs:
            click.echo(f"  {format_timestamp(log.executed_at)}  {'Success' if log.success else 'Failed'}")


@schedule.command()
@click.pass_context
def status(ctx):
    """Show the remote schedule and its recent executions"""
    snapshot = asyncio.run(_agent(ctx).refresh_schedule())
    _echo_snapshot(snapshot)


@schedule.command()
@click.pass_context
def toggle(ctx):
    """Pause the schedule if active, resume it if paused"""
    snapshot = asyncio.run(_agent(ctx).toggle_schedule())
    _echo_snapshot(snapshot)


@cli.group()
def settings():
    """Scan settings"""
    pass


@settings.command()
@click.pass_context
def show(ctx):
    """Show the saved settings"""
    current = _agent(ctx).get_settings()
    click.echo(json.dumps(current.model_dump(by_alias=True), indent=2))


@settings.command(name='set')
@click.option('--keyword', '-k', multiple=True, help='Search keyword (repeatable)')
@click.option('--location', '-l', multiple=True, help='Location (repeatable)')
@click.option('--type', '-t', 'listing_type',
              type=click.Choice(['jobs', 'apartments', 'both']), help='Listing type')
@click.option('--url', '-u', multiple=True, help='Additional source URL (repeatable)')
@click.option('--email', '-e', help='Notification email')
@click.option('--frequency', help='Cron expression for the recurring scan')
@click.pass_context
def set_settings(ctx, keyword, location, listing_type, url, email, frequency):
    """Update the saved settings"""
    agent = _agent(ctx)
    updates = {}
    if keyword:
        updates['keywords'] = list(keyword)
    if location:
        updates['locations'] = list(location)
    if listing_type:
        updates['listing_type'] = listing_type
    if url:
        updates['additional_urls'] = list(url)
    if email is not None:
        updates['notification_email'] = email
    if frequency is not None:
        updates['frequency'] = frequency

    updated = agent.get_settings().model_copy(update=updates)
    if agent.save_settings(updated):
        click.echo("Settings saved successfully.")
    else:
        click.echo("Failed to save settings.")
        ctx.exit(1)


@cli.command()
@click.option('--host', default=None, help='Bind address')
@click.option('--port', '-p', default=None, type=int, help='Port')
@click.pass_context
def serve(ctx, host, port):
    """Serve the HTTP API"""
    import uvicorn
    from .api import create_app

    agent = _agent(ctx)
    server_config = agent.config_manager.get_section('server')
    app = create_app(agent.orchestrator, agent.history, agent.reconciler, agent.settings_store)
    uvicorn.run(
        app,
        host=host or server_config.get('host', '127.0.0.1'),
        port=port or int(server_config.get('port', 8080)),
    )
