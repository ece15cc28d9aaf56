"""docmigrate CLI tool."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from docmigrate import __version__
from docmigrate.core.client import S3ClientManager
from docmigrate.core.exceptions import DocMigrateError
from docmigrate.core.settings import DocMigrateSettings
from docmigrate.migrations import MigrationOrchestrator, StepLoader, StepRegistry
from docmigrate.stores.s3 import S3DocumentStore


def _store_options(func):
    """Options shared by the commands that talk to the bucket."""
    options = [
        click.option("--bucket", help="S3 bucket name (AWS_BUCKET_NAME)"),
        click.option("--prefix", help="Key prefix of the documents (S3_BASE_PATH)"),
        click.option("--endpoint", help="S3 endpoint URL, e.g. for LocalStack (AWS_URL)"),
        click.option("--dir", "migrations_dir", help="Migrations directory (MIGRATIONS_DIR)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_settings(**overrides) -> DocMigrateSettings:
    mapping = {
        "bucket": "aws_bucket_name",
        "prefix": "s3_base_path",
        "endpoint": "aws_url",
        "migrations_dir": "migrations_dir",
        "page_size": "page_size",
    }
    values = {
        mapping[name]: value
        for name, value in overrides.items()
        if value is not None and name in mapping
    }
    return DocMigrateSettings(**values)


def _configure_logging(settings: DocMigrateSettings, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _with_orchestrator(settings: DocMigrateSettings, action):
    """Open an S3 client, build the orchestrator and run ``action`` on it."""
    settings.require("aws_bucket_name")
    manager = S3ClientManager(settings)

    async with manager.get_async_client() as s3_client:
        await manager.ensure_bucket_exists(s3_client)
        store = S3DocumentStore(
            s3_client,
            settings.aws_bucket_name,
            prefix=settings.s3_base_path,
            version_field=settings.version_field,
            id_field=settings.id_field,
        )
        orchestrator = MigrationOrchestrator(
            store,
            loader=StepLoader(settings.migrations_dir),
            settings=settings,
        )
        return await action(orchestrator)


def _run_or_exit(coro):
    try:
        return asyncio.run(coro)
    except DocMigrateError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


@click.group()
def cli():
    """docmigrate - Migrate versioned JSON documents stored in S3."""
    pass


@cli.command()
@_store_options
@click.option("--to", "up_to", type=int, help="Version to migrate to (default: latest step)")
@click.option("--page-size", type=click.IntRange(min=1), help="Documents fetched per page")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def run(bucket, prefix, endpoint, migrations_dir, up_to, page_size, as_json, verbose):
    """Migrate every document below the target version."""
    settings = _build_settings(
        bucket=bucket,
        prefix=prefix,
        endpoint=endpoint,
        migrations_dir=migrations_dir,
        page_size=page_size,
    )
    _configure_logging(settings, verbose)

    async def _run(orchestrator: MigrationOrchestrator):
        return await orchestrator.run_migrations(up_to)

    report = _run_or_exit(_with_orchestrator(settings, _run))

    if as_json:
        click.echo(json.dumps(report.to_dict()))
        return

    click.echo(f"\n✅ Migrated documents up to v{report.target}")
    click.echo(f"   Processed: {report.done}/{report.total}")
    click.echo(f"   Modified:  {report.written}")
    if report.failed:
        click.echo(f"   ❌ Failed:  {report.failed}")


@cli.command()
@_store_options
def status(bucket, prefix, endpoint, migrations_dir):
    """Show the latest step and how many documents lag behind it."""
    settings = _build_settings(
        bucket=bucket,
        prefix=prefix,
        endpoint=endpoint,
        migrations_dir=migrations_dir,
    )
    _configure_logging(settings)

    async def _status(orchestrator: MigrationOrchestrator):
        await orchestrator.load_steps()
        target = orchestrator.resolve_target(None)
        pending = await orchestrator.count_candidates(target)
        return target, pending

    target, pending = _run_or_exit(_with_orchestrator(settings, _status))

    click.echo("\n📋 Migration Status:\n")
    click.echo(f"Latest step: v{target}")
    if pending:
        click.echo(f"Pending documents: {pending}")
    else:
        click.echo("Pending documents: (none)")


@cli.command()
@click.option("--dir", "migrations_dir", default=None, help="Migrations directory (MIGRATIONS_DIR)")
def steps(migrations_dir):
    """List the migration steps found in the migrations directory."""
    settings = _build_settings(migrations_dir=migrations_dir)
    directory = Path(settings.migrations_dir)

    try:
        registry = StepRegistry(StepLoader(directory).load())
    except DocMigrateError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    if not registry:
        click.echo(f"No migration steps found in {directory}")
        return

    click.echo(f"\nFound {len(registry)} step(s) in {directory}:\n")
    for step in registry.steps:
        kind = "transform" if step.transform else "stamp only"
        description = f": {step.description}" if step.description else ""
        click.echo(f"  ○ v{step.id} ({kind}){description}")


@cli.command()
def version():
    """Show docmigrate version."""
    click.echo(f"docmigrate version: {__version__}")


if __name__ == "__main__":
    cli()
