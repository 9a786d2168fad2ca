"""Click CLI interface for sqlobjectdump."""

import logging
import sys

import click

from . import __version__
from .backends import get_backend
from .config import DESCRIPTOR_FORMAT, DumpConfig
from .exceptions import (
    BackendNotAvailableError,
    ConfigurationError,
    ConnectionError,
    ExtractionError,
    SqlObjectDumpError,
    VersionControlError,
)
from .generators import SqlFileGenerator, annotate
from .vcs import GitRepository


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level."""
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_config(descriptor: str, **kwargs) -> DumpConfig:
    """Parse and validate, turning configuration problems into usage errors."""
    try:
        config = DumpConfig.from_descriptor(descriptor, **kwargs)
        config.validate()
    except ConfigurationError as e:
        raise click.UsageError(str(e), ctx=click.get_current_context(silent=True))
    return config


@click.group()
@click.version_option(version=__version__)
def cli():
    """sqlobjectdump - Export SQL Server object definitions to .sql files."""
    pass


@cli.command()
@click.argument("descriptor", metavar=DESCRIPTOR_FORMAT)
@click.option("-o", "--directory", required=True, type=click.Path(file_okay=False),
              envvar="SQLOBJECTDUMP_DIRECTORY", help="Root directory to export to")
@click.option("-s", "--schema", default="", help="Schema to export (default: all non-system schemas)")
@click.option("-t", "--type", "object_type", default="",
              help="Object type code to export, e.g. U, V, P, FN, TR (default: all)")
@click.option("--git", is_flag=True, help="Clone/pull before and commit/push after the export")
@click.option("--git-address", help="Git repository to clone into the directory")
@click.option("--driver", envvar="ODBC_DRIVER", help="ODBC driver name (auto-detected by default)")
@click.option("--skip-incomplete", is_flag=True,
              help="Do not write objects whose definition could not be retrieved")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.option("--dry-run", is_flag=True, help="Preview without writing files or running git")
def dump(
    descriptor: str,
    directory: str,
    schema: str,
    object_type: str,
    git: bool,
    git_address: str | None,
    driver: str | None,
    skip_incomplete: bool,
    verbose: int,
    dry_run: bool,
) -> None:
    """Export object definitions from the database named by DESCRIPTOR."""
    setup_logging(verbose)
    logger = logging.getLogger(__name__)

    config = build_config(
        descriptor,
        output_dir=directory,
        schema=schema,
        object_type=object_type,
        git=git,
        git_address=git_address,
        driver=driver,
        skip_incomplete=skip_incomplete,
        dry_run=dry_run,
        verbosity=verbose,
    )

    try:
        ConnectionClass, extractors = get_backend("mssql")

        with ConnectionClass(config) as conn:
            objects = extractors["catalog"](conn, config).extract()
            click.echo(f"Prepared {len(objects)} objects for export")

            definitions = extractors["definitions"](conn, config)
            total = len(objects)
            for i, obj in enumerate(objects, start=1):
                logger.info(
                    f"{i}/{total} Retrieving {obj.object_type_desc} definition for "
                    f"{obj.full_name} [{obj.object_type}]"
                )
                annotate(definitions.extract(obj))

        repo = None
        if config.git and not config.dry_run:
            repo = GitRepository(config.output_dir, config.git_address)
            repo.initialize()

        result = SqlFileGenerator(config).generate(objects)
        prefix = "[DRY RUN] Would write" if config.dry_run else "Wrote"
        click.echo(f"{prefix} {len(result.written)} files in {config.export_root}")
        if result.skipped:
            click.echo(f"Skipped {len(result.skipped)} objects without a definition", err=True)
        if result.failed:
            click.echo(f"Failed to write {len(result.failed)} objects", err=True)

        if repo is not None:
            try:
                repo.commit_and_push()
                click.echo("Committed and pushed changes")
            except VersionControlError as e:
                click.echo(f"Git error: {e}", err=True)

    except BackendNotAvailableError as e:
        click.echo(f"Backend not available: {e}", err=True)
        sys.exit(1)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except ConnectionError as e:
        click.echo(f"Connection error: {e}", err=True)
        sys.exit(1)
    except ExtractionError as e:
        logger.error(f"Catalog query failed: {e}")
        click.echo(f"Failed to list objects: {e}", err=True)
        sys.exit(1)
    except SqlObjectDumpError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        click.echo(f"Unexpected error: {e}", err=True)
        sys.exit(1)


@cli.command()
def drivers() -> None:
    """List installed SQL Server ODBC drivers."""
    click.echo("MS SQL Server ODBC Drivers:")
    try:
        import pyodbc
    except ImportError:
        click.echo("  pyodbc not installed")
        return

    sql_drivers = [d for d in pyodbc.drivers() if "SQL" in d.upper()]
    if sql_drivers:
        for driver in sql_drivers:
            click.echo(f"  - {driver}")
    else:
        click.echo("  None found")


@cli.command("test-connection")
@click.argument("descriptor", metavar=DESCRIPTOR_FORMAT)
@click.option("--driver", envvar="ODBC_DRIVER", help="ODBC driver name (auto-detected by default)")
def test_connection(descriptor: str, driver: str | None) -> None:
    """Test database connection."""
    config = build_config(descriptor, driver=driver)
    try:
        ConnectionClass, _ = get_backend("mssql")

        click.echo(f"Connecting to {config.host}:{config.port}/{config.database}...")
        with ConnectionClass(config) as conn:
            version = conn.get_version()
            click.echo("Connection successful!")
            click.echo(f"\nServer version:\n{version}")

    except BackendNotAvailableError as e:
        click.echo(f"Backend not available: {e}", err=True)
        sys.exit(1)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except (ConnectionError, ExtractionError) as e:
        click.echo(f"Connection failed: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
