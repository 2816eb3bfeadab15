"""CLI command using Typer."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:
    from couchbase_installer.context import AppContext, ContextFactory

import click
import typer

from couchbase_installer.config import load_config
from couchbase_installer.console import TUI, configure_logging
from couchbase_installer.context import create_context
from couchbase_installer.errors import ConfigError, InstallerError, UsageError
from couchbase_installer.install import InstallStage
from couchbase_installer.platforms import is_amazon_linux
from couchbase_installer.resolver import resolve_request
from couchbase_installer.types import ChecksumType, Edition

PROG_NAME = "install-couchbase-server"

app = typer.Typer(
    name=PROG_NAME,
    help="Install Couchbase Server and tune the OS for it, without starting the service",
    add_completion=False,
)

tui = TUI()


def _non_empty(value: str | None) -> str | None:
    """Reject options given with an empty value."""
    if value is not None and not value.strip():
        raise typer.BadParameter("requires a non-empty value")
    return value


@app.command()
def install(
    ctx: typer.Context,
    edition: Annotated[
        Edition, typer.Option("--edition", help="Couchbase Server edition to install")
    ] = Edition.ENTERPRISE,
    version: Annotated[
        str | None,
        typer.Option(
            "--version",
            callback=_non_empty,
            help="Exact version to install. Requires --checksum and --checksum-type",
        ),
    ] = None,
    checksum: Annotated[
        str | None,
        typer.Option("--checksum", callback=_non_empty, help="Expected digest of the package"),
    ] = None,
    checksum_type: Annotated[
        ChecksumType | None,
        typer.Option("--checksum-type", help="Algorithm used to compute --checksum"),
    ] = None,
    swappiness: Annotated[
        int, typer.Option("--swappiness", min=0, max=200, help="Value for vm.swappiness")
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option("--config", dir_okay=False, help="YAML file overriding installer settings"),
    ] = None,
    companion_dir: Annotated[
        Path | None,
        typer.Option(
            "--companion-dir",
            file_okay=False,
            help="Directory holding the companion scripts and bash-commons",
        ),
    ] = None,
    verbose: Annotated[
        int, typer.Option("--verbose", "-v", count=True, help="Increase logging verbosity")
    ] = 0,
) -> None:
    """Install Couchbase Server on Ubuntu or Amazon Linux.

    The package is installed with autostart disabled; swappiness and
    transparent huge pages are tuned and the runtime scripts are staged.
    """
    configure_logging(verbose)

    factory: ContextFactory = ctx.obj or create_context
    try:
        settings = load_config(config)
    except ConfigError as e:
        tui.show_error(str(e))
        raise typer.Exit(1) from e

    if companion_dir is not None:
        settings = settings.model_copy(update={"companion_dir": companion_dir})
    app_ctx: AppContext = factory(settings)

    installer = app_ctx.installer
    try:
        installer.enter(InstallStage.VALIDATING)
        os_info = installer.read_os_info()
        request = resolve_request(
            app_ctx.config,
            edition=edition,
            version=version,
            checksum=checksum,
            checksum_type=checksum_type,
            swappiness=swappiness,
            is_amazon_linux=is_amazon_linux(os_info),
        )
        plan = installer.plan(request, os_info)
        tui.show_plan(plan)
        installer.execute(plan)
    except UsageError as e:
        typer.echo(ctx.get_usage(), err=True)
        tui.show_error(str(e))
        raise typer.Exit(1) from e
    except InstallerError as e:
        tui.show_error(f"Install failed while {installer.stage.value}: {e}")
        raise typer.Exit(1) from e

    tui.show_success(
        f"Installed Couchbase Server {request.edition.value} {request.version}; "
        f"the service has not been started"
    )


def run(argv: Sequence[str] | None = None, factory: ContextFactory | None = None) -> int:
    """Run the CLI and return its exit code.

    Usage errors exit with 1 rather than click's default of 2.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].
        factory: Builds the application context from the loaded
            configuration (for testing). Defaults to create_context.

    Returns:
        Process exit code.
    """
    try:
        result = app(
            args=list(argv) if argv is not None else None,
            prog_name=PROG_NAME,
            standalone_mode=False,
            obj=factory,
        )
    except click.UsageError as e:
        e.show()
        return 1
    except click.Abort:
        tui.show_error("Aborted")
        return 1
    return result if isinstance(result, int) else 0


def main() -> None:
    """Console script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
