"""Typer application wiring the release-frag commands."""

import typer
from rich.console import Console

from release_frag import __version__
from release_frag.cli.output import configure_logging
from release_frag.core.version import BumpType

app = typer.Typer(
    name="release-frag",
    help="Semantic-version releases driven by changelog fragments.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"release-frag {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    path: str | None = typer.Option(
        None, "--path", "-C", help="Project directory (defaults to the current directory)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the release-frag version and exit",
    ),
) -> None:
    """Semantic-version releases driven by changelog fragments."""
    configure_logging(verbose, err_console)
    ctx.obj = {"path": path}


@app.command("bump-type")
def bump_type_command(
    ctx: typer.Context,
    default: BumpType | None = typer.Option(
        None,
        "--default",
        envvar="DEFAULT_BUMP",
        help="Bump used when no fragment declares a more significant one",
    ),
) -> None:
    """Determine the version bump from pending changelog fragments."""
    from release_frag.cli.commands.bump_type import run_bump_type

    run_bump_type(ctx.obj["path"], default, console, err_console)


@app.command("bump")
def bump_command(
    ctx: typer.Context,
    bump_type: BumpType = typer.Option(
        ..., "--bump-type", "-b", envvar="BUMP_TYPE", help="Version bump type"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show the new version without writing it"
    ),
) -> None:
    """Bump the version declared in the manifest."""
    from release_frag.cli.commands.bump import run_bump

    run_bump(ctx.obj["path"], bump_type, dry_run, console, err_console)


@app.command("collect")
def collect_command(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview the entry without writing it"),
) -> None:
    """Collect changelog fragments into the changelog for the current version."""
    from release_frag.cli.commands.collect import run_collect

    run_collect(ctx.obj["path"], dry_run, console, err_console)


@app.command("release")
def release_command(
    ctx: typer.Context,
    bump_type: BumpType | None = typer.Option(
        None,
        "--bump-type",
        "-b",
        envvar="BUMP_TYPE",
        help="Version bump type (resolved from fragments when omitted)",
    ),
    default: BumpType | None = typer.Option(
        None, "--default", envvar="DEFAULT_BUMP", help="Default bump when resolving from fragments"
    ),
    version_override: str | None = typer.Option(
        None, "--version", envvar="VERSION", help="Release this exact version instead of bumping"
    ),
    description: str | None = typer.Option(
        None,
        "--description",
        "-d",
        envvar="DESCRIPTION",
        help="Text added to commit and tag messages",
    ),
    push: bool = typer.Option(True, "--push/--no-push", help="Push the release commit and tag"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Compute the release without changing anything"
    ),
) -> None:
    """Bump, collect the changelog, commit, tag and push."""
    from release_frag.cli.commands.release import run_release

    run_release(
        ctx.obj["path"],
        bump_type,
        default,
        version_override,
        description,
        push,
        dry_run,
        console,
        err_console,
    )


@app.command("publish")
def publish_command(
    ctx: typer.Context,
    release_version: str = typer.Option(
        ..., "--release-version", envvar="VERSION", help="Version to publish (e.g. 1.2.0)"
    ),
    repository: str | None = typer.Option(
        None, "--repository", envvar="REPOSITORY", help="GitHub repository as owner/name"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show the release notes without publishing"
    ),
) -> None:
    """Create the GitHub release for a tagged version."""
    from release_frag.cli.commands.publish import run_publish

    run_publish(ctx.obj["path"], release_version, repository, dry_run, console, err_console)


def main() -> None:
    app()
