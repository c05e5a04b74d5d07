from __future__ import annotations

import typer

from .commands import api_cmd, auth_cmd, completion_cmd, issue_cmd, pipeline_cmd, pr_cmd, repo_cmd, wiki_cmd
from .logging_ import setup_logging
from .version import cli_version


def _print_version() -> None:
    typer.echo(f"bb version {cli_version()}")


def _version_callback(value: bool) -> None:
    if value:
        _print_version()
        raise typer.Exit()


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="bb",
        help="bb - Bitbucket Cloud CLI",
        no_args_is_help=True,
        add_completion=False,
    )

    app.add_typer(auth_cmd.app, name="auth")
    app.command("api")(api_cmd.api)
    app.add_typer(repo_cmd.app, name="repo")
    app.add_typer(pr_cmd.app, name="pr")
    app.add_typer(pipeline_cmd.app, name="pipeline")
    app.add_typer(wiki_cmd.app, name="wiki")
    app.add_typer(issue_cmd.app, name="issue")
    app.command("completion")(completion_cmd.completion)

    @app.command("version")
    def version():
        """Show CLI version."""
        _print_version()

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
            version: bool = typer.Option(
                False,
                "--version",
                callback=_version_callback,
                is_eager=True,
                help="Show CLI version and exit.",
            ),
    ):
        setup_logging(verbose)

    return app


app = _build_app()
