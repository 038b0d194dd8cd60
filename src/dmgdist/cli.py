"""Typer CLI entrypoint for dmgdist."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
import yaml

from dmgdist.config import AppSettings, load_settings
from dmgdist.errors import DmgDistError
from dmgdist.logging_utils import LOG_FILE_NAME, configure_logging
from dmgdist.models import AccountCredentials
from dmgdist.workflow import build_workflow

app = typer.Typer(
    add_completion=False,
    help="dmgdist command line interface.",
    no_args_is_help=True,
)


def _load_and_optionally_configure_logger(
    config_file: Path | None,
    configure: bool,
    verbose: bool = False,
) -> tuple[AppSettings, logging.Logger]:
    settings = load_settings(config_file=config_file)
    if configure:
        level = logging.DEBUG if verbose else logging.INFO
        logger = configure_logging(settings.paths.logs_root / LOG_FILE_NAME, level=level)
    else:
        logger = logging.getLogger("dmgdist")
    return settings, logger


def _normalize_request_id(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    if not normalized:
        raise typer.BadParameter("check-request-id must not be empty.")
    return normalized


@app.command("show-config")
def show_config(
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        help="Optional settings YAML path.",
        exists=False,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Print the effective configuration after env overrides."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    rendered = yaml.safe_dump(settings.as_dict(), sort_keys=False)
    typer.echo(rendered)


@app.command("notarize")
def notarize_cmd(
    app_file_path: Path = typer.Argument(
        ...,
        help="Path to the developer ID signed .app (doesn't have to be notarized).",
    ),
    identity: str = typer.Argument(
        ...,
        help='Code signing identity, such as "Developer ID Application: John Doe (XXXX123YY)".',
    ),
    asc_provider: str = typer.Argument(..., help="App Store Connect provider ID (the developer team ID)."),
    asc_email: str = typer.Argument(..., help="App Store Connect e-mail."),
    asc_password: str = typer.Argument(
        ...,
        help="App-specific password or @keychain:ITEMNAME; with notarytool, the keychain profile name.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output."),
    use_notary_tool: bool | None = typer.Option(
        None,
        "--use-notary-tool/--no-use-notary-tool",
        help="Submit with notarytool instead of the legacy altool (defaults to the configured value).",
    ),
    check_request_id: str | None = typer.Option(
        None,
        "--check-request-id",
        help="Skip packaging and upload; keep checking the status of this notarization request.",
    ),
    dmg_name: str | None = typer.Option(
        None,
        "--dmg-name",
        help="Custom name for the output DMG file.",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        help="Optional settings YAML path.",
        exists=False,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Package an app into a DMG, notarize it, and staple the ticket."""

    request_id = _normalize_request_id(check_request_id)
    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True, verbose=verbose)
    credentials = AccountCredentials(
        provider_id=asc_provider,
        account_email=asc_email,
        account_secret=asc_password,
    )
    workflow = build_workflow(
        settings,
        credentials,
        use_notary_tool=use_notary_tool,
        verbose=verbose,
        logger=logger,
    )

    try:
        if request_id is not None:
            result = workflow.resume(request_id)
        else:
            result = workflow.run(app_file_path, identity, dmg_name)
    except DmgDistError as exc:
        logger.error("notarize.failed state=%s error=%s", workflow.state, exc)
        typer.secho(f"Error: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    if result.handle is not None:
        typer.echo(f"request_id: {result.handle}")
    if result.artifact is not None:
        typer.echo(f"artifact_path: {result.artifact.path}")
        typer.echo(f"bundle_id: {result.artifact.bundle_identifier}")
    typer.echo(f"stapled: {result.stapled}")
    if result.stapled:
        typer.echo("Ready for distribution")


def main() -> None:
    """CLI script entrypoint."""

    app()


if __name__ == "__main__":
    main()
