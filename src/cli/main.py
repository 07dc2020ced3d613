"""Main CLI entry point for the bitbucket-client command.

This module provides the Typer application used by operators to inspect and
maintain repository webhooks, and to browse projects and repositories, on a
Bitbucket Server instance. Connection settings come from
.bitbucket-client/config.yaml and BITBUCKET_* environment variables.
"""

import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional, Tuple, TypeVar

import typer

from src.bitbucket_client.auth import Authenticator
from src.bitbucket_client.client_factory import BitbucketClientFactory
from src.bitbucket_client.errors import (
    BitbucketError,
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    RateLimitExceededError,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from src.bitbucket_client.retry_logic import retry_on_rate_limit
from src.cli.config import ConfigLoader
from src.cli.errors import ConfigError
from src.cli.models import ClientConfig, ExitCode
from src.cli.output import OutputHandler
from src.models.webhook import WebhookRequestBuilder

app = typer.Typer(
    name="bitbucket-client",
    help="""Inspect and maintain Bitbucket Server webhooks.

QUICK START:
  bitbucket-client configure --url <server> --project <KEY> --repo <slug>
  bitbucket-client list-webhooks --event repo:refs_changed
  bitbucket-client register-webhook --event repo:refs_changed --url <callback>

Credentials are read from BITBUCKET_TOKEN or BITBUCKET_USER/BITBUCKET_PASSWORD
(a .env file is honoured).""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"bitbucket-client_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _exit_code_for(error: Exception) -> ExitCode:
    """Map a client error to the CLI exit code."""
    if isinstance(error, (UnauthorizedError, ForbiddenError, InvalidCredentialsError)):
        return ExitCode.AUTH_ERROR
    if isinstance(error, (TransportError, ServerError, RateLimitExceededError)):
        return ExitCode.NETWORK_ERROR
    if isinstance(error, NotFoundError):
        return ExitCode.NOT_FOUND
    if isinstance(error, ConflictError):
        return ExitCode.CONFLICT
    return ExitCode.GENERAL_ERROR


@contextmanager
def _handle_errors(output: OutputHandler, action: str) -> Iterator[None]:
    """Report client errors on the terminal and exit with the mapped code."""
    try:
        yield
    except typer.Exit:
        raise
    except ValidationError as e:
        logger.error(f"{action} failed: {e}")
        output.error(f"{action} failed: {e}")
        for field_error in e.field_errors:
            output.print(f"  {field_error.context or 'request'}: {field_error.message}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except BitbucketError as e:
        logger.error(f"{action} failed: {e}")
        output.error(f"{action} failed: {e}")
        raise typer.Exit(_exit_code_for(e))
    except Exception as e:
        logger.exception(f"Unexpected error during {action}")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def _create_factory(config: ClientConfig) -> BitbucketClientFactory:
    """Build a client factory from file settings and the environment.

    Raises:
        InvalidCredentialsError: If no base URL is known or credentials are incomplete
    """
    authenticator = Authenticator()
    base_url = config.base_url or authenticator.get_base_url()
    return BitbucketClientFactory(
        base_url=base_url,
        credentials=authenticator.get_credentials(),
        timeout=config.timeout,
        retry=retry_on_rate_limit if config.retry_rate_limited else None,
    )


def _call(config: ClientConfig, func: Callable[..., T], *args: Any) -> T:
    """Invoke a single-request operation, riding out 429s when the config allows it.

    Listings get the same policy on every page through the factory.
    """
    if config.retry_rate_limited:
        return retry_on_rate_limit(func, *args)
    return func(*args)


def _resolve_scope(
    config: ClientConfig,
    project: Optional[str],
    repo: Optional[str],
    need_repo: bool = True,
) -> Tuple[str, Optional[str]]:
    """Pick project key and repository slug from options, then config.

    Raises:
        ConfigError: If a required value is set in neither place
    """
    project_key = project or config.project_key
    if not project_key:
        raise ConfigError("No project key given (use --project or set project_key)", 'project_key')
    repo_slug = repo or config.repo_slug
    if need_repo and not repo_slug:
        raise ConfigError("No repository slug given (use --repo or set repo_slug)", 'repo_slug')
    return project_key, repo_slug


def _state(ctx: typer.Context) -> Tuple[ClientConfig, OutputHandler]:
    return ctx.obj['config'], ctx.obj['output']


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: str = typer.Option(
        ConfigLoader.DEFAULT_CONFIG_PATH,
        "--config",
        help="Path to the YAML configuration file",
        metavar="PATH",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """Inspect and maintain Bitbucket Server webhooks."""
    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        config = ConfigLoader.load_or_default(config_path)
    except BitbucketError as e:
        output.error(f"Failed to load config: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    ctx.obj = {'config': config, 'config_path': config_path, 'output': output}


@app.command("configure")
def configure_command(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", help="Bitbucket server URL"),
    project: Optional[str] = typer.Option(None, "--project", help="Default project key"),
    repo: Optional[str] = typer.Option(None, "--repo", help="Default repository slug"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds"),
) -> None:
    """Save default connection settings to the configuration file."""
    config, output = _state(ctx)
    config_path = ctx.obj['config_path']

    if url is None and project is None and repo is None and timeout is None:
        output.warning("No settings given; configuration left unchanged")
        raise typer.Exit(ExitCode.SUCCESS)

    if url is not None:
        config.base_url = url.rstrip('/')
    if project is not None:
        config.project_key = project
    if repo is not None:
        config.repo_slug = repo
    if timeout is not None:
        config.timeout = timeout

    with _handle_errors(output, "Saving configuration"):
        ConfigLoader.save(config_path, config)

    output.success(f"Configuration saved to {config_path}")
    raise typer.Exit(ExitCode.SUCCESS)


@app.command("list-webhooks")
def list_webhooks_command(
    ctx: typer.Context,
    events: Optional[List[str]] = typer.Option(
        None,
        "--event",
        "-e",
        help="Only show webhooks subscribed to this event (can be used multiple times)",
    ),
    project: Optional[str] = typer.Option(None, "--project", help="Project key"),
    repo: Optional[str] = typer.Option(None, "--repo", help="Repository slug"),
) -> None:
    """List the webhooks of a repository."""
    config, output = _state(ctx)

    with _handle_errors(output, "Listing webhooks"):
        project_key, repo_slug = _resolve_scope(config, project, repo)
        client = _create_factory(config).webhook_client(project_key, repo_slug)
        webhooks = client.get_webhooks(*(events or []))
        count = output.print_webhooks(webhooks)
        output.info(f"{count} webhook(s) on {project_key}/{repo_slug}")

    raise typer.Exit(ExitCode.SUCCESS)


@app.command("register-webhook")
def register_webhook_command(
    ctx: typer.Context,
    events: List[str] = typer.Option(
        ...,
        "--event",
        "-e",
        help="Event to subscribe to (repeat for several events)",
    ),
    url: str = typer.Option(..., "--url", help="Callback URL"),
    name: Optional[str] = typer.Option(None, "--name", help="Webhook name"),
    inactive: bool = typer.Option(False, "--inactive", help="Register the webhook disabled"),
    project: Optional[str] = typer.Option(None, "--project", help="Project key"),
    repo: Optional[str] = typer.Option(None, "--repo", help="Repository slug"),
) -> None:
    """Register a webhook on a repository."""
    config, output = _state(ctx)

    with _handle_errors(output, "Registering webhook"):
        builder = WebhookRequestBuilder.a_request_for(*events).with_callback_to(url).with_is_active(not inactive)
        if name:
            builder = builder.name(name)
        request = builder.build()

        project_key, repo_slug = _resolve_scope(config, project, repo)
        client = _create_factory(config).webhook_client(project_key, repo_slug)
        with output.spinner("Registering webhook..."):
            webhook = _call(config, client.register_webhook, request)

    output.success(f"Registered webhook {webhook.id} ({', '.join(sorted(webhook.events))})")
    raise typer.Exit(ExitCode.SUCCESS)


@app.command("delete-webhook")
def delete_webhook_command(
    ctx: typer.Context,
    webhook_id: int = typer.Argument(..., help="Webhook id"),
    project: Optional[str] = typer.Option(None, "--project", help="Project key"),
    repo: Optional[str] = typer.Option(None, "--repo", help="Repository slug"),
) -> None:
    """Delete a webhook from a repository."""
    config, output = _state(ctx)

    with _handle_errors(output, "Deleting webhook"):
        project_key, repo_slug = _resolve_scope(config, project, repo)
        client = _create_factory(config).webhook_client(project_key, repo_slug)
        _call(config, client.delete_webhook, webhook_id)

    output.success(f"Deleted webhook {webhook_id}")
    raise typer.Exit(ExitCode.SUCCESS)


@app.command("list-repos")
def list_repos_command(
    ctx: typer.Context,
    project: Optional[str] = typer.Option(None, "--project", help="Project key"),
) -> None:
    """List the repositories of a project."""
    config, output = _state(ctx)

    with _handle_errors(output, "Listing repositories"):
        project_key, _ = _resolve_scope(config, project, None, need_repo=False)
        client = _create_factory(config).repository_client(project_key)
        output.print_repositories(client.get_repositories())

    raise typer.Exit(ExitCode.SUCCESS)


@app.command("list-projects")
def list_projects_command(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Only show projects matching this name"),
) -> None:
    """List the projects visible to the configured credentials."""
    config, output = _state(ctx)

    with _handle_errors(output, "Listing projects"):
        client = _create_factory(config).project_client()
        output.print_projects(client.get_projects(name))

    raise typer.Exit(ExitCode.SUCCESS)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
