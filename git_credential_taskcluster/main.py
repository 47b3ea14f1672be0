"""CLI entry point for the credential helper.

The helper takes the command (``retrieve``, ``store`` or ``erase``) as its
only argument and the request on stdin; a ``retrieve`` answer is written to
stdout. For example::

    printf 'protocol=https\\nhost=github.com\\n' | git-credential-taskcluster retrieve

Settings come from ``TASKCLUSTER_*`` environment variables; any option given
on the command line wins.
"""

import asyncio
import sys

import click
import structlog

from git_credential_taskcluster import __version__
from git_credential_taskcluster.config.settings import HelperSettings
from git_credential_taskcluster.credentials.backend import Helper
from git_credential_taskcluster.credentials.null_backend import NullHelper
from git_credential_taskcluster.credentials.runner import run_helper
from git_credential_taskcluster.credentials.taskcluster_backend import TaskclusterHelper
from git_credential_taskcluster.exceptions import GitCredentialError
from git_credential_taskcluster.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


@click.command(name="git-credential-taskcluster")
@click.argument("command")
@click.option("--verbose", "-v", is_flag=True, help="Increase logging verbosity")
@click.option("--json-logs", is_flag=True, help="Write logs to stderr as JSON lines")
@click.option(
    "--backend",
    type=click.Choice(["taskcluster", "null"]),
    default="taskcluster",
    show_default=True,
    help="Credential backend (null echoes requests back and ignores store/erase)",
)
@click.option("--secret-name", help="The Taskcluster secret to read credentials from [env: TASKCLUSTER_GIT_SECRET]")
@click.option("--proxy-url", help="A URL to a Taskcluster proxy to use [env: TASKCLUSTER_PROXY_URL]")
@click.option("--root-url", help="The Taskcluster instance root URL [env: TASKCLUSTER_ROOT_URL]")
@click.option("--client-id", help="The Taskcluster client ID [env: TASKCLUSTER_CLIENT_ID]")
@click.option("--access-token", help="The Taskcluster access token [env: TASKCLUSTER_ACCESS_TOKEN]")
@click.option("--certificate", help="The Taskcluster certificate [env: TASKCLUSTER_CERTIFICATE]")
@click.option("--timeout", type=float, help="HTTP timeout in seconds [env: TASKCLUSTER_GIT_TIMEOUT]")
@click.version_option(__version__, prog_name="git-credential-taskcluster")
def cli(
    command: str,
    verbose: bool,
    json_logs: bool,
    backend: str,
    secret_name: str | None,
    proxy_url: str | None,
    root_url: str | None,
    client_id: str | None,
    access_token: str | None,
    certificate: str | None,
    timeout: float | None,
) -> None:
    """Run the git-credential COMMAND (retrieve, store or erase)."""
    configure_logging("DEBUG" if verbose else "INFO", json_logs=json_logs)

    try:
        helper: Helper
        if backend == "null":
            helper = NullHelper()
        else:
            settings = HelperSettings.load(
                git_secret=secret_name,
                proxy_url=proxy_url,
                root_url=root_url,
                client_id=client_id,
                access_token=access_token,
                certificate=certificate,
                git_timeout=timeout,
            )
            helper = TaskclusterHelper.from_settings(settings)

        asyncio.run(
            run_helper(
                helper,
                command,
                click.get_binary_stream("stdin"),
                click.get_binary_stream("stdout"),
            )
        )
    except GitCredentialError as e:
        log.error("helper_command_failed", command=command, error=str(e), error_type=type(e).__name__)
        log.debug("helper_command_traceback", exc_info=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)
    except Exception as e:
        log.error("helper_command_unexpected", command=command, error=str(e), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
