"""
Click CLI for scheduled start/stop of Azure Container Apps.
"""

import json
import sys
from typing import Any, Dict, Optional

import click

from .batch import LifecycleAction
from .config import Settings
from .errors import AcaSchedError, ConfigError
from .workflow import RunOutcome, execute_lifecycle, execute_memory


@click.group()
@click.option("--subscription-id", envvar="AZURE_SUBSCRIPTION_ID", help="Azure subscription ID")
@click.option("--log-dir", envvar="ACASCHED_LOG_DIR", type=click.Path(file_okay=False), help="Directory for run logs")
@click.option("--log-prefix", envvar="ACASCHED_LOG_PREFIX", help="Log file name prefix (default: ContainerApps)")
@click.option("--no-install", is_flag=True, help="Fail instead of installing missing Azure libraries")
@click.pass_context
def main(ctx, subscription_id: Optional[str], log_dir: Optional[str], log_prefix: Optional[str], no_install: bool):
    """
    Start and stop every Container App in an Azure Container Apps environment.
    """
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {
        "subscription_id": subscription_id,
        "log_dir": log_dir,
        "log_prefix": log_prefix,
        "auto_install": False if no_install else None,
    }


def _load_settings(ctx) -> Settings:
    try:
        return Settings.from_env(**ctx.obj["overrides"])
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


def _not_blank(ctx, param, value: str) -> str:
    if not value.strip():
        raise click.BadParameter("must not be empty")
    return value


def _json_output(data: Dict[str, Any]) -> None:
    click.echo(json.dumps(data, indent=2))


def _finish(outcome: RunOutcome, output_json: bool) -> None:
    if output_json:
        _json_output(outcome.to_dict())
    sys.exit(outcome.exit_code)


@main.command("start")
@click.option("--resource-group", "-g", required=True, callback=_not_blank,
              help="Resource group holding the Container Apps")
@click.option("--environment", "-e", "environment", required=True, callback=_not_blank,
              help="Container Apps environment name")
@click.option("--json", "output_json", is_flag=True, help="Print the run report as JSON")
@click.pass_context
def start_cmd(ctx, resource_group: str, environment: str, output_json: bool):
    """
    Start every Container App in an environment.
    """
    settings = _load_settings(ctx)
    outcome = execute_lifecycle(
        LifecycleAction.START, settings, resource_group, environment, console=not output_json
    )
    _finish(outcome, output_json)


@main.command("stop")
@click.option("--resource-group", "-g", required=True, callback=_not_blank,
              help="Resource group holding the Container Apps")
@click.option("--environment", "-e", "environment", required=True, callback=_not_blank,
              help="Container Apps environment name")
@click.option("--cae-resource-group", required=True, callback=_not_blank,
              help="Resource group of the Container Apps environment")
@click.option("--no-remediation", is_flag=True, help="Skip tagging the environment when it is in a failed state")
@click.option("--json", "output_json", is_flag=True, help="Print the run report as JSON")
@click.pass_context
def stop_cmd(ctx, resource_group: str, environment: str, cae_resource_group: str, no_remediation: bool,
             output_json: bool):
    """
    Stop every Container App in an environment.
    """
    settings = _load_settings(ctx)
    outcome = execute_lifecycle(
        LifecycleAction.STOP,
        settings,
        resource_group,
        environment,
        environment_resource_group=cae_resource_group,
        remediate=not no_remediation,
        console=not output_json,
    )
    _finish(outcome, output_json)


@main.command("memory")
@click.option("--resource-group", "-g", required=True, callback=_not_blank,
              help="Resource group holding the Container Apps")
@click.option("--environment", "-e", "environment", required=True, callback=_not_blank,
              help="Container Apps environment name")
@click.option("--json", "output_json", is_flag=True, help="Print the estimate as JSON")
@click.pass_context
def memory_cmd(ctx, resource_group: str, environment: str, output_json: bool):
    """
    Estimate memory and CPU reserved by an environment's Container Apps.
    """
    settings = _load_settings(ctx)
    try:
        report = execute_memory(settings, resource_group, environment)
    except AcaSchedError as e:
        click.echo(f"Memory estimate failed: {e}", err=True)
        sys.exit(1)

    if output_json:
        _json_output(report.to_dict())
        return

    click.echo(f"Environment: {environment}")
    if not report.apps and not report.skipped:
        click.echo("No Container Apps found")
        return

    for app in report.apps:
        click.echo(
            f"  {app.name}: {app.memory_gib:.2f} GiB, {app.cpu_cores:.2f} vCPU "
            f"({app.containers} container(s), min replicas {app.min_replicas})"
        )
    for name, reason in report.skipped.items():
        click.echo(f"  {name}: skipped ({reason})")

    click.echo(f"Total memory per replica: {report.total_memory_gib:.2f} GiB")
    click.echo(f"Total vCPU per replica: {report.total_cpu_cores:.2f}")
    click.echo(f"Total memory at minimum replicas: {report.total_memory_at_min_replicas_gib:.2f} GiB")


if __name__ == "__main__":
    main()
