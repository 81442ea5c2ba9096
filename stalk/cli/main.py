"""Command line: ``stalk [flags] KINDS [NAME ...]``.

Examples::

    stalk -n kube-system deployments,pods
    stalk -l app=nginx -e spec.replicas deploy
    stalk -j status pods nginx
"""

from __future__ import annotations

import asyncio

import click

from stalk.app import main
from stalk.config import ConfigError, load_config, validate_config
from stalk.diff.themes import THEMES
from stalk.models.config import StalkConfig
from stalk.observability.logging import LOG_FORMATS

_THEME_CHOICE = click.Choice(sorted(THEMES), case_sensitive=False)


def build_config(
    kinds: str,
    names: tuple[str, ...],
    *,
    kubeconfig: str | None = None,
    namespace: str | None = None,
    labels: str | None = None,
    jsonpath: str | None = None,
    exclude: tuple[str, ...] = (),
    context_lines: int | None = None,
    show_managed: bool = False,
    show_deleted: bool = False,
    create_theme: str | None = None,
    update_theme: str | None = None,
    delete_theme: str | None = None,
    verbose: bool = False,
    log_format: str | None = None,
) -> StalkConfig:
    """Environment configuration with command-line values laid on top."""
    config = load_config()
    config.watch.kinds = [kind.strip().lower() for kind in kinds.split(",") if kind.strip()]
    config.watch.names = list(names)

    if kubeconfig is not None:
        config.watch.kubeconfig = kubeconfig
    if namespace is not None:
        config.watch.namespace = namespace
    if labels is not None:
        config.watch.labels = labels
    if jsonpath is not None:
        config.diff.jsonpath = jsonpath
    if exclude:
        config.diff.exclude_paths = list(exclude)
    if context_lines is not None:
        config.diff.context_lines = context_lines
    if show_managed:
        config.diff.hide_managed_fields = False
    if show_deleted:
        config.diff.show_deleted = True
    if create_theme is not None:
        config.diff.create_theme = create_theme
    if update_theme is not None:
        config.diff.update_theme = update_theme
    if delete_theme is not None:
        config.diff.delete_theme = delete_theme
    if verbose:
        config.log.level = "debug"
    if log_format is not None:
        config.log.format = log_format

    return validate_config(config)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("kinds")
@click.argument("names", nargs=-1)
@click.option("--kubeconfig", default=None, help="kubeconfig file to use (uses $KUBECONFIG by default).")
@click.option("-n", "--namespace", default=None, help="Kubernetes namespace to watch resources in.")
@click.option("-l", "--labels", default=None, help="Label selector as an alternative to resource names.")
@click.option("-j", "--jsonpath", default=None, help="JSONPath expression selecting the part of each object to diff.")
@click.option("-e", "--exclude", multiple=True, help="Path to remove before diffing (repeatable).")
@click.option("-c", "--context-lines", type=click.IntRange(0, 100), default=None, help="Lines of context around changes.")
@click.option("--show-managed", is_flag=True, help="Keep metadata.managedFields in the output.")
@click.option("--show-deleted", is_flag=True, help="Show the last known content of deleted objects.")
@click.option("--create-theme", type=_THEME_CHOICE, default=None, help="Color theme for created objects.")
@click.option("--update-theme", type=_THEME_CHOICE, default=None, help="Color theme for updated objects.")
@click.option("--delete-theme", type=_THEME_CHOICE, default=None, help="Color theme for deleted objects.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option("--log-format", type=click.Choice(LOG_FORMATS), default=None, help="Log format on stderr.")
def cli(kinds: str, names: tuple[str, ...], **options: object) -> None:
    """Watch KINDS (comma separated, e.g. deployments,pods) and print a diff for every change."""
    try:
        config = build_config(kinds, names, **options)  # type: ignore[arg-type]
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        pass
