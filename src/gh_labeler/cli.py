"""CLI entrypoint for gh-labeler.

Commands:
- sync (default): reconcile repository labels with the label configuration
- preview: the same plan, without touching the repository
- init: write the default label configuration to a file
- list: show the repository's current labels
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from gh_labeler import __version__
from gh_labeler.config import LabelerSettings
from gh_labeler.errors import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_SUCCESS,
    ConfigFileNotFoundError,
    ConfigValidationError,
    LabelerError,
)
from gh_labeler.github.client import GitHubClient
from gh_labeler.labels import (
    CONVENTION_CONFIG_FILES,
    DesiredLabel,
    default_labels,
    dump_labels,
    fetch_convention_config,
    fetch_remote_config,
    find_convention_config,
    load_labels_from_file,
    load_labels_from_stdin,
    parse_remote_config_spec,
    parse_repository,
)
from gh_labeler.logging import configure_logging
from gh_labeler.render import format_label_table, format_sync_result, labels_to_dicts
from gh_labeler.sync.planner import ReconciliationOptions
from gh_labeler.sync.syncer import LabelSyncer

logger = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser, *, suppress: bool) -> None:
    """Options accepted both before and after the subcommand.

    Subcommand copies use SUPPRESS defaults so they never overwrite values given
    before the subcommand.
    """

    def default(value: Any) -> Any:
        return argparse.SUPPRESS if suppress else value

    parser.add_argument(
        "-t",
        "--access-token",
        default=default(None),
        help="GitHub access token (defaults to GH_LABELER_TOKEN or GITHUB_TOKEN)",
    )
    parser.add_argument(
        "-r",
        "--repository",
        "--repo",
        dest="repository",
        default=default(None),
        help="Target repository in the form 'owner/repo'",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=default(False),
        help="Plan and report, but do not change any labels",
    )
    parser.add_argument(
        "--allow-added-labels",
        action="store_true",
        default=default(False),
        help="Keep repository labels that are not in the configuration",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-c",
        "--config",
        default=default(None),
        help="Label configuration file (JSON/YAML), or '-' to read from stdin",
    )
    source.add_argument(
        "--template",
        default=default(None),
        help="Template repository 'owner/repo' whose convention config file is used",
    )
    source.add_argument(
        "--remote-config",
        default=default(None),
        help="Configuration file in another repository: 'owner/repo:path/to/file.yaml'",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", default=default(False), help="List every operation"
    )
    parser.add_argument(
        "--json", action="store_true", default=default(False), help="Print results as JSON"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gh-labeler",
        description="Synchronize GitHub repository labels with a label configuration",
    )
    parser.add_argument("--version", action="version", version=f"gh-labeler {__version__}")
    _add_common_arguments(parser, suppress=False)

    subparsers = parser.add_subparsers(dest="command")

    sync = subparsers.add_parser("sync", help="Synchronize labels (default command)")
    _add_common_arguments(sync, suppress=True)

    preview = subparsers.add_parser(
        "preview", help="Show what a sync would do, without changing anything"
    )
    _add_common_arguments(preview, suppress=True)

    init = subparsers.add_parser("init", help="Write the default label configuration")
    init.add_argument("--format", choices=["json", "yaml"], default="json", help="Output format")
    init.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output path (defaults to .gh-labeler.<format>)",
    )

    list_labels = subparsers.add_parser("list", help="Show the repository's current labels")
    _add_common_arguments(list_labels, suppress=True)
    list_labels.add_argument(
        "--format",
        choices=["table", "json", "yaml"],
        default="table",
        help="Output format",
    )

    return parser


def _require_repository(repository: str | None) -> str:
    if not repository:
        raise ConfigValidationError("Repository is required. Use -r or --repository")
    repository = repository.strip().strip("/")
    parse_repository(repository)
    return repository


def _make_client(settings: LabelerSettings, *, token: str, repository: str) -> GitHubClient:
    return GitHubClient(
        token=token,
        repository=repository,
        base_url=settings.github_base_url,
        timeout=settings.request_timeout_seconds,
        max_retries=settings.max_retries,
        retry_backoff=settings.retry_backoff_seconds,
    )


def _load_labels(args: argparse.Namespace, client: GitHubClient) -> list[DesiredLabel]:
    """Load labels from, in priority order: remote file, template repo, stdin, file, convention file."""

    if args.remote_config:
        repository, path = parse_remote_config_spec(args.remote_config)
        if not args.json:
            print(f"Fetching remote config: {repository}:{path}")
        return fetch_remote_config(client, repository, path)

    if args.template:
        if not args.json:
            print(f"Fetching template config from: {args.template}")
        return fetch_convention_config(client, args.template)

    if args.config == "-":
        return load_labels_from_stdin(sys.stdin)

    if args.config:
        return load_labels_from_file(Path(args.config))

    path = find_convention_config(Path.cwd())
    if path is None:
        raise ConfigFileNotFoundError(searched=CONVENTION_CONFIG_FILES)
    if not args.json:
        print(f"Using config file: {path}")
    return load_labels_from_file(path)


def _check_config_sources(args: argparse.Namespace) -> None:
    """Reject more than one label source, wherever on the command line each was given."""

    given = [
        flag
        for flag, value in (
            ("--config", args.config),
            ("--template", args.template),
            ("--remote-config", args.remote_config),
        )
        if value
    ]
    if len(given) > 1:
        raise ConfigValidationError(f"Options {', '.join(given)} cannot be used together")


def _run_sync(args: argparse.Namespace, settings: LabelerSettings, *, dry_run: bool) -> int:
    _check_config_sources(args)
    token = settings.resolve_token(args.access_token)
    repository = _require_repository(args.repository)

    client = _make_client(settings, token=token, repository=repository)
    try:
        labels = _load_labels(args, client)
        syncer = LabelSyncer(
            store=client,
            labels=labels,
            options=ReconciliationOptions(
                allow_added_labels=args.allow_added_labels,
                dry_run=dry_run,
            ),
            repository=repository,
        )
        if dry_run and not args.json and args.verbose:
            print("Running in dry-run mode (no changes will be made)")
        result = syncer.sync()
    finally:
        client.close()

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_sync_result(result, verbose=args.verbose))
    return result.exit_code


def _run_init(args: argparse.Namespace) -> int:
    content = dump_labels(default_labels(), args.format)
    output = Path(args.output) if args.output else Path(f".gh-labeler.{args.format}")
    if output.exists():
        raise ConfigValidationError(
            f"File already exists: {output}. Remove it first or use -o to specify a different path."
        )
    output.write_text(content, encoding="utf-8")
    print(f"Default configuration written to: {output}")
    return EXIT_SUCCESS


def _run_list(args: argparse.Namespace, settings: LabelerSettings) -> int:
    token = settings.resolve_token(args.access_token)
    repository = _require_repository(args.repository)

    client = _make_client(settings, token=token, repository=repository)
    try:
        labels = client.list_labels()
    finally:
        client.close()

    if args.format == "json":
        print(json.dumps(labels_to_dicts(labels), indent=2, ensure_ascii=False))
    elif args.format == "yaml":
        print(yaml.safe_dump(labels_to_dicts(labels), sort_keys=False, allow_unicode=True), end="")
    else:
        print(format_label_table(labels))
    return EXIT_SUCCESS


def _report_error(message: str, exit_code: int, *, json_mode: bool) -> None:
    if json_mode:
        payload: dict[str, Any] = {"status": "error", "exit_code": exit_code, "errors": [message]}
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print(f"Error: {message}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = LabelerSettings()
    except ValidationError as e:
        # Runs before configure_logging, so report directly on stderr.
        print("Configuration error (check your environment and .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level)

    command = args.command or "sync"
    try:
        if command == "init":
            return _run_init(args)
        if command == "list":
            return _run_list(args, settings)
        return _run_sync(args, settings, dry_run=args.dry_run or command == "preview")

    except LabelerError as e:
        logger.debug("Command aborted", extra={"command": command, "error": str(e)})
        _report_error(str(e), e.exit_code, json_mode=args.json)
        return e.exit_code

    except Exception as e:
        logger.exception("Command failed")
        _report_error(str(e), EXIT_ERROR, json_mode=args.json)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
