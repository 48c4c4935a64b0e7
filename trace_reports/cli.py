"""CLI entry point for processing and publishing test reports."""

import argparse
import asyncio
import json
import logging
import os
import signal
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from trace_reports import git
from trace_reports.assembler import ReportContext
from trace_reports.config import ConfigError, ProjectConfig, find_config, load_config
from trace_reports.insights import parse_intent
from trace_reports.metadata import build_metadata
from trace_reports.models.intent import ExecutionInsights
from trace_reports.models.report import Report
from trace_reports.processor import ProcessedRun, process_results, save_local_copy
from trace_reports.storage.base import (
    RECOVERABLE_ERRORS,
    UploadResult,
    describe_error,
)
from trace_reports.storage.config import StorageConfig, storage_config_for
from trace_reports.storage.loading import StorageNotFoundError, open_storage_adapter

log = logging.getLogger("trace_reports")

STATUS_SYMBOLS = {
    "passed": "✓",
    "failed": "✗",
    "skipped": "-",
}


def log_results_summary(log: logging.Logger, report: Report) -> None:
    """Log a formatted summary of a report's results."""
    log.info("=" * 80)
    log.info("Test Results Summary (%s):", report.execution_id)
    log.info("=" * 80)

    for result in report.results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info(
            "%s %s [%s]: %s (%.2fs)",
            symbol,
            result.title,
            result.browser,
            result.status,
            result.duration,
        )
        if not result.outcome_match:
            log.info(
                "  Unexpected: expected %s, got %s",
                result.expected_outcome,
                result.actual_outcome,
            )
        if result.error:
            log.info("  Error: %s", result.error)

    summary = report.summary
    log.info(
        "Total: %d, passed: %d, failed: %d, skipped: %d, unexpected: %d",
        summary.total,
        summary.passed,
        summary.failed,
        summary.skipped,
        summary.unexpected_fails + summary.unexpected_passes,
    )


def parse_json_option(value: str | None, option: str) -> dict[str, Any] | None:
    """Decode a JSON object given on the command line."""
    if value is None:
        return None
    try:
        data = json.loads(value)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{option} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{option} must be a JSON object")
    return data


def resolve_config(config_path: Path | None) -> ProjectConfig:
    """Load the given config, else the first one found, else defaults."""
    path = config_path or find_config(Path.cwd(), Path.home())
    if path is None:
        return ProjectConfig()
    return load_config(path)


def resolve_storage(
    config: ProjectConfig, storage_key: str | None, storage_config_json: str | None
) -> StorageConfig:
    """Backend configuration from the command line, else from the config file."""
    if storage_key is None:
        if config.storage is None:
            raise ConfigError("No storage configured; pass --storage or set storage")
        return config.storage

    options = parse_json_option(storage_config_json, "--storage-config") or {}
    try:
        return storage_config_for(storage_key, options)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration for '{storage_key}': {e}") from e


def parse_insights(value: str | None) -> ExecutionInsights | None:
    data = parse_json_option(value, "--insights")
    if data is None:
        return None
    try:
        return ExecutionInsights.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid --insights: {e}") from e


async def prepare_run(
    config: ProjectConfig,
    *,
    results_path: Path | None,
    intent_json: str | None,
    insights_json: str | None,
    developer: str | None = None,
    branch: str | None = None,
    environment: str | None = None,
    commit: str | None = None,
    failures_only: bool = False,
) -> ProcessedRun:
    """Process a results directory, filling gaps from config, git and env."""
    try:
        intent = parse_intent(parse_json_option(intent_json, "--intent"))
    except ValidationError as e:
        raise ConfigError(f"Invalid --intent: {e}") from e
    insights = parse_insights(insights_json)

    metadata = build_metadata(
        os.environ,
        git_commit=commit or await git.current_commit(),
        git_diff=await git.changed_files(),
    )

    context = ReportContext(state_dir=config.state_dir)
    run = process_results(
        results_path or config.results_path,
        context=context,
        intent=intent,
        metadata=metadata,
        developer=(
            developer
            or config.developer
            or await git.user_name()
            or os.environ.get("USER", "unknown")
        ),
        branch=branch or await git.current_branch(),
        environment=environment or config.environment,
        insights=insights,
        failures_only=failures_only,
    )
    save_local_copy(run.report, context)
    return run


def format_upload_output(result: UploadResult) -> dict[str, Any]:
    """Format an upload result for JSON output."""
    return {
        "report_id": result.report_id,
        "success": result.success,
        "files_uploaded": result.files_uploaded,
        "uploaded_files": list(result.uploaded_files),
        "report_url": result.report_url,
        "dashboard_url": result.dashboard_url,
        "index_updated": result.index_updated,
        "error": result.error,
    }


async def run_process(args: argparse.Namespace, config: ProjectConfig) -> int:
    run = await prepare_run(
        config,
        results_path=args.results,
        intent_json=args.intent,
        insights_json=args.insights,
    )
    log_results_summary(log, run.report)
    print(
        json.dumps(
            {
                "report": run.report.model_dump(mode="json", by_alias=True),
                "assets": [str(p) for p in run.asset_paths],
            },
            indent=2,
        )
    )
    return 0


async def run_upload(args: argparse.Namespace, config: ProjectConfig) -> int:
    storage = resolve_storage(config, args.storage, args.storage_config)
    run = await prepare_run(
        config,
        results_path=args.results,
        intent_json=args.intent,
        insights_json=args.insights,
        developer=args.developer,
        branch=args.branch,
        environment=args.environment,
        commit=args.commit,
        failures_only=args.failures_only,
    )
    log_results_summary(log, run.report)

    if args.dry_run:
        log.info(
            "Dry run: would upload report %s with %d asset(s) to %s",
            run.report.execution_id,
            len(run.asset_paths),
            storage.type,
        )
        print(json.dumps({"report_id": run.report.execution_id, "dry_run": True}))
        return 0

    async with open_storage_adapter(storage) as adapter:
        health = await adapter.health_check()
        if not health.healthy:
            log.error(
                "Storage backend %s is not reachable: %s",
                storage.type,
                health.error or "connection test failed",
            )
            return 1

        cancel = asyncio.Event()
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(signal.SIGINT, cancel.set)
        try:
            result = await adapter.upload_report(
                run.report, run.asset_paths, cancel=cancel
            )
        finally:
            loop.remove_signal_handler(signal.SIGINT)

    if result.success:
        log.info("Uploaded %d file(s)", result.files_uploaded)
        log.info("  Report URL: %s", result.report_url)
        log.info("  Dashboard URL: %s", result.dashboard_url)
        if not result.index_updated:
            log.warning("Report uploaded but the reports index was not updated")
    else:
        log.error("Upload failed: %s", result.error)

    print(json.dumps(format_upload_output(result), indent=2))
    return 0 if result.success else 1


async def run_list(args: argparse.Namespace, config: ProjectConfig) -> int:
    storage = resolve_storage(config, args.storage, args.storage_config)
    async with open_storage_adapter(storage) as adapter:
        entries = await adapter.list_reports()

    shown = list(entries)[: args.limit]
    for entry in shown:
        log.info(
            "%s %s (%s): %d/%d passed",
            entry.id,
            entry.developer,
            entry.branch or "-",
            entry.summary.passed,
            entry.summary.total,
        )
    print(
        json.dumps([e.model_dump(mode="json", by_alias=True) for e in shown], indent=2)
    )
    return 0


async def run_health(args: argparse.Namespace, config: ProjectConfig) -> int:
    storage = resolve_storage(config, args.storage, args.storage_config)
    async with open_storage_adapter(storage) as adapter:
        health = await adapter.health_check()

    log.info(
        "Storage backend %s: %s (%.3fs)",
        storage.type,
        "healthy" if health.healthy else "unhealthy",
        health.latency,
    )
    output = {
        "healthy": health.healthy,
        "latency": health.latency,
        "error": health.error,
    }
    print(json.dumps(output))
    return 0 if health.healthy else 1


COMMANDS = {
    "process": run_process,
    "upload": run_upload,
    "list": run_list,
    "health": run_health,
}


async def run(args: argparse.Namespace) -> int:
    """Run a command and return exit code."""
    try:
        config = resolve_config(args.config)
        return await COMMANDS[args.command](args, config)
    except (ConfigError, StorageNotFoundError) as e:
        log.error("%s", e)
        return 1
    except RECOVERABLE_ERRORS as e:
        log.error("Command %s failed: %s", args.command, describe_error(e))
        return 1


def add_results_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--results",
        type=Path,
        help="Directory of test artifacts (default: results_path from config)",
    )
    parser.add_argument("--intent", help="JSON execution intent")
    parser.add_argument("--insights", help="JSON execution insights")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Turn browser test artifacts into reports and publish them"
    )
    parser.add_argument("--config", type=Path, help="Path to a YAML config file")
    parser.add_argument(
        "--storage",
        help="Storage backend (github, local-folder, sharepoint, azure-files, "
        "google-drive)",
    )
    parser.add_argument(
        "--storage-config",
        help="JSON configuration for the storage backend",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    process = commands.add_parser("process", help="Build a report without uploading")
    add_results_arguments(process)

    upload = commands.add_parser("upload", help="Build a report and upload it")
    add_results_arguments(upload)
    upload.add_argument("--developer", help="Developer name (default: git user)")
    upload.add_argument("--branch", help="Git branch (default: current branch)")
    upload.add_argument("--environment", help="Environment name")
    upload.add_argument("--commit", help="Git commit (default: HEAD)")
    upload.add_argument(
        "--failures-only",
        action="store_true",
        help="Only upload assets of failed tests",
    )
    upload.add_argument(
        "--dry-run",
        action="store_true",
        help="Process results but do not upload",
    )

    list_reports = commands.add_parser("list", help="List uploaded reports")
    list_reports.add_argument("--limit", type=int, default=10)

    commands.add_parser("health", help="Check the storage backend")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":  # pragma: no cover
    main()
