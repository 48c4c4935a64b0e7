"""Extract structured error and action records from trace bundles."""

import json
import logging
import zipfile
import zlib
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from trace_reports.models.artifacts import TraceData
from trace_reports.models.result import ErrorLocation, TestError, TestStep

log = logging.getLogger(__name__)

TRACE_ENTRY_NAME = "trace.trace"

# zipfile raises RuntimeError for encrypted entries and NotImplementedError
# for unsupported compression methods.
UNREADABLE_BUNDLE_ERRORS = (
    OSError,
    zipfile.BadZipFile,
    zlib.error,
    RuntimeError,
    NotImplementedError,
)


def is_structured_entry(name: str) -> bool:
    """Whether a bundle entry holds error/action records."""
    return name == TRACE_ENTRY_NAME or name.endswith(".json")


def extract(bundle_path: Path) -> TraceData:
    """Read errors and steps from a zip trace bundle.

    Never raises: an unreadable bundle yields empty collections and corrupt
    entries are skipped one at a time.
    """
    errors: list[TestError] = []
    steps: list[TestStep] = []

    try:
        with zipfile.ZipFile(bundle_path) as bundle:
            for info in bundle.infolist():
                if info.is_dir() or not is_structured_entry(info.filename):
                    continue
                try:
                    content = bundle.read(info).decode("utf-8")
                except (*UNREADABLE_BUNDLE_ERRORS, UnicodeDecodeError) as e:
                    log.warning(
                        "Skipping unreadable entry %s in %s: %s",
                        info.filename,
                        bundle_path,
                        e,
                    )
                    continue

                for record in parse_records(content, info.filename):
                    errors.extend(_errors_from(record, info.filename))
                    steps.extend(_steps_from(record, info.filename, len(steps)))
    except UNREADABLE_BUNDLE_ERRORS as e:
        log.warning("Could not open trace bundle %s: %s", bundle_path, e)
        return TraceData()

    return TraceData(errors=errors, steps=steps)


def parse_records(content: str, source: str) -> Iterator[Mapping[str, Any]]:
    """Parse an entry as one JSON document or as newline-delimited records."""
    try:
        document = json.loads(content)
    except json.JSONDecodeError:
        pass
    else:
        if isinstance(document, dict):
            yield document
        else:
            log.warning("Skipping non-object document in %s", source)
        return

    for lineno, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            log.warning("Skipping malformed record %s:%d", source, lineno)
            continue
        if isinstance(record, dict):
            yield record


def _errors_from(record: Mapping[str, Any], source: str) -> Sequence[TestError]:
    raw_errors = record.get("errors")
    if not isinstance(raw_errors, list):
        return []

    errors: list[TestError] = []
    for raw in raw_errors:
        if not isinstance(raw, dict):
            log.warning("Skipping malformed error record in %s", source)
            continue
        location = raw.get("location") if isinstance(raw.get("location"), dict) else {}
        try:
            errors.append(
                TestError(
                    message=raw.get("message") or "Unknown error",
                    stack=raw.get("stack") or "",
                    location=ErrorLocation(
                        file=location.get("file") or "unknown",
                        line=location.get("line") or 0,
                        column=location.get("column") or 0,
                    ),
                )
            )
        except ValidationError as e:
            log.warning("Skipping invalid error record in %s: %s", source, e)
    return errors


def _steps_from(
    record: Mapping[str, Any], source: str, offset: int
) -> Sequence[TestStep]:
    raw_actions = record.get("actions")
    if not isinstance(raw_actions, list):
        return []

    steps: list[TestStep] = []
    for raw in raw_actions:
        if not isinstance(raw, dict):
            log.warning("Skipping malformed action record in %s", source)
            continue
        try:
            steps.append(
                TestStep(
                    id=str(raw.get("callId") or f"step-{offset + len(steps)}"),
                    title=raw.get("apiName") or raw.get("method") or "Unknown step",
                    duration=_duration(raw),
                )
            )
        except ValidationError as e:
            log.warning("Skipping invalid action record in %s: %s", source, e)
    return steps


def _duration(action: Mapping[str, Any]) -> float:
    start, end = action.get("startTime"), action.get("endTime")
    if isinstance(start, int | float) and isinstance(end, int | float):
        return end - start
    return 0
