"""Recorded event streams and their replay into a ``ReportBuilder``.

An event stream is a list of mappings, each with a ``type`` field naming the
builder operation it drives::

    - {type: run_test, name: TestOne}
    - {type: output, line: "    one_test.go:12: checking"}
    - {type: end_test, name: TestOne, result: PASS, duration: 0.01}
    - {type: benchmark, name: BenchmarkOne, iterations: 1000, ns_per_op: 52.3}
    - {type: package, name: example.com/one, duration: 0.2}

Streams are stored as YAML (or JSON, which is detected by extension).
Unknown event types are skipped with a warning so that newer recordings
can still be replayed.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Union

import yaml

from testreport.report.builder import ReportBuilder
from testreport.report.diagnostics import Diagnostic
from testreport.report.model import Report

# Event types
RUN_TEST = "run_test"
END_TEST = "end_test"
BENCHMARK = "benchmark"
OUTPUT = "output"
PACKAGE = "package"


class EventError(ValueError):
    """A recorded event could not be read."""


@dataclass
class Event:
    """A single recorded event.

    Only the fields relevant to ``type`` are meaningful; the rest keep
    their defaults.
    """

    type: str
    name: str = ""
    result: str = ""
    duration: float = 0.0
    iterations: int = 0
    ns_per_op: float = 0.0
    mb_per_sec: float = 0.0
    bytes_per_op: int = 0
    allocs_per_op: int = 0
    line: str = ""


@dataclass
class ReplayResult:
    """Outcome of replaying an event stream."""

    report: Report
    warnings: list[str] = field(default_factory=list)
    diagnostics: tuple[Diagnostic, ...] = ()


# Field name -> converter applied to values read from a recording
_FIELD_TYPES: dict[str, Any] = {
    "name": str,
    "result": str,
    "duration": float,
    "iterations": int,
    "ns_per_op": float,
    "mb_per_sec": float,
    "bytes_per_op": int,
    "allocs_per_op": int,
    "line": str,
}


def event_from_dict(entry: Any) -> Event:
    """Build an ``Event`` from a recorded mapping.

    Keys other than ``type`` and the known event fields are ignored.

    Raises:
        EventError: If *entry* is not a mapping, has no ``type``, or holds
            a value of the wrong type.
    """
    if not isinstance(entry, Mapping):
        raise EventError(f"event is not a mapping: {entry!r}")
    event_type = entry.get("type")
    if event_type is None:
        raise EventError(f"event missing type field: {dict(entry)!r}")

    kwargs: dict[str, Any] = {}
    for key, convert in _FIELD_TYPES.items():
        if key not in entry or entry[key] is None:
            continue
        try:
            kwargs[key] = convert(entry[key])
        except (TypeError, ValueError) as exc:
            raise EventError(
                f"{event_type} event: bad value for {key}: {entry[key]!r}"
            ) from exc
    return Event(type=str(event_type), **kwargs)


def load_events(path: Path) -> list[Event]:
    """Load a recorded event stream from a YAML or JSON file.

    Raises:
        EventError: If the file does not hold a list of valid events.
        OSError: If the file cannot be read.
    """
    with open(path) as f:
        try:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise EventError(f"cannot parse event stream {path}: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, list):
        raise EventError(f"event stream {path} is not a list")
    return [event_from_dict(entry) for entry in data]


def apply_event(builder: ReportBuilder, event: Event) -> bool:
    """Drive *builder* with a single event.

    Returns:
        False if the event type is unknown and was ignored.
    """
    if event.type == RUN_TEST:
        builder.create_test(event.name)
    elif event.type == END_TEST:
        builder.end_test(event.name, event.result, event.duration)
    elif event.type == BENCHMARK:
        builder.benchmark(
            event.name,
            event.iterations,
            event.ns_per_op,
            event.mb_per_sec,
            event.bytes_per_op,
            event.allocs_per_op,
        )
    elif event.type == OUTPUT:
        builder.append_output(event.line)
    elif event.type == PACKAGE:
        builder.create_package(event.name, event.duration)
    else:
        return False
    return True


def replay(
    events: Iterable[Union[Event, Mapping[str, Any]]],
    builder: ReportBuilder | None = None,
) -> ReplayResult:
    """Replay *events* in order and build the resulting report.

    Events may be ``Event`` instances or raw mappings.  Unreadable entries,
    unknown event types, and rejected benchmarks are skipped with a
    warning; the remaining events are still applied.

    Args:
        events: The event stream, in the order the events occurred.
        builder: Builder to drive.  A fresh default builder is used when
            omitted.

    Returns:
        A :class:`ReplayResult` with the built report, replay warnings, and
        the builder's diagnostics.
    """
    if builder is None:
        builder = ReportBuilder()
    warnings: list[str] = []

    for index, raw in enumerate(events):
        try:
            event = raw if isinstance(raw, Event) else event_from_dict(raw)
        except EventError as exc:
            warnings.append(f"event {index}: {exc}, skipping")
            continue

        try:
            known = apply_event(builder, event)
        except ValueError as exc:
            warnings.append(f"event {index}: {exc}, skipping")
            continue
        if not known:
            warnings.append(
                f"event {index}: unknown type {event.type!r}, skipping"
            )

    return ReplayResult(
        report=builder.build(),
        warnings=warnings,
        diagnostics=builder.diagnostics,
    )
