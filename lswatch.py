#!/usr/bin/env -S uv run --script
# /// script
# requires-python = ">=3.10"
# dependencies = []
# ///
"""lswatch - Short-option linter for `ls` invocations.

Inspects the short-option tokens of an `ls` command line and reports where
several single-dash tokens could have been clustered into fewer ones
(`-l -a -h` -> `-lah`). Also flags unknown short options, duplicates and
value-taking options with no value. Long options (`--foo`) are ignored.

Settings:
- `LSWATCH_HOME` overrides the home directory (default `~/.config/lswatch`).
- `config.json` in the home directory holds persistent settings.
- `LSWATCH_<KEY>` environment variables override config.json keys.

Usage:
    lswatch -l -a -h                 # [LS-WATCH] Could have combined ... -lah
    lswatch -l -I '*.o' -T 4         # value options ride along / split
    LSWATCH_FORMAT=json lswatch -l -a
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Iterable, Iterator, Literal, Sequence, TextIO

DIAGNOSTIC_PREFIX: Final[str] = "[LS-WATCH] "
TRACE_PREFIX: Final[str] = "[lswatch] "

# Boolean short flags of `ls`.
LS_NO_VALUE_OPTIONS: Final[frozenset[str]] = frozenset(
    "aAbcCdDfFghHiklLmnNopqrRsStuUvxX1"
)
# -I PATTERN, -T COLS, -w COLS
LS_VALUE_OPTIONS: Final[frozenset[str]] = frozenset("ITw")

DiagnosticKind = Literal["unknown", "duplicate", "missing_value", "suggestion"]

_MESSAGES: Final[dict[str, str]] = {
    "unknown": "Unknown argument: {}",
    "duplicate": "Duplicate argument: {}",
    "missing_value": "Missing value for argument: {}",
    "suggestion": "Could have combined short arguments into {}",
}

DIM: Final[str] = "\033[2m"
RESET: Final[str] = "\033[0m"
CYAN: Final[str] = "\033[36m"
YELLOW: Final[str] = "\033[33m"


@dataclass(frozen=True, slots=True)
class OptionCatalog:
    """Short options known to the linted command, split by whether they take a value."""

    no_value: frozenset[str]
    value: frozenset[str]

    def takes_value(self, option: str) -> bool:
        return option in self.value

    def is_flag(self, option: str) -> bool:
        return option in self.no_value


def validate_catalog(*, no_value: object, value: object) -> OptionCatalog:
    """Validate and normalize raw option sets into an `OptionCatalog`.

    Accepts either a string of option characters or a list of
    single-character strings for each set.
    """
    flags = _validate_option_set(options=no_value, label="no_value_options")
    valued = _validate_option_set(options=value, label="value_options")
    overlap = flags & valued
    if overlap:
        raise ValueError(
            f"options both with and without value: {''.join(sorted(overlap))}"
        )
    return OptionCatalog(no_value=flags, value=valued)


def _validate_option_set(*, options: object, label: str) -> frozenset[str]:
    if isinstance(options, str):
        options = list(options.strip())
    if not isinstance(options, (list, tuple, set, frozenset)):
        raise ValueError(f"{label} must be a string or a list of characters")
    result: set[str] = set()
    for item in options:
        if not isinstance(item, str) or len(item) != 1:
            raise ValueError(f"{label} entries must be single characters: {item!r}")
        if item == "-":
            raise ValueError(f"{label} cannot contain '-'")
        result.add(item)
    return frozenset(result)


DEFAULT_CATALOG: Final[OptionCatalog] = OptionCatalog(
    no_value=LS_NO_VALUE_OPTIONS, value=LS_VALUE_OPTIONS
)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single advisory finding."""

    kind: DiagnosticKind
    subject: str  # option character, or the combined string for suggestions

    @property
    def message(self) -> str:
        return _MESSAGES[self.kind].format(self.subject)


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of scanning the argument list."""

    observed: dict[str, str]
    clusters: int
    diagnostics: tuple[Diagnostic, ...] = ()


@dataclass(frozen=True, slots=True)
class Combination:
    """Shortest clustered spelling of a set of observed options."""

    suggestion: str
    clusters: int


@dataclass(frozen=True, slots=True)
class Report:
    """Result of a full lint run."""

    observed: dict[str, str]
    actual_clusters: int
    minimal_clusters: int
    suggestion: str | None = None
    diagnostics: tuple[Diagnostic, ...] = ()


class ArgCursor:
    """Forward-only cursor over argument tokens with explicit lookahead.

    Iterating yields tokens in order; `take_next` lets the consumer of the
    current token swallow the following one (e.g. `-I PATTERN`).
    """

    def __init__(self, args: Sequence[str]) -> None:
        self._args = list(args)
        self._pos = 0

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if self._pos >= len(self._args):
            raise StopIteration
        token = self._args[self._pos]
        self._pos += 1
        return token

    def peek(self) -> str | None:
        if self._pos >= len(self._args):
            return None
        return self._args[self._pos]

    def take_next(self) -> str | None:
        token = self.peek()
        if token is not None:
            self._pos += 1
        return token


def is_short_cluster(token: str) -> bool:
    """True for `-x...` tokens; `--long`, `-` and non-option words are excluded."""
    return len(token) >= 2 and token[0] == "-" and token[1] != "-"


def classify_args(
    *, args: Sequence[str], catalog: OptionCatalog = DEFAULT_CATALOG
) -> Classification:
    """
    Scan short-option clusters and record which options were used.

    Handles:
    - Boolean flags, clustered or not: -l, -lah
    - Value flags with inline value: -Ipattern, -lT4
    - Value flags taking the next token: -I pattern
    - Unknown and repeated options (reported, not recorded)

    A value flag always ends its cluster; whatever follows it in the same
    token is the value.
    """
    observed: dict[str, str] = {}
    diagnostics: list[Diagnostic] = []
    clusters = 0

    cursor = ArgCursor(args)
    for token in cursor:
        if not is_short_cluster(token):
            continue

        contributed = False
        for idx in range(1, len(token)):
            char = token[idx]

            if catalog.is_flag(char):
                if char in observed:
                    diagnostics.append(Diagnostic(kind="duplicate", subject=char))
                else:
                    observed[char] = ""
                    contributed = True
                continue

            if catalog.takes_value(char):
                if char in observed:
                    diagnostics.append(Diagnostic(kind="duplicate", subject=char))
                    break
                value: str | None = token[idx + 1 :]
                if not value:
                    value = cursor.take_next()
                if value is None:
                    diagnostics.append(Diagnostic(kind="missing_value", subject=char))
                else:
                    observed[char] = value
                    contributed = True
                break

            diagnostics.append(Diagnostic(kind="unknown", subject=char))

        if contributed:
            clusters += 1

    return Classification(
        observed=observed, clusters=clusters, diagnostics=tuple(diagnostics)
    )


def combine_options(*, observed: dict[str, str]) -> Combination:
    """Build the fewest-token spelling of `observed`.

    All boolean flags share one `-` token; the first value option rides
    along at the end of it and every further value option gets its own
    token. A lone value option with no boolean flags counts as zero extra
    clusters (kept as-is, see DESIGN.md).
    """
    flags = [opt for opt, value in observed.items() if value == ""]
    value_blocks = [f"{opt}{value}" for opt, value in observed.items() if value != ""]

    clusters = 1 if flags else 0
    suggestion = "-" + "".join(flags)
    if value_blocks:
        suggestion += value_blocks[0]
        for block in value_blocks[1:]:
            suggestion += f" -{block}"
        clusters += len(value_blocks) - 1

    return Combination(suggestion=suggestion, clusters=clusters)


def analyze_args(
    *, args: Sequence[str], catalog: OptionCatalog = DEFAULT_CATALOG
) -> Report:
    """Classify `args`, combine what was seen, and decide on a suggestion."""
    classification = classify_args(args=args, catalog=catalog)
    combination = combine_options(observed=classification.observed)

    diagnostics = list(classification.diagnostics)
    suggestion: str | None = None
    # An empty mapping would combine to a bare "-"; never suggest that.
    if classification.observed and classification.clusters > combination.clusters:
        suggestion = combination.suggestion
        diagnostics.append(Diagnostic(kind="suggestion", subject=suggestion))

    return Report(
        observed=dict(classification.observed),
        actual_clusters=classification.clusters,
        minimal_clusters=combination.clusters,
        suggestion=suggestion,
        diagnostics=tuple(diagnostics),
    )


def format_diagnostics(
    *, diagnostics: Iterable[Diagnostic], use_color: bool = True
) -> str:
    """Format diagnostics as `[LS-WATCH] ...` lines for terminal display."""
    lines: list[str] = []
    for diag in diagnostics:
        if not use_color:
            lines.append(f"{DIAGNOSTIC_PREFIX}{diag.message}")
            continue
        color = CYAN if diag.kind == "suggestion" else YELLOW
        lines.append(f"{DIM}{DIAGNOSTIC_PREFIX}{RESET}{color}{diag.message}{RESET}")
    return "\n".join(lines)


def report_to_json(*, report: Report) -> dict:
    return {
        "observed": dict(report.observed),
        "actual_clusters": report.actual_clusters,
        "minimal_clusters": report.minimal_clusters,
        "suggestion": report.suggestion,
        "diagnostics": [
            {"kind": d.kind, "subject": d.subject, "message": d.message}
            for d in report.diagnostics
        ],
    }


def lswatch_home() -> Path:
    """Return lswatch's home directory.

    Defaults to `~/.config/lswatch`, overridable via `LSWATCH_HOME`.
    """
    raw = os.environ.get("LSWATCH_HOME")
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".config" / "lswatch"


def lswatch_config_path() -> Path:
    return lswatch_home() / "config.json"


def _load_config() -> dict:
    path = lswatch_config_path()
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(payload, dict):
        return payload
    return {}


def _config_get(*, key: str) -> object | None:
    # Environment variables override config.json.
    # Example: `LSWATCH_FORMAT=json`, `LSWATCH_VALUE_OPTIONS=ITw`.
    env_key = f"LSWATCH_{key.upper()}"
    env_val = os.environ.get(env_key)
    if env_val is not None and env_val.strip() != "":
        return env_val
    return _load_config().get(key)


def _verbose_level() -> int:
    raw = _config_get(key="verbose")
    if raw is None:
        return 0
    if isinstance(raw, bool):
        return 1 if raw else 0
    if isinstance(raw, int):
        if raw <= 0:
            return 0
        return 2 if raw > 1 else 1
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value in {"", "0", "false", "no", "off"}:
            return 0
        if value in {"1", "true", "yes", "on", "basic"}:
            return 1
        return 2
    return 0


def _trace(level: int, message: str) -> None:
    if _verbose_level() >= level:
        print(f"{TRACE_PREFIX}{message}", file=sys.stderr)


def _output_format() -> str:
    raw = _config_get(key="format")
    if isinstance(raw, str) and raw.strip().lower() == "json":
        return "json"
    return "text"


def _use_color(*, stream: TextIO) -> bool:
    raw = _config_get(key="color")
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value in {"0", "false", "no", "off", "never"}:
            return False
        if value in {"1", "true", "yes", "on", "always"}:
            return True
    # auto
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def load_catalog() -> OptionCatalog:
    """Build the effective option catalog from settings, falling back to `ls`'s."""
    no_value = _config_get(key="no_value_options")
    value = _config_get(key="value_options")
    if no_value is None and value is None:
        _trace(2, "catalog: built-in ls options")
        return DEFAULT_CATALOG
    _trace(2, "catalog: configured")
    return validate_catalog(
        no_value=DEFAULT_CATALOG.no_value if no_value is None else no_value,
        value=DEFAULT_CATALOG.value if value is None else value,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Every argument is linted verbatim, so lswatch takes no flags of its own;
    it is configured through the environment and config.json.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    try:
        catalog = load_catalog()
    except ValueError as e:
        print(f"{TRACE_PREFIX}invalid option catalog: {e}", file=sys.stderr)
        return 2

    _trace(1, f"tokens: {len(args)}")
    report = analyze_args(args=args, catalog=catalog)
    _trace(
        1,
        f"clusters: actual={report.actual_clusters} "
        f"minimal={report.minimal_clusters}",
    )

    if _output_format() == "json":
        print(json.dumps(report_to_json(report=report)))
        return 0

    output = format_diagnostics(
        diagnostics=report.diagnostics, use_color=_use_color(stream=sys.stderr)
    )
    if output:
        print(output, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
