"""Offline static analysis of Pine Script source."""

from __future__ import annotations

import re
from dataclasses import dataclass

_ARRAY_FROM = re.compile(r"(\w+)\s*=\s*array\.from\(([^)]*)\)", re.ASCII)
_ARRAY_NEW = re.compile(r"(\w+)\s*=\s*array\.new(?:<\w+>|_\w+)?\((\d+)?", re.ASCII)
_GET_SET = re.compile(r"array\.(get|set)\(\s*(\w+)\s*,\s*(-?\d+)", re.ASCII)
_FIRST_LAST = re.compile(r"(\w+)\.(first|last)\(\)", re.ASCII)
_INTEGER = re.compile(r"[+-]?[0-9]+")

_VERSION_PREFIX = "//@version="
_CLEAN_NOTE = (
    "No static analysis issues found. Use pine_compile or pine_smart_compile "
    "for full server-side compilation check."
)


@dataclass(frozen=True)
class Diagnostic:
    """A single static analysis finding."""

    line: int
    column: int
    message: str
    severity: str


def _byte_column(line: str, index: int) -> int:
    """One-based column of a character index, counted in UTF-8 bytes."""
    return len(line[:index].encode("utf-8")) + 1


def _detect_version(lines: list[str]) -> int:
    for line in lines:
        trimmed = line.strip()
        if trimmed.startswith(_VERSION_PREFIX + "6"):
            return 6
        if trimmed.startswith(_VERSION_PREFIX):
            rest = trimmed[len(_VERSION_PREFIX):]
            return int(rest) if _INTEGER.fullmatch(rest) else 0
        if trimmed == "" or trimmed.startswith("//"):
            continue
        break
    return 0


def _collect_arrays(lines: list[str]) -> dict[str, int]:
    """Map array names to their declared size; -1 means unknown."""
    arrays: dict[str, int] = {}
    for line in lines:
        match = _ARRAY_FROM.search(line)
        if match:
            args = match.group(2).strip()
            arrays[match.group(1).strip()] = len(args.split(",")) if args else 0
            continue
        match = _ARRAY_NEW.search(line)
        if match:
            size_text = match.group(2)
            arrays[match.group(1).strip()] = int(size_text) if size_text else -1
    return arrays


def _bounds_diagnostics(lines: list[str], arrays: dict[str, int]):
    for number, line in enumerate(lines, start=1):
        for match in _GET_SET.finditer(line):
            method, name = match.group(1), match.group(2)
            index = int(match.group(3))
            size = arrays.get(name, -1)
            if size < 0:
                continue
            if index < 0 or index >= size:
                yield Diagnostic(
                    line=number,
                    column=_byte_column(line, match.start()),
                    message=(
                        f"array.{method}({name}, {index}) — index {index} "
                        f"out of bounds (array size is {size})"
                    ),
                    severity="error",
                )


def _empty_access_diagnostics(lines: list[str], arrays: dict[str, int]):
    for number, line in enumerate(lines, start=1):
        for match in _FIRST_LAST.finditer(line):
            name, method = match.group(1), match.group(2)
            if name == "array":
                continue
            if arrays.get(name, -1) == 0:
                yield Diagnostic(
                    line=number,
                    column=_byte_column(line, match.start()),
                    message=(
                        f"{name}.{method}() called on possibly empty array "
                        "(declared with size 0)"
                    ),
                    severity="warning",
                )


def _strategy_diagnostics(lines: list[str]):
    if any(line.strip().startswith("strategy(") for line in lines):
        return
    for number, line in enumerate(lines, start=1):
        trimmed = line.strip()
        if "strategy.entry" in trimmed or "strategy.close" in trimmed:
            yield Diagnostic(
                line=number,
                column=1,
                message=(
                    "strategy.entry/close used but no strategy() declaration "
                    "found — did you mean to use indicator()?"
                ),
                severity="error",
            )
            return


def analyze(source: str) -> dict:
    """Run static checks on Pine Script source and return structured diagnostics."""
    lines = source.split("\n")
    version = _detect_version(lines)
    arrays = _collect_arrays(lines)

    diagnostics: list[Diagnostic] = []
    diagnostics.extend(_bounds_diagnostics(lines, arrays))
    diagnostics.extend(_empty_access_diagnostics(lines, arrays))
    diagnostics.extend(_strategy_diagnostics(lines))

    if 0 < version < 5:
        diagnostics.append(
            Diagnostic(
                line=1,
                column=1,
                message=(
                    f"Script uses Pine v{version} — consider upgrading to v6 "
                    "for latest features"
                ),
                severity="info",
            )
        )

    result = {
        "success": True,
        "issue_count": len(diagnostics),
        "diagnostics": diagnostics,
    }
    if not diagnostics:
        result["note"] = _CLEAN_NOTE
    return result