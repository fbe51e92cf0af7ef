"""Pine source snapshots, hashing, on-disk backups and marker counting."""

from __future__ import annotations

import dataclasses
import hashlib
import json
import os
import re
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path, PurePath

DEFAULT_BACKUP_ROOT = "research/pine-source-safety"

_VERSION_RE = re.compile(r"^\s*//@version\s*=\s*([0-9]+)", re.MULTILINE)
_DECL_RE = re.compile(
    r"""^\s*(indicator|strategy|library|study)\s*\(\s*(?:"([^"]*)"|'([^']*)')?""",
    re.MULTILINE,
)
_SAFE_NAME_LIMIT = 80


class BackupError(ValueError):
    """A backup could not be loaded or failed verification."""


@dataclass(frozen=True)
class ScriptMetadata:
    """Name, type and version inferred from Pine source."""

    script_name: str = ""
    script_type: str = ""
    pine_version: str = ""


@dataclass(frozen=True)
class SourceSnapshot:
    """The editor's source together with derived metadata."""

    source: str
    source_sha256: str = ""
    script_name: str = ""
    script_type: str = ""
    pine_version: str = ""
    line_count: int = 0
    char_count: int = 0
    editor_uri: str = ""
    language_id: str = ""
    editor_title: str = ""


@dataclass(frozen=True)
class BackupRecord:
    """Where a backup was written and what it holds."""

    session_dir: str
    manifest_path: str
    source_path: str
    source_sha256: str
    script_name: str = ""
    script_type: str = ""
    line_count: int = 0
    char_count: int = 0

    def to_result(self) -> dict:
        """Describe the backup as a result mapping."""
        result = {
            "session_dir": self.session_dir,
            "manifest_path": self.manifest_path,
            "source_path": self.source_path,
            "source_sha256": self.source_sha256,
            "hash": self.source_sha256,
            "line_count": self.line_count,
            "char_count": self.char_count,
        }
        if self.script_name:
            result["script_name"] = self.script_name
        if self.script_type:
            result["script_type"] = self.script_type
        return result


@dataclass(frozen=True)
class LoadedBackup:
    """A backup read from disk whose hash has been verified."""

    backup_path: str
    source_path: str
    source: str
    source_sha256: str
    manifest: dict = field(default_factory=dict)


@dataclass
class MarkerCounts:
    """Editor markers split into errors and warnings."""

    error_count: int = 0
    warning_count: int = 0
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)


def _encode(source: str) -> bytes:
    return source.encode("utf-8", "surrogateescape")


def infer_script_metadata(source: str) -> ScriptMetadata:
    """Read the version pragma and declaration statement from source."""
    version = ""
    match = _VERSION_RE.search(source)
    if match:
        version = match.group(1)
    script_type = ""
    script_name = ""
    match = _DECL_RE.search(source)
    if match:
        script_type = match.group(1).lower()
        if script_type == "study":
            script_type = "indicator"
        script_name = match.group(2) or match.group(3) or ""
    return ScriptMetadata(
        script_name=script_name, script_type=script_type, pine_version=version
    )


def source_sha256(source: str) -> str:
    """Hex SHA-256 of the source's UTF-8 bytes."""
    return hashlib.sha256(_encode(source)).hexdigest()


def line_count(source: str) -> int:
    """Number of newline-separated lines; zero for empty source."""
    if source == "":
        return 0
    return source.count("\n") + 1


def enrich_snapshot(snapshot: SourceSnapshot) -> SourceSnapshot:
    """Fill in hash, counts and any missing metadata from the source."""
    meta = infer_script_metadata(snapshot.source)
    return dataclasses.replace(
        snapshot,
        source_sha256=source_sha256(snapshot.source),
        line_count=line_count(snapshot.source),
        char_count=len(_encode(snapshot.source)),
        script_name=snapshot.script_name or meta.script_name,
        script_type=snapshot.script_type or meta.script_type,
        pine_version=snapshot.pine_version or meta.pine_version,
    )


def snapshot_to_result(snapshot: SourceSnapshot) -> dict:
    """Describe a snapshot as a result mapping, omitting empty optional fields."""
    result = {
        "source": snapshot.source,
        "source_sha256": snapshot.source_sha256,
        "source_hash_sha256": snapshot.source_sha256,
        "hash": snapshot.source_sha256,
        "line_count": snapshot.line_count,
        "char_count": snapshot.char_count,
    }
    for key in (
        "script_name",
        "script_type",
        "pine_version",
        "editor_uri",
        "language_id",
        "editor_title",
    ):
        value = getattr(snapshot, key)
        if value:
            result[key] = value
    return result


def _rfc3339_nano(moment: datetime) -> str:
    fraction = f"{moment.microsecond:06d}".rstrip("0")
    base = moment.strftime("%Y-%m-%dT%H:%M:%S")
    return f"{base}.{fraction}Z" if fraction else f"{base}Z"


def _write_private(path: Path, data: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)


def create_backup(
    snapshot: SourceSnapshot, reason: str, root: str | os.PathLike = DEFAULT_BACKUP_ROOT
) -> BackupRecord:
    """Write the snapshot's source and a JSON manifest into a new session directory."""
    snapshot = enrich_snapshot(snapshot)
    now = datetime.now(timezone.utc)
    stamp = f"{now:%Y%m%dT%H%M%S}.{now.microsecond:06d}000Z"
    session_dir = Path(root) / f"session-{stamp}"
    session_dir.mkdir(mode=0o700, parents=True, exist_ok=True)

    name = safe_filename_part(snapshot.script_name) or "pine_source"
    source_path = session_dir / f"{name}.pine"
    manifest_path = session_dir / "backup.json"
    _write_private(source_path, _encode(snapshot.source))

    manifest: dict = {
        "created_at": _rfc3339_nano(now),
        "reason": reason,
        "source_sha256": snapshot.source_sha256,
    }
    if snapshot.script_name:
        manifest["script_name"] = snapshot.script_name
    if snapshot.script_type:
        manifest["script_type"] = snapshot.script_type
    if snapshot.pine_version:
        manifest["pine_version"] = snapshot.pine_version
    manifest["line_count"] = snapshot.line_count
    manifest["char_count"] = snapshot.char_count
    manifest["source_file"] = source_path.name
    text = json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"
    _write_private(manifest_path, text.encode("utf-8"))

    return BackupRecord(
        session_dir=session_dir.as_posix(),
        manifest_path=manifest_path.as_posix(),
        source_path=source_path.as_posix(),
        source_sha256=snapshot.source_sha256,
        script_name=snapshot.script_name,
        script_type=snapshot.script_type,
        line_count=snapshot.line_count,
        char_count=snapshot.char_count,
    )


def _read_text(path: str) -> str:
    with open(path, "rb") as handle:
        return handle.read().decode("utf-8", "surrogateescape")


def _load_manifest(clean: str) -> dict:
    try:
        manifest = json.loads(_read_text(clean))
    except ValueError as exc:
        raise BackupError(f"parse backup manifest: {exc}") from exc
    if not isinstance(manifest, dict):
        raise BackupError("parse backup manifest: expected a JSON object")
    for key in ("source_file", "source_sha256"):
        if key in manifest and not isinstance(manifest[key], str):
            raise BackupError(f"parse backup manifest: {key} must be a string")
    return manifest


def load_backup(path: str, expected_sha256: str = "") -> LoadedBackup:
    """Load a backup manifest or .pine file and verify its SHA-256."""
    if not path.strip():
        raise BackupError("backup_path is required")
    clean = os.path.normpath(path)
    manifest: dict = {}
    if os.path.splitext(clean)[1].lower() == ".json":
        manifest = _load_manifest(clean)
        source_file = manifest.get("source_file") or ""
        if not source_file:
            raise BackupError("backup manifest missing source_file")
        source_path = source_file
        if not os.path.isabs(source_path):
            source_path = os.path.join(os.path.dirname(clean), source_path)
        source = _read_text(source_path)
        if not expected_sha256:
            expected_sha256 = manifest.get("source_sha256") or ""
    else:
        source = _read_text(clean)
        source_path = clean

    if not expected_sha256:
        raise BackupError(
            "expected_sha256 is required unless backup manifest contains source_sha256"
        )
    actual = source_sha256(source)
    if actual.lower() != expected_sha256.lower():
        raise BackupError(
            f"backup SHA256 mismatch: expected {expected_sha256}, got {actual}"
        )
    return LoadedBackup(
        backup_path=PurePath(clean).as_posix(),
        source_path=PurePath(source_path).as_posix(),
        source=source,
        source_sha256=actual,
        manifest=manifest,
    )


def safe_filename_part(value: str) -> str:
    """Reduce a script name to a short string safe to use in a file name."""
    value = value.strip()
    pieces: list[str] = []
    size = 0
    for char in value:
        category = unicodedata.category(char)
        if category.startswith("L") or category == "Nd" or char in "._-":
            piece = char
        else:
            piece = "_"
        pieces.append(piece)
        size += len(piece.encode("utf-8", "surrogateescape"))
        if size >= _SAFE_NAME_LIMIT:
            break
    return "".join(pieces).strip("._-")


def marker_counts(markers) -> MarkerCounts:
    """Split editor markers into errors and warnings by label or severity."""
    counts = MarkerCounts()
    for marker in markers:
        if not isinstance(marker, dict):
            continue
        label = marker.get("severity_label")
        label = label if isinstance(label, str) else ""
        severity = marker.get("severity")
        if isinstance(severity, bool) or not isinstance(severity, (int, float)):
            severity = 0
        if label == "error" or severity >= 8:
            counts.error_count += 1
            counts.errors.append(marker)
        elif label == "warning" or severity == 4:
            counts.warning_count += 1
            counts.warnings.append(marker)
    return counts