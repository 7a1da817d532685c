"""
Basic git utilities.

A thin wrapper around the git command line, just enough to summarize the
changes of the working tree for a review. If you need a real git library,
use one.
"""
from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Awaitable, Callable

from . import system
from .shell import quote

Execute = Callable[[str], Awaitable[str]]


@dataclass
class ChangedFiles:
    deleted: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)


@dataclass
class FileChanges:
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


@dataclass
class DiffSummary:
    files: list[str]
    changes: str


def _lines(raw: str) -> list[str]:
    return [line for line in raw.strip().split("\n") if line.strip()]


async def get_untracked_files(execute: Execute = system.execute) -> list[str]:
    return _lines(await execute("git ls-files --others --exclude-standard"))


async def get_changed_files(execute: Execute = system.execute) -> ChangedFiles:
    """Deleted and changed files relative to HEAD, plus untracked files."""
    raw, untracked = await asyncio.gather(
        execute("git diff --name-status HEAD"),
        get_untracked_files(execute),
    )
    out = ChangedFiles(untracked=untracked)

    for line in _lines(raw):
        parts = line.split(maxsplit=1)
        status = parts[0].strip()
        file = parts[1].strip() if len(parts) > 1 else ""
        if status == "D":
            out.deleted.append(file)
        elif status in ("M", "A"):
            out.changed.append(file)
        else:
            logging.warning(f'Unsupported git file status "{status}" for file "{file}". Skipping...')
    return out


async def get_file_changes(file: str, execute: Execute = system.execute) -> FileChanges:
    raw = await execute(f"git diff --unified=0 HEAD -- {quote(file)}")
    out = FileChanges()
    for line in raw.split("\n"):
        if line.startswith("+") and not line.startswith("+++"):
            out.added.append(line)
        elif line.startswith("-") and not line.startswith("---"):
            out.removed.append(line)
    return out


async def _read_text(path: str) -> str:
    return await asyncio.to_thread(Path(path).read_text, encoding="utf-8", errors="replace")


async def get_diff_summary(include_untracked: bool = True, execute: Execute = system.execute) -> DiffSummary:
    """
    Human-readable summary of the changes in the working tree.

    Every per-file lookup runs concurrently and is awaited before the summary
    is assembled; sections always come out as deleted, changed, untracked.
    """
    changed_files = await get_changed_files(execute)
    files = [*changed_files.deleted, *changed_files.changed]

    deleted, changed = await asyncio.gather(
        asyncio.gather(*(get_file_changes(f, execute) for f in changed_files.deleted)),
        asyncio.gather(*(get_file_changes(f, execute) for f in changed_files.changed)),
    )

    lines: list[str] = []
    for file, diff in zip(changed_files.deleted, deleted):
        lines.append(f"Deleted {file}:")
        lines.extend(f"\t{line}" for line in diff.removed)

    for file, diff in zip(changed_files.changed, changed):
        lines.append(f"{file} ({len(diff.added)} additions, {len(diff.removed)} deletions)")
        lines.append("Added:")
        lines.extend(f"\t{line}" for line in diff.added)
        lines.append("Removed:")
        lines.extend(f"\t{line}" for line in diff.removed)

    if include_untracked:
        files.extend(changed_files.untracked)
        contents = await asyncio.gather(*(_read_text(f) for f in changed_files.untracked))
        for file, content in zip(changed_files.untracked, contents):
            lines.append(f"New file {file}:")
            if content:
                lines.extend(f"\t{line}" for line in content.split("\n"))
            else:
                lines.append("\t<empty>")

    return DiffSummary(files=files, changes="\n".join(lines))
