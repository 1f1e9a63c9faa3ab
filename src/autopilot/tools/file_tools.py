"""
File system tools scoped to the working directory.

Every path is resolved against the current working directory and rejected if it
escapes it, so ``../../etc/passwd`` never reaches the disk.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from autopilot.agent_core.logger import get_logger
from autopilot.agent_core.tools import ToolDefinition, ToolResult
from .common import build_definition, resolve_workspace_path, truncate_tail

logger = get_logger(__name__)

MAX_READ_CHARS = 50_000
MAX_LIST_DEPTH = 3
HIDDEN_DIR_NAMES = frozenset({"node_modules", "__pycache__"})


class FileReadParams(BaseModel):
    file_path: str = Field(description="Path to the file, relative to the working directory")
    start_line: Optional[int] = Field(default=None, description="Start line (1-based)")
    end_line: Optional[int] = Field(default=None, description="End line (1-based, inclusive)")


class FileWriteParams(BaseModel):
    file_path: str = Field(description="Path to the file, relative to the working directory")
    content: str = Field(description="Content to write")
    append: bool = Field(default=False, description="Append instead of overwrite (default false)")


class ListDirParams(BaseModel):
    dir_path: str = Field(default=".", description="Path to the directory")
    recursive: bool = Field(default=False, description="List recursively (default false, max 3 levels)")


def read_file(file_path: str, start_line: Optional[int] = None, end_line: Optional[int] = None) -> ToolResult:
    path = resolve_workspace_path(file_path)
    if not path.exists():
        return ToolResult.failure(f"File not found: {file_path}", file_path=str(path))
    if not path.is_file():
        return ToolResult.failure(f"Not a file: {file_path}", file_path=str(path))

    lines = path.read_text(encoding="utf-8", errors="replace").split("\n")
    first = max(1, start_line or 1)
    last = min(len(lines), end_line or len(lines))
    content = truncate_tail("\n".join(lines[first - 1 : last]), MAX_READ_CHARS)

    return ToolResult.ok(content, file_path=str(path), lines=len(lines), start_line=first, end_line=last)


def write_file(file_path: str, content: str, append: bool = False) -> ToolResult:
    path = resolve_workspace_path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a" if append else "w", encoding="utf-8") as fh:
        fh.write(content)

    verb = "Appended to" if append else "Wrote"
    logger.debug(f"{verb} {path} ({len(content)} chars)")
    return ToolResult.ok(f"{verb} {path} ({len(content)} chars)", file_path=str(path), chars=len(content), append=append)


def _walk(directory: Path, max_depth: int, depth: int = 0) -> List[str]:
    if depth >= max_depth:
        return []
    entries: List[str] = []
    indent = "  " * depth
    for item in sorted(directory.iterdir(), key=lambda p: p.name):
        if item.name.startswith(".") or item.name in HIDDEN_DIR_NAMES:
            continue
        if item.is_dir():
            entries.append(f"{indent}{item.name}/")
            entries.extend(_walk(item, max_depth, depth + 1))
        else:
            entries.append(f"{indent}{item.name}")
    return entries


def list_dir(dir_path: str = ".", recursive: bool = False) -> ToolResult:
    path = resolve_workspace_path(dir_path)
    if not path.is_dir():
        return ToolResult.failure(f"Directory not found: {dir_path}", dir_path=str(path))

    entries = _walk(path, MAX_LIST_DEPTH if recursive else 1)
    return ToolResult.ok("\n".join(entries) or "(empty directory)", dir_path=str(path), entries=len(entries))


def create_file_read_tool() -> ToolDefinition:
    return build_definition(
        name="file_read",
        description="Read the contents of a file. Supports line range selection.",
        func=read_file,
        args_model=FileReadParams,
    )


def create_file_write_tool() -> ToolDefinition:
    return build_definition(
        name="file_write",
        description="Write content to a file. Creates parent directories if needed.",
        func=write_file,
        args_model=FileWriteParams,
    )


def create_list_dir_tool() -> ToolDefinition:
    return build_definition(
        name="list_dir",
        description="List the contents of a directory.",
        func=list_dir,
        args_model=ListDirParams,
    )
