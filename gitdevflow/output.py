"""
Output module for gitdevflow.

Provides consistent output formatting across commands:
- JSONL: Newline-delimited JSON for piping into build scripts
- Pretty: Human-readable tables using Rich

Usage:
    from gitdevflow.output import emit, emit_error

    emit([outcome], pretty=True)
    emit_error("Unknown strategy", type="config_error", context={"name": "x"})
"""

import json
import sys
from typing import Iterable, Any, Dict, Optional, List

from rich.console import Console
from rich.table import Table

PREFERRED_COLUMNS = ['version', 'kind', 'branch', 'base', 'increment', 'head', 'reason', 'path']
SHORT_ID_LENGTH = 12


def emit(
    items: Iterable[Any],
    pretty: bool = False,
    columns: Optional[List[str]] = None,
    title: Optional[str] = None
) -> None:
    """
    Emit items as JSONL or pretty table.

    Args:
        items: Items to emit (should have to_dict() method or be dicts)
        pretty: If True, render as table. If False, output JSONL
        columns: Column names for table (auto-detected if None)
        title: Table title (pretty mode only)
    """
    if pretty:
        _emit_table(items, columns, title)
    else:
        _emit_jsonl(items, sys.stdout)


def _to_dict(item: Any) -> Dict[str, Any]:
    if hasattr(item, 'to_dict'):
        return item.to_dict()
    if isinstance(item, dict):
        return item
    return {'value': str(item)}


def _emit_jsonl(items: Iterable[Any], stream=sys.stdout) -> None:
    """Emit items as JSONL."""
    for item in items:
        print(json.dumps(_to_dict(item), ensure_ascii=False), file=stream, flush=True)


def _emit_table(items: Iterable[Any], columns: Optional[List[str]] = None, title: Optional[str] = None) -> None:
    """Emit items as a Rich table, one row per outcome."""
    rows = [_to_dict(item) for item in items]

    if not rows:
        print("No results found")
        return

    if not columns:
        columns = _auto_columns(rows)

    console = Console()
    table = Table(show_header=True, header_style="bold", title=title)

    for col in columns:
        table.add_column(col, style="bold" if col == 'version' else None)

    for row in rows:
        cells = [_format_value(row.get(col), col) for col in columns]
        table.add_row(*cells, style="yellow" if row.get('kind') == 'fallback' else None)

    console.print(table)


def _auto_columns(rows: List[Dict]) -> List[str]:
    """Outcome fields in reading order, then anything else alphabetically."""
    all_keys = set()
    for row in rows:
        all_keys.update(row.keys())

    columns = [col for col in PREFERRED_COLUMNS if col in all_keys]
    columns.extend(sorted(all_keys - set(columns)))
    return columns


def _format_value(value: Any, column: str = '', max_len: int = 72) -> str:
    """Format a value for table display."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    s = str(value)
    if column == 'head':
        return s[:SHORT_ID_LENGTH]
    if len(s) > max_len:
        return s[:max_len - 3] + '...'
    return s


def emit_error(
    error: str,
    type: str = "error",
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Emit error to stderr as JSON.

    Args:
        error: Error message
        type: Error type (usually the exception class name)
        context: Additional context dict (exit code, fallback reason, ...)
    """
    obj = {
        'error': error,
        'type': type
    }
    if context:
        obj['context'] = context

    print(json.dumps(obj, ensure_ascii=False), file=sys.stderr, flush=True)
