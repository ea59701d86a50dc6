"""Full-text search over the flat file list, plus summary statistics."""

import re
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Pattern, Sequence

from devterm.entities import File


@dataclass(frozen=True)
class SearchOptions:
    case_sensitive: bool = False
    whole_word: bool = False
    regex: bool = False
    max_results: int = 50
    context_lines: int = 2


@dataclass(frozen=True)
class SearchResult:
    file_path: str
    line: int
    column: int
    content: str
    match: str
    context_before: Optional[str] = None
    context_after: Optional[str] = None


def compile_query(query: str, options: SearchOptions) -> Optional[Pattern[str]]:
    """Build the single pattern used for a search, or None if it is invalid."""
    flags = 0 if options.case_sensitive else re.IGNORECASE
    if options.regex:
        source = query
    else:
        source = re.escape(query)
        if options.whole_word:
            source = rf"\b{source}\b"
    try:
        return re.compile(source, flags)
    except re.error:
        return None


def search_files(files: Sequence[File], query: str,
                 options: Optional[SearchOptions] = None, **overrides) -> List[SearchResult]:
    """Scan ``files`` line by line and return matches in encounter order.

    Keyword overrides (``max_results=5`` ...) are applied on top of
    ``options``.  At most ``max_results`` results are returned; scanning stops
    as soon as the limit is reached, even in the middle of a line.
    """
    opts = replace(options or SearchOptions(), **overrides)
    if not query.strip() or opts.max_results <= 0:
        return []
    pattern = compile_query(query, opts)
    if pattern is None:
        return []

    results: List[SearchResult] = []
    ctx = max(0, opts.context_lines)
    for file in files:
        if not file.content:
            continue
        lines = file.content.split("\n")
        for idx, line in enumerate(lines):
            for m in pattern.finditer(line):
                before = "\n".join(lines[max(0, idx - ctx):idx])
                after = "\n".join(lines[idx + 1:idx + 1 + ctx])
                results.append(SearchResult(
                    file_path=file.name,
                    line=idx + 1,
                    column=m.start() + 1,
                    content=line.strip(),
                    match=m.group(0),
                    context_before=before or None,
                    context_after=after or None,
                ))
                if len(results) >= opts.max_results:
                    return results
                if not m.group(0):
                    break
    return results


def format_search_results(results: List[SearchResult], query: str) -> str:
    """Markdown-ish summary grouped by file, matches in bold."""
    if not results:
        return f'No results for "{query}".'
    grouped: "OrderedDict[str, List[SearchResult]]" = OrderedDict()
    for r in results:
        grouped.setdefault(r.file_path, []).append(r)

    out = [f'**{len(results)} result(s) for "{query}"**', ""]
    for path, hits in grouped.items():
        out.append(f"### {path}")
        for r in hits:
            highlighted = re.sub(f"({re.escape(r.match)})", r"**\1**", r.content, flags=re.IGNORECASE) \
                if r.match else r.content
            out.append(f"- L{r.line}: {highlighted}")
        out.append("")
    return "\n".join(out).strip()


_TECH_MARKERS = {
    "Next.js": ("Next.js", "next"),
    "React": ("React", "react"),
    "Tailwind CSS": ("Tailwind", "tailwind"),
    "Node.js": ("Node", "node"),
}

_EXT_KINDS = {
    "ts": ("TypeScript", "TypeScript"),
    "tsx": ("TypeScript", "TypeScript"),
    "js": ("JavaScript", "JavaScript"),
    "jsx": ("JavaScript", "JavaScript"),
    "css": ("CSS", "Stylesheet"),
    "json": (None, "JSON"),
    "md": (None, "Markdown"),
}


@dataclass
class TreeStats:
    total_files: int
    files_by_extension: Dict[str, int]
    total_lines: int
    technologies: List[str]
    file_types: List[str]


def compute_stats(files: Sequence[File]) -> TreeStats:
    by_ext: Dict[str, int] = {}
    total_lines = 0
    technologies: List[str] = []
    file_types: List[str] = []

    def _add(bucket: List[str], value: Optional[str]) -> None:
        if value and value not in bucket:
            bucket.append(value)

    for f in files:
        if not f.content:
            continue
        ext = f.name.rsplit(".", 1)[-1].lower() if "." in f.name else "unknown"
        by_ext[ext] = by_ext.get(ext, 0) + 1
        total_lines += len(f.content.split("\n"))
        tech, kind = _EXT_KINDS.get(ext, (None, None))
        _add(technologies, tech)
        _add(file_types, kind)
        for name, markers in _TECH_MARKERS.items():
            if any(mk in f.content for mk in markers):
                _add(technologies, name)
    return TreeStats(
        total_files=len(files),
        files_by_extension=by_ext,
        total_lines=total_lines,
        technologies=technologies,
        file_types=file_types,
    )


def format_stats(stats: TreeStats) -> List[str]:
    """Plain-text summary of ``compute_stats`` output, largest extensions first."""
    by_ext = sorted(stats.files_by_extension.items(), key=lambda kv: -kv[1])
    return [
        "Project Statistics",
        "",
        f"  Total Files:   {stats.total_files}",
        f"  Total Lines:   {stats.total_lines:,}",
        f"  By Extension:  {', '.join(f'{ext}: {n}' for ext, n in by_ext) or 'none'}",
        f"  Technologies:  {', '.join(stats.technologies) or 'None detected'}",
    ]
