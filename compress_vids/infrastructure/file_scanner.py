import glob
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from compress_vids.config.models import TEMP_PREFIX, normalize_pattern
from compress_vids.domain.errors import PatternExpansionError


@dataclass(frozen=True)
class ScanResult:
    files: List[Path] = field(default_factory=list)
    excluded: List[Path] = field(default_factory=list)


def _split_brace_group(pattern: str, start: int) -> Tuple[int, List[str]]:
    """Returns the index of the brace closing the group at `start` and its top-level alternatives."""
    depth = 0
    parts: List[str] = []
    part_start = start + 1
    for i in range(start, len(pattern)):
        char = pattern[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                parts.append(pattern[part_start:i])
                return i, parts
        elif char == "," and depth == 1:
            parts.append(pattern[part_start:i])
            part_start = i + 1
    raise PatternExpansionError(f"Unbalanced braces in pattern: {pattern}")


def expand_braces(pattern: str) -> List[str]:
    """Expands `{a,b}` alternatives (nesting allowed). `{a}` stays literal."""
    start = pattern.find("{")
    while start != -1:
        end, parts = _split_brace_group(pattern, start)
        if len(parts) > 1:
            prefix, suffix = pattern[:start], pattern[end + 1:]
            expanded: List[str] = []
            for part in parts:
                for item in expand_braces(prefix + part + suffix):
                    if item not in expanded:
                        expanded.append(item)
            return expanded
        start = pattern.find("{", end + 1)
    return [pattern]


class FileScanner:
    """Expands path patterns into absolute file lists.

    Directories expand to every file below them, `**` recurses, hidden
    entries are only matched when named explicitly, and reserved temp files
    are split off into `ScanResult.excluded`.
    """

    def __init__(self, temp_prefix: str = TEMP_PREFIX):
        self.temp_prefix = temp_prefix

    def is_temp_file(self, path: Path) -> bool:
        return path.name.startswith(self.temp_prefix)

    def _match(self, pattern: str) -> List[str]:
        pattern = os.path.expanduser(pattern)
        if not glob.has_magic(pattern):
            literal = os.path.abspath(pattern)
            if os.path.isdir(literal):
                pattern = os.path.join(glob.escape(literal), "**")
            else:
                return [literal] if os.path.isfile(literal) else []
        elif not os.path.isabs(pattern):
            pattern = os.path.join(glob.escape(os.getcwd()), pattern)
        return [p for p in glob.glob(pattern, recursive=True) if os.path.isfile(p)]

    def scan(self, pattern: str) -> ScanResult:
        """Expands one pattern. Raises PatternExpansionError if it cannot be matched."""
        normalized = normalize_pattern(pattern)
        matches = set()
        try:
            for expanded in expand_braces(normalized):
                for match in self._match(expanded):
                    matches.add(Path(os.path.abspath(match)))
        except OSError as exc:
            raise PatternExpansionError(f"Failed to expand {pattern}: {exc}") from exc

        files: List[Path] = []
        excluded: List[Path] = []
        for path in sorted(matches):
            if self.is_temp_file(path):
                excluded.append(path)
            else:
                files.append(path)
        return ScanResult(files=files, excluded=excluded)
