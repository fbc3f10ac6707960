MB = 1024 * 1024
GB = 1024 * MB


def format_duration(seconds: float) -> str:
    """Formats seconds as e.g. `1h 2m 3s`; leading zero units are omitted."""
    s = max(0.0, float(seconds))
    parts = []
    if s > 3600:
        hours = int(s // 3600)
        parts.append(f"{hours}h")
        s -= hours * 3600
    if s > 60:
        minutes = int(s // 60)
        parts.append(f"{minutes}m")
        s -= minutes * 60
    parts.append(f"{int(s)}s")
    return " ".join(parts)


def format_size(size_bytes: float) -> str:
    if size_bytes > GB:
        return f"{size_bytes / GB:.1f} GB"
    if size_bytes > MB:
        return f"{size_bytes / MB:.1f} MB"
    return f"{size_bytes / 1024:.1f} KB"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def format_ratio(part: float, whole: float) -> str:
    """`part` as a percentage of `whole`; `n/a` when whole is zero."""
    if whole <= 0:
        return "n/a"
    return format_percent(part / whole * 100.0)
