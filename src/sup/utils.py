"""Small formatting helpers for the CLI."""

_UNITS = ("KiB", "MiB", "GiB", "TiB", "PiB")


def humanize_size(size: int) -> str:
    """Format a byte count with binary units, e.g. ``1.5 KiB``.

    Counts under 1024 are shown exactly in bytes.
    """
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in _UNITS:
        value /= 1024
        if value < 1024 or unit == _UNITS[-1]:
            return f"{value:.1f} {unit}"
