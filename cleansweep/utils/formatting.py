"""Human-readable formatting helpers."""

SIZE_UNITS = ('B', 'KB', 'MB', 'GB', 'TB')


def human_size(num_bytes: int) -> str:
    """Render a byte count with the largest fitting binary unit.

    Args:
        num_bytes: Non-negative byte count.

    Returns:
        String such as ``"0 B"``, ``"1.0 KB"`` or ``"2.5 GB"``.

    Raises:
        ValueError: If ``num_bytes`` is negative.
    """
    if num_bytes < 0:
        raise ValueError(f"Byte count must be non-negative, got {num_bytes}")
    if num_bytes == 0:
        return "0 B"

    size = float(num_bytes)
    unit_index = 0
    while size >= 1024.0 and unit_index < len(SIZE_UNITS) - 1:
        size /= 1024.0
        unit_index += 1

    return f"{size:.1f} {SIZE_UNITS[unit_index]}"
