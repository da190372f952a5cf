"""Unit formatting helpers shared by flush results and metrics."""

_BYTE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")
_STEP = 1024


def format_bytes(num_bytes: int) -> str:
    """Render a byte count in human-readable base-1024 units.

    Picks the largest unit in which the value is at least 1 (stopping at
    TB) and rounds to two decimals, dropping trailing zeros.

    Args:
        num_bytes: A non-negative byte count.

    Returns:
        The formatted string, e.g. ``"1.5 KB"``. Zero is ``"0 Bytes"``.

    Raises:
        ValueError: If num_bytes is negative.

    Example:
        >>> format_bytes(1536)
        '1.5 KB'
        >>> format_bytes(1073741824)
        '1 GB'
    """
    if num_bytes < 0:
        raise ValueError(f"Byte count cannot be negative: {num_bytes}")
    if num_bytes == 0:
        return "0 Bytes"

    value = float(num_bytes)
    unit = 0
    while value >= _STEP and unit < len(_BYTE_UNITS) - 1:
        value /= _STEP
        unit += 1

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_BYTE_UNITS[unit]}"
