"""
ISK value formatting utilities.
"""


def format_isk(value: float) -> str:
    """
    Format ISK value with a B/M/K suffix and two decimals.

    Args:
        value: ISK amount

    Returns:
        Formatted string (e.g., "1.50B", "250.00M", "15.00K", "999")
    """
    if value < 0:
        return f"-{format_isk(abs(value))}"

    if value >= 1_000_000_000:
        return f"{value / 1_000_000_000:.2f}B"
    elif value >= 1_000_000:
        return f"{value / 1_000_000:.2f}M"
    elif value >= 1_000:
        return f"{value / 1_000:.2f}K"
    else:
        return f"{value:.0f}"
