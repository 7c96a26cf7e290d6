def format_clock(total_seconds: float) -> str:
    """Format seconds as ``mm:ss``; negative or missing values show as 00:00."""
    seconds = max(0, int(total_seconds or 0))
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"
