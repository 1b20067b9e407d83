"""
Вспомогательные функции.
"""


def sec2dhms(seconds: float) -> str:
    """
    Форматирует длительность для логов.

    Args:
        seconds: Длительность в секундах

    Returns:
        str: "HH:MM:SS" или "Nd HH:MM:SS" если больше суток

    Examples:
        >>> sec2dhms(3)
        '00:00:03'
        >>> sec2dhms(90061)
        '1d 01:01:01'
    """
    total = max(int(seconds), 0)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    hms = f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{days}d {hms}" if days else hms
