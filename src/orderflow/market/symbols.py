"""Symbol helpers: base/quote splitting and display formatting."""

from collections.abc import Iterable


def split_symbol(
    symbol: str,
    quote_assets: Iterable[str],
    base_asset: str | None = None,
) -> tuple[str, str] | None:
    """
    Split a concatenated symbol into ``(base, quote)``.

    The longest matching quote suffix wins, so ``VANAFDUSD`` resolves to
    ``FDUSD`` rather than ``USD``.

    Args:
        symbol: Venue symbol (e.g., "VANAUSDT").
        quote_assets: Recognised quote assets.
        base_asset: If given, the base must match it.

    Returns:
        ``(base, quote)`` or None if the symbol cannot be split.
    """
    symbol = symbol.upper()
    for quote in sorted({q.upper() for q in quote_assets}, key=len, reverse=True):
        if not symbol.endswith(quote) or len(symbol) == len(quote):
            continue
        base = symbol[: -len(quote)]
        if base_asset is not None and base != base_asset.upper():
            continue
        return base, quote
    return None


def format_symbol(symbol: str, base_asset: str) -> str:
    """
    Format a symbol for display.

    Example:
        >>> format_symbol("VANAUSDT", "VANA")
        'VANA / USDT'
    """
    if symbol.startswith(base_asset) and len(symbol) > len(base_asset):
        return f"{base_asset} / {symbol[len(base_asset):]}"
    return symbol
