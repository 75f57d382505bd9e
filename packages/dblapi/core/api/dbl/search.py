"""Search filter encoding for the bot search endpoint.

The filter grammar belongs to the service, so the client takes the encoder
as a parameter; ``encode_search`` is the default.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

SearchEncoder = Callable[[Mapping[str, Any]], str]


def encode_search(criteria: Mapping[str, Any], separator: str = " ") -> str:
    """Encode search criteria as ``key: value`` pairs.

    Args:
        criteria: Field/value filters, in the order they should appear
        separator: String placed between pairs

    Returns:
        Encoded filter string (empty if there are no criteria)

    Example:
        >>> encode_search({"lib": "discord.py", "prefix": "!"})
        'lib: discord.py prefix: !'
    """
    return separator.join(f"{key}: {value}" for key, value in criteria.items())
