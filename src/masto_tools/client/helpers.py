"""Text helpers."""

import html


def unescape_html(text: str) -> str:
    """Replace HTML entities with UTF-8 characters.

    Supports named and numbered entities, decimal and hexadecimal.

    Example:
        unescape_html("2&euro; = 2&#8364; = 2&#x20ac;")  # "2€ = 2€ = 2€"
    """
    return html.unescape(text)
