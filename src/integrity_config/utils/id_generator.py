"""
ID generation utilities for the rule editor.

Pending whitelist rows and blocks need identifiers that stay stable while
the operator edits them, so validation errors can point at them.
"""

import secrets
import string

# Character set for alphanumeric IDs (letters and numbers)
ALPHANUMERIC_CHARS = string.ascii_lowercase + string.digits


def generate_alphanumeric_id(length: int = 10) -> str:
    """
    Generate a random alphanumeric ID without prefix.

    Args:
        length: Length of the ID (default 10)

    Returns:
        A random alphanumeric string
        Example: "a7b3x9k2m4"
    """
    return "".join(secrets.choice(ALPHANUMERIC_CHARS) for _ in range(length))


def generate_row_id(length: int = 10, prefix: str = "row-") -> str:
    """
    Generate an ID for a pending parameter row.

    Returns:
        A row ID in format: {prefix}{random_alphanumeric}
        Example: "row-a7b3x9k2m4"
    """
    return f"{prefix}{generate_alphanumeric_id(length)}"


def generate_block_id(length: int = 10, prefix: str = "block-") -> str:
    """
    Generate an ID for a pending configuration block.

    Returns:
        A block ID in format: {prefix}{random_alphanumeric}
        Example: "block-a7b3x9k2m4"
    """
    return f"{prefix}{generate_alphanumeric_id(length)}"
