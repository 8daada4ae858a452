"""
Reference id generation for citizen reports.

A refid is the code a citizen quotes when following up on a report, e.g.
RPT-4F8K2QZT. Uniqueness is enforced by the document store, not here.
"""

import secrets
import string

REFID_PREFIX = "RPT-"
REFID_LENGTH = 8
REFID_ALPHABET = string.digits + string.ascii_uppercase  # base-36, uppercase
REFID_PATTERN = r"^RPT-[A-Z0-9]{8}$"


def generate_refid() -> str:
    """Return a new random refid: the RPT- prefix plus 8 base-36 characters."""
    return REFID_PREFIX + "".join(secrets.choice(REFID_ALPHABET) for _ in range(REFID_LENGTH))
