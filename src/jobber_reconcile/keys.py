"""Opportunity key normalization shared by grouping, requests and persistence."""

import re
from typing import Optional

_NON_KEY_CHARS = re.compile(r"[^a-z0-9\s]")


def normalize_part(value: Optional[str]) -> str:
    """Lowercase, trim, and strip everything outside ``[a-z0-9\\s]``."""
    return _NON_KEY_CHARS.sub("", (value or "").lower().strip())


def normalize_opportunity_key(client_name: Optional[str], service_street: Optional[str]) -> str:
    """
    Stable grouping key for a (client, street) pair.
    Exact after canonicalization: casing, surrounding whitespace and punctuation
    differences collapse; typos do not.
    """
    return f"{normalize_part(client_name)}|{normalize_part(service_street)}"


def request_key(client_name: Optional[str], service_street: Optional[str]) -> Optional[str]:
    """Same composite as the opportunity key, or None when either part normalizes to empty."""
    client = normalize_part(client_name)
    street = normalize_part(service_street)
    if not client or not street:
        return None
    return f"{client}|{street}"
