from __future__ import annotations

"""Subpackage aggregating individual auth route modules."""

__all__ = [
    "home",
    "login",
    "register",
    "profile",
    "oauth",
    "logout",
]
