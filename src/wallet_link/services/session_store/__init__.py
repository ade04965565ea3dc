# -*- coding: utf-8 -*-
"""Link session lifecycle (create, lazy expiry, one-time bind, touch)."""

from wallet_link.services.session_store.dto import BindResult
from wallet_link.services.session_store.session_store import SessionStore

__all__ = ["BindResult", "SessionStore"]
