# -*- coding: utf-8 -*-
"""Background maintenance tasks."""

from wallet_link.services.maintenance.expired_session_sweeper import ExpiredSessionSweeper

__all__ = ["ExpiredSessionSweeper"]
