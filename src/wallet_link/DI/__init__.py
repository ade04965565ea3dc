# -*- coding: utf-8 -*-
"""Dependency injection."""

from wallet_link.DI.container import Container

__all__ = ["Container"]
