# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer command line interface for tcli."""

from __future__ import annotations

from .app import app

__all__ = ["app"]
