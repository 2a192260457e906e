# Copyright (c) 2024 Pretender Contributors
# MIT License

"""Pretender release metadata."""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Pretender Contributors"
__codename__ = "Masquerade"
