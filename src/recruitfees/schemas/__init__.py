"""Pydantic schema definitions for job-order records and configuration."""

from __future__ import annotations

from .config import AppConfig, EngineConfig, load_config
from .job_order import MONETARY_FIELDS, JobOrder

__all__ = [
    "AppConfig",
    "EngineConfig",
    "JobOrder",
    "MONETARY_FIELDS",
    "load_config",
]
