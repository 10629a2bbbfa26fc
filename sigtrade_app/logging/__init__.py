"""
Logging configuration and utilities for the SigTrade trading core.
"""
from .config import configure_logging, get_audit_logger

__all__ = ["configure_logging", "get_audit_logger"]
