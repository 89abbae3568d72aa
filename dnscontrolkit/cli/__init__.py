"""
dnscontrolkit CLI module.

This module provides the command-line interface for dnscontrolkit.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
