"""
CI runner integration for dnscontrolkit.
"""

from .runner import Runner, WorkflowCommandFormatter, escape_data, is_github_actions

__all__ = ["Runner", "WorkflowCommandFormatter", "escape_data", "is_github_actions"]
