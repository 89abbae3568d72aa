"""
Helpers shared by CLI commands.
"""

from dnscontrolkit.config import SetupConfig, load_config


def config_from_args(args, environ) -> SetupConfig:
    """Build the setup configuration from parsed arguments and the environment."""
    overrides = {
        "version": getattr(args, "tool_version", None),
        "auth_token": getattr(args, "auth_token", None),
        "resolve_strategy": getattr(args, "resolve_strategy", None),
        "cache_enabled": getattr(args, "cache_enabled", None),
        "cache_dir": getattr(args, "cache_dir", None),
        "install_root": getattr(args, "install_root", None),
        "lock": getattr(args, "lock", None),
    }
    return load_config(config_file=args.config, environ=environ, overrides=overrides)
