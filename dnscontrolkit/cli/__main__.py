"""
Entry point for running dnscontrolkit CLI as a module.

Usage: python -m dnscontrolkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
