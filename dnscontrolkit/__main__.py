"""
Entry point for running dnscontrolkit CLI as a module.

Usage: python -m dnscontrolkit [command] [options]
"""

from dnscontrolkit.cli.parser import main

if __name__ == "__main__":
    main()
