"""
dnscontrolkit - install a pinned DNSControl release in CI pipelines.
"""
