"""
pScan - TCP port scanner for a persisted list of hosts.
"""

__version__ = "0.1.0"
