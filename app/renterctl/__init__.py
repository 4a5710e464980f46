"""renterctl - Command-line client for decentralized sector storage.

Reads metafiles, talks to storage hosts through a pluggable session
backend, and reclaims sectors that no metafile references anymore.
"""

__version__ = "0.7.0"
__all__ = ["__version__"]
