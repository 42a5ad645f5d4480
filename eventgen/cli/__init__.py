"""
eventgen command-line tools.

Commands:
- eventgen [label]        - emit one JSON event per second
- eventgen-check [input]  - verify a captured event stream
"""

from eventgen import __version__

__all__ = ["__version__"]
