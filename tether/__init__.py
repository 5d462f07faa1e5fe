"""
Tether SRS - spaced-repetition scheduling engine.

Packages:
- tether.core: records and errors
- tether.study: the scheduling engine
- tether.storage: JSON deck persistence (caller side)
- tether.cli: the `tether` command
"""

__version__ = "1.0.0"
