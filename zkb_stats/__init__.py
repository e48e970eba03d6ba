"""
zkb-stats: corporation kill and loss statistics from zKillboard.
"""

__version__ = "1.0.0"
