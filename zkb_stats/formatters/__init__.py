"""
Output formatting utilities.
"""

from zkb_stats.formatters.isk import format_isk
from zkb_stats.formatters.names import display_name
from zkb_stats.formatters.markdown import render_kill_report, render_loss_report, report_path
from zkb_stats.formatters.export import ranking_frame, write_ranking

__all__ = [
    'format_isk',
    'display_name',
    'render_kill_report',
    'render_loss_report',
    'report_path',
    'ranking_frame',
    'write_ranking',
]
