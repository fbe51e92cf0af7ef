"""Chart automation helpers: Pine Script analysis and backups, panes, tabs, replay, drawings and market summaries."""

__version__ = "0.1.0"
__all__ = ["analyze", "safety", "pane", "tab", "replay", "drawing", "hts"]