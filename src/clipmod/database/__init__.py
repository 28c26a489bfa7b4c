from .history_file import HistoryFile

__all__ = ["HistoryFile"]
