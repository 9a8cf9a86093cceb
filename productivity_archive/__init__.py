"""Productivity Archive.

Archive completed tasks, projects, notes, bookmarks and snippets, compute
productivity metrics over the archive and restore archived items.
"""

__version__ = "0.1.0"
