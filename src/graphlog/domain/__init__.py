"""Domain layer: command records, graph snapshot, constraints and search.

Pure logic only. Nothing here touches the filesystem.
"""
