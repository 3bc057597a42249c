"""Infrastructure layer: command log file, advisory locking, snapshot engine.

Depends on :mod:`graphlog.domain`; never the other way around.
"""
