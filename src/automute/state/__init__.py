"""Room state reconciliation.

The manager owns the single in-memory room state; the power helpers,
the duplicate-input resolver, and the event dispatcher all act on it
through the manager.
"""

__all__: list[str] = []
