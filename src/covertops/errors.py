"""Exception types for the covert operations engine.

Only conditions that must abort a call are exceptions. Expected negative
outcomes (a missing agent, a failed roll, a war declaration, a captured
agent) are reported in the result models instead.
"""


class CovertOpsError(Exception):
    """Base class for all covert operations errors."""


class ActorNotFoundError(CovertOpsError, LookupError):
    """An actor or target identifier does not resolve to a polity."""

    def __init__(self, actor_id: str):
        self.actor_id = actor_id
        super().__init__(f"Actor not found: {actor_id}")


class UnknownActionKindError(CovertOpsError, KeyError):
    """An action kind is not defined in the active catalog."""

    def __init__(self, action_kind: object, catalog_version: str | None = None):
        self.action_kind = action_kind
        self.catalog_version = catalog_version
        suffix = f" (catalog {catalog_version})" if catalog_version else ""
        super().__init__(f"Unknown action kind: {action_kind!r}{suffix}")

    def __str__(self) -> str:
        # KeyError repr-quotes its message otherwise
        return self.args[0]


class CatalogError(CovertOpsError, ValueError):
    """A catalog definition is malformed."""
