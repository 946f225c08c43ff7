"""Abstract component."""


class ComponentInconsistencyError(Exception):
    """Component inconsistency error.

    Raised when a component is misconfigured, has missing dependencies, or is in an inconsistent state.

    """
