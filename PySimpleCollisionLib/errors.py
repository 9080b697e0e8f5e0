class CollisionLibError(Exception):
    pass


class InvalidStateError(CollisionLibError):
    """Builder method called out of sequence, or query on an unfinished mesh."""


class InvalidHandleError(CollisionLibError):
    """Operation on a disposed mesh or on a handle the registry does not know."""


class DegenerateInputError(CollisionLibError, ValueError):
    """Non-finite coordinates, or a mesh finalized without triangles."""
