from simpledata.dispatcher import command


@command()
def get_child():
    """Return child of a container node by a single path segment.

    Returns `NA` if child does not exist or is `None`.
    """


@command()
def set_child():
    """Set child of a container node by a single path segment."""


@command()
def build():
    """Build model instance from a payload.

    Raw records are copied into a new instance, while an instance that already
    is of the requested type is returned as is.
    """


@command()
def dump():
    """Dump mapped object graph back to plain python data."""
