"""
Opaque identifiers handed out by the tracking server.

They are plain strings with a distinct type: equal when their values are equal, usable
anywhere a ``str`` is expected, and serialized as bare JSON strings.
"""


class _Identifier(str):
    __slots__ = ()

    def __repr__(self):
        return f"{type(self).__name__}({str.__repr__(self)})"


class ExperimentId(_Identifier):
    """ID of an experiment."""


class RunId(_Identifier):
    """ID of a run."""


class PageToken(_Identifier):
    """Opaque token pointing at the next page of a paginated search."""
