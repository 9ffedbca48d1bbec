"""Errors raised while building documentation.

None of these escape route registration: the endpoint builder catches them
per entry, reports them through the diagnostic sink and carries on.
"""


class RoutedocError(Exception):
    """Base class for documentation generation errors."""


class UnrecognizedSchemaNode(RoutedocError):
    """A value handed to the translator is not a known schema node."""


class MalformedValidatorMetadata(RoutedocError):
    """A validator descriptor is missing its location or schema."""


class MalformedResponseEntry(RoutedocError):
    """A documented response cannot be normalized."""


class PathMergeAmbiguity(RoutedocError):
    """A mount prefix and child path hold no segments at all."""
