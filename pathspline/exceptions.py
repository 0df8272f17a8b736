"""
Exception types raised by pathspline.

ConstructionError aborts building a path. DomainError is recoverable:
callers treat the query as "off path" and carry on.
"""


class PathError(Exception):
    pass


class ConstructionError(PathError, ValueError):
    pass


class DomainError(PathError, ValueError):
    pass
