"""Custom exceptions for heading_tree."""


class HeadingTreeError(Exception):
    """Base exception for heading_tree operations."""


class NodeNotFoundError(HeadingTreeError):
    """No node with the requested id exists in the document."""


class DescriptionError(HeadingTreeError):
    """Authoring-tool document description is malformed."""


class ParseError(HeadingTreeError):
    """Error while parsing an HTML fragment into tokens."""


class RepairError(HeadingTreeError):
    """Repair did not reach a valid tree within the pass limit."""
