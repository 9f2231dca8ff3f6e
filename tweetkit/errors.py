"""Exception hierarchy for tweetkit."""


class TweetkitError(Exception):
    """Base exception for all tweetkit errors."""

    pass


class MalformedEntityError(TweetkitError):
    """An entity lacks its index range or a field needed to render it."""

    pass


class SpliceError(TweetkitError):
    """Base exception for text splicing errors."""

    pass


class OutOfRangeSpliceError(SpliceError):
    """An entity span falls outside the bounds of the text."""

    pass


class OverlappingSpliceError(SpliceError):
    """An entity span overlaps a span that was already replaced."""

    pass


class TweetSourceError(TweetkitError):
    """A tweet source failed to return a timeline."""

    pass


class TimelineMergeError(TweetkitError):
    """A timeline merge was aborted because a source failed."""

    pass
