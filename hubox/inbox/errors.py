"""Exceptions raised by the inbox service.

Transport failures are ``hubox.remote.http_client.HTTPClientError``; the
classes here cover the local failure modes.
"""


class InboxError(Exception):
    """Base exception for inbox errors."""


class CredentialError(InboxError):
    """The token is missing or was rejected by the remote."""


class NotFoundError(InboxError):
    """An operation referenced a notification id absent from the snapshot."""


class InvalidSubjectError(NotFoundError):
    """A notification subject has no API URL that resolves to owner/repo/number."""
