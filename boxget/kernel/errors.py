"""
Errors raised by the box-add pipeline.

Every error carries a human-readable message rendered from its template and
the keyword data it was raised with (kept on `extra`). The intermediate
classes group errors by kind so callers can react to a whole family, e.g.
retry on `TransportError` only.
"""
from typing import Any


class BoxGetError(Exception):
    message = "An unexpected error occurred while adding the box."
    retryable = False

    def __init__(self, message: str | None = None, **extra: Any):
        self.extra = extra
        super().__init__(message or self.message.format(**extra))


# ---------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------

class PreconditionError(BoxGetError):
    pass


class ConfigurationError(BoxGetError):
    pass


class NotFoundError(BoxGetError):
    pass


class ConflictError(BoxGetError):
    pass


class MismatchError(BoxGetError):
    pass


class ConstraintError(BoxGetError):
    pass


class DuplicateError(BoxGetError):
    pass


class TransportError(BoxGetError):
    retryable = True


class MalformedDataError(BoxGetError):
    pass


class StoreError(BoxGetError):
    pass


# ---------------------------------------------------------------------
# Preconditions / configuration
# ---------------------------------------------------------------------

class BoxAddNameRequired(PreconditionError):
    message = (
        "A name is required when adding a box file directly. Please pass "
        "a name for the box along with the URL or path {url}."
    )


class BoxAddInvalidVersionConstraint(PreconditionError):
    message = "The version constraint '{constraint}' is invalid: {error}"


class BoxServerNotSet(ConfigurationError):
    message = (
        "A URL to a box server is not set, so the shorthand '{url}' cannot be "
        "expanded. Set BOXGET_SERVER_URL or pass a full URL to the box."
    )


# ---------------------------------------------------------------------
# Sources and metadata
# ---------------------------------------------------------------------

class BoxAddShortNotFound(NotFoundError):
    message = (
        "The box '{name}' could not be found on the box server at {url}. "
        "Please double-check the name."
    )


class BoxAddMetadataMultiURL(ConflictError):
    message = (
        "Multiple URLs were given for the box, but at least one of them is a "
        "metadata document. Metadata can only be added from a single URL: "
        "{urls}"
    )


class BoxAddNameMismatch(MismatchError):
    message = (
        "The box you're adding has a name that differs from the name you "
        "requested. Requested: '{requested}', actual: '{actual}'."
    )


class BoxMetadataMalformed(MalformedDataError):
    message = "The metadata document at {url} is malformed: {error}"


# ---------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------

class BoxAddNoMatchingVersion(ConstraintError):
    message = (
        "No version of the box '{name}' matches the constraint '{constraints}' "
        "(metadata: {url}). Available versions: {versions}"
    )


class BoxAddNoMatchingProvider(ConstraintError):
    message = (
        "The box '{name}' has no version available for the requested "
        "provider(s) {requested} (metadata: {url})."
    )


class BoxAddProviderChoiceRequired(ConstraintError):
    message = (
        "Version {version} of the box '{name}' is available for several "
        "providers ({providers}); pass a provider to choose one."
    )


class BoxAlreadyExists(DuplicateError):
    message = (
        "The box '{name}' ({version}) for provider '{provider}' is already "
        "installed. Use force to overwrite it."
    )


# ---------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------

class DownloadNotFound(NotFoundError):
    message = "Nothing was found at {url}."


class DownloadError(TransportError):
    message = "Failed to download {url}: {error}"


class DownloadTimeout(DownloadError):
    message = "Timed out after {timeout}s while downloading {url}."


# ---------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------

class BoxChecksumMismatch(StoreError):
    message = (
        "The checksum of the downloaded box did not match. "
        "Expected {expected}, got {actual} ({checksum_type})."
    )


class BoxChecksumInvalidType(StoreError):
    message = "The checksum type '{checksum_type}' is not supported."


class BoxProviderDoesntMatch(StoreError):
    message = (
        "The box is for provider '{actual}', but one of {expected} was requested."
    )


class BoxFileInvalid(StoreError):
    message = "The box file {path} is not a valid box: {error}"
