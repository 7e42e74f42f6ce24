"""Error taxonomy shared by services and routes.

``ValidationError`` is raised before any upstream work and maps to 400.
``UpstreamError`` subclasses wrap failures of slow collaborators; only the
fatal ones (synthesis, shard proxy) ever reach a client.
"""


class PronunciationError(Exception):
    """Base class for errors the HTTP layer knows how to render."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PronunciationError):
    """Missing word, unsupported accent or otherwise malformed request."""

    status_code = 400


class UpstreamError(PronunciationError):
    """An upstream dependency failed or timed out."""


class DatasetLoadError(UpstreamError):
    """A hosted dataset (bulk phonetics or a letter shard) could not be loaded."""

    status_code = 502

    def __init__(self, key: str, message: str):
        super().__init__(f"dataset {key!r}: {message}")
        self.key = key


class DefinitionLookupError(UpstreamError):
    """The dictionary API call failed. Never surfaced to clients."""


class SynthesisError(UpstreamError):
    """Speech synthesis failed; the request cannot be answered."""

    status_code = 500
