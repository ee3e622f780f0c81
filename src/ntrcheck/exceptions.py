"""ntrcheck exceptions.

Stage-level errors carry the ``kind`` that ends up in the error shape of
an analysis result. Adapter-level errors are raised by the HTTP clients and
translated by the broker or the pipeline.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    CREDENTIAL_MISSING = "CredentialMissing"
    CLASSIFICATION_FAILED = "ClassificationFailed"
    ENRICHMENT_TRANSPORT_FAILED = "EnrichmentTransportFailed"
    FINALIZATION_FAILED = "FinalizationFailed"
    MALFORMED_UPSTREAM_RESPONSE = "MalformedUpstreamResponse"
    UNEXPECTED = "Unexpected"


class NTRCheckError(Exception):
    """Base exception for ntrcheck."""

    kind: ErrorKind = ErrorKind.UNEXPECTED


# ---------------------------------------------------------------------------
# Pipeline stages
# ---------------------------------------------------------------------------

class CredentialMissingError(NTRCheckError):
    """Raised when no OpenAI API key is configured."""

    kind = ErrorKind.CREDENTIAL_MISSING


class ClassificationError(NTRCheckError):
    """Raised when gene extraction from the title returns unusable output."""

    kind = ErrorKind.CLASSIFICATION_FAILED


class MissingGeneSymbolError(ClassificationError):
    """Raised when a [NTR/gene] title yields no gene symbol."""


class EnrichmentTransportError(NTRCheckError):
    """Raised when the broker reports a failed gene lookup."""

    kind = ErrorKind.ENRICHMENT_TRANSPORT_FAILED


class FinalizationError(NTRCheckError):
    """Raised when the final analysis call fails or returns non-JSON."""

    kind = ErrorKind.FINALIZATION_FAILED


class MalformedUpstreamResponseError(NTRCheckError):
    """Raised when the final analysis JSON has the wrong shape."""

    kind = ErrorKind.MALFORMED_UPSTREAM_RESPONSE


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------

class GeneLookupError(NTRCheckError):
    """Raised when an NCBI or HGNC request fails."""


class LLMRequestError(NTRCheckError):
    """Raised when the chat completions endpoint returns a non-success status."""


class LLMResponseError(NTRCheckError):
    """Raised when the model's message content is not a JSON object."""


class GitHubError(NTRCheckError):
    """Raised when an issue cannot be read from the GitHub API."""
