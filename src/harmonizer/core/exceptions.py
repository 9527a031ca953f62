"""
Custom exceptions for Harmonizer.
"""

from typing import List, Optional


class HarmonizerError(Exception):
    """Base exception for Harmonizer."""
    pass


class ConfigurationError(HarmonizerError):
    """Exception raised when configuration is invalid."""
    pass


class ProviderError(HarmonizerError):
    """Exception which can be attributed to a metadata provider."""

    def __init__(self, provider_name: Optional[str], message: str):
        super().__init__(message)
        self.provider_name = provider_name
        self.reason = message

    def __str__(self) -> str:
        if self.provider_name:
            return f"{self.provider_name}: {self.reason}"
        return self.reason


class SourceQueryFailure(ProviderError):
    """A single provider could not produce data for a release."""

    def __init__(self, provider_name: str, message: str, api_url: Optional[str] = None):
        super().__init__(provider_name, message)
        self.api_url = api_url


class SelectionFailure(ProviderError):
    """No provider applies to (a part of) the lookup query."""

    def __init__(self, message: str, provider_name: Optional[str] = None, input_value: Optional[str] = None):
        super().__init__(provider_name, message)
        self.input_value = input_value


class AggregateLookupFailure(HarmonizerError):
    """
    Raised when every selected provider failed to look up the release.

    `errors` holds one failure per provider, `diagnostics` the selection
    problems of the query (which may be all there is if nothing was selected).
    """

    def __init__(
        self,
        message: str,
        errors: List[ProviderError],
        diagnostics: Optional[List[SelectionFailure]] = None,
    ):
        super().__init__(message)
        self.errors = list(errors)
        self.diagnostics = list(diagnostics or [])

    @property
    def provider_names(self) -> List[Optional[str]]:
        return [error.provider_name for error in self.errors]

    @property
    def all_errors(self) -> List[ProviderError]:
        """Provider failures followed by selection diagnostics."""
        return [*self.errors, *self.diagnostics]


class EnrichmentFailure(HarmonizerError):
    """Exception raised when an identifier lookup fails. Never leaves the enrichment step."""
    pass
