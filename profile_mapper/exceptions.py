"""
Custom exception hierarchy for Profile Mapper.

Bad token patterns, unreadable profile settings and changes to a sealed
profile each raise their own error. All of them carry the offending pattern,
file or operation as context, plus suggestions for fixing the profile.
"""

from typing import Dict, Any, Optional, List


class ProfileMapperError(Exception):
    """
    Base exception for all Profile Mapper errors.

    Provides rich context and error recovery guidance.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        error_code: Optional[str] = None
    ):
        """
        Initialize the exception with context and recovery suggestions.

        Args:
            message: Human-readable error message
            context: Additional context about where/why the error occurred
            suggestions: List of potential solutions or next steps
            error_code: Unique error code for programmatic handling
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        self.error_code = error_code

    def __str__(self) -> str:
        """Return formatted error message with context."""
        lines = [super().__str__()]

        if self.error_code:
            lines.append(f"Error Code: {self.error_code}")

        if self.context:
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestions:
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  • {suggestion}")

        return "\n".join(lines)


class ConfigurationError(ProfileMapperError):
    """Raised when a profile configuration is invalid or missing."""

    def __init__(self, message: str, config_file: str = None, **kwargs):
        context = kwargs.get('context', {})
        if config_file:
            context['config_file'] = config_file

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the profile file syntax",
                "Verify every option name is spelled correctly",
                "Check the documentation for profile examples"
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code=kwargs.get('error_code', "CONFIG_ERROR")
        )


class NamingConventionError(ConfigurationError):
    """Raised when a naming convention cannot be constructed."""

    def __init__(self, message: str, pattern: str = None, **kwargs):
        context = kwargs.get('context', {})
        if pattern is not None:
            context['pattern'] = pattern

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the token pattern is a valid regular expression",
                "Use one of the built-in conventions: pascal, lower_underscore, exact"
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="NAMING_CONVENTION_ERROR"
        )


class ProfileSealedError(ProfileMapperError):
    """Raised when a sealed profile (or one of its parts) is mutated."""

    def __init__(self, message: str, profile_name: str = None, operation: str = None, **kwargs):
        context = kwargs.get('context', {})
        if profile_name:
            context['profile_name'] = profile_name
        if operation:
            context['operation'] = operation

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Finish all configuration calls before calling seal()",
                "Build a new Profile if the rules must change"
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="PROFILE_SEALED_ERROR"
        )

