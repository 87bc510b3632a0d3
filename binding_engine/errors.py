"""
Domain exceptions for the binding engine.

Notes
-----
Expected outcomes (an invalid entity at save time) are reported as values, not
exceptions. The exceptions below signal programmer misuse and are raised at
construction time.
"""

from __future__ import annotations


class BindingError(RuntimeError):
    """Base exception for all binding engine failures."""


class EntityDefinitionError(BindingError):
    """Raised when an entity record is declared with no fields or duplicate keys."""


class ControlIndexError(BindingError):
    """Raised when a control is bound to a field index outside its record."""


class ControlConfigurationError(BindingError):
    """Raised when a control variant is configured with unusable settings."""


class UnknownRecordError(BindingError):
    """Raised when a record handle is not (or no longer) registered."""
