"""Error taxonomy shared by the generator core and the HTTP layer."""

from __future__ import annotations
from enum import Enum


class ErrorKind(str, Enum):
	TRANSPORT = "transport"
	MALFORMED_RESPONSE = "malformed_response"
	CONFIGURATION = "configuration"


class EduNovaError(Exception):
	pass


class ConfigurationError(EduNovaError):
	kind = ErrorKind.CONFIGURATION


class ValidationError(EduNovaError):
	"""User input rejected before anything is sent to the API."""


class GenerationError(EduNovaError):
	kind = ErrorKind.TRANSPORT


class TransportError(GenerationError):
	kind = ErrorKind.TRANSPORT


class MalformedResponseError(GenerationError):
	kind = ErrorKind.MALFORMED_RESPONSE


class ParseFailure(EduNovaError):
	"""Raised by the strict parsers when no usable item was found."""


class CapabilityUnsupported(EduNovaError):
	pass


class CapabilityError(EduNovaError):
	pass


class GenerationInProgress(EduNovaError):
	"""A second generation was triggered while one is still pending."""
