from __future__ import annotations


class PhotoMatError(Exception):
	"""Base exception for the application."""


class DecodeFailure(PhotoMatError):
	"""Raised when a file cannot be decoded into a raster image."""

	def __init__(self, filename: str, reason: str) -> None:
		super().__init__(f"{filename}: {reason}")
		self.filename = filename
		self.reason = reason


class MetadataUnavailable(PhotoMatError):
	"""Raised by the EXIF decoder helpers; callers degrade to empty metadata."""


class InvalidGeometry(PhotoMatError, ValueError):
	"""Raised when a fit is requested with a non-finite or non-positive aspect ratio."""


class InvalidTransition(PhotoMatError):
	"""Raised when the session state machine is driven out of order."""


class ActionNotAllowed(PhotoMatError):
	"""Raised when a UI action is not enabled in the current session state."""


class BatchInProgress(ActionNotAllowed):
	"""Raised when a batch is submitted while another one is still loading."""


class UnknownOption(PhotoMatError, ValueError):
	"""Raised for display option names or values the compositor does not know."""


class ExportFailure(PhotoMatError):
	"""Raised when the rendered surface cannot be encoded or saved."""
