from typing import Any


class SubiquityError(Exception):
	"""Base exception for everything raised by subiquity_client."""

	pass


class SubiquityException(SubiquityError):
	"""Raised when the installer backend answers with a non-200 status.

	Attributes:
		method: Description of the client operation that issued the request
		status_code: HTTP status code returned by the backend
		message: Raw response body (may be plain text or an HTML error page)
	"""

	def __init__(self, method: str, status_code: int, message: str):
		self.method = method
		self.status_code = status_code
		self.message = message
		super().__init__(f'{method} returned error {status_code}\n{message}')


class SubiquityDecodeError(SubiquityError):
	"""Raised when a response body does not match the expected shape.

	Attributes:
		type_name: Name of the model, union or enum being decoded
		field: Dotted path of the offending field ('$type' for discriminator failures)
		value: The offending input value
		detail: Human readable reason
	"""

	def __init__(self, type_name: str, field: str | None = None, value: Any = None, detail: str = ''):
		self.type_name = type_name
		self.field = field
		self.value = value
		self.detail = detail

		msg = f'Failed to decode {type_name}'
		if field is not None:
			msg += f' at {field!r}'
		if value is not None:
			msg += f' (value: {value!r})'
		if detail:
			msg += f': {detail}'
		super().__init__(msg)
