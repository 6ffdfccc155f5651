"""Environment driven settings for subiquity_client.

Values are read from the environment on every access so tests and long-running
frontends can change them without reloading the module. Nothing in the client
reads these implicitly: callers opt in through Endpoint.from_config() and
setup_logging().
"""

import os

DEFAULT_SOCKET_PATH = '/run/subiquity/socket'


class Config:
	"""Lazily evaluated settings backed by environment variables."""

	@property
	def SUBIQUITY_CLIENT_SOCKET(self) -> str:
		return os.getenv('SUBIQUITY_CLIENT_SOCKET', '').strip() or DEFAULT_SOCKET_PATH

	@property
	def SUBIQUITY_CLIENT_PORT(self) -> int | None:
		value = os.getenv('SUBIQUITY_CLIENT_PORT', '').strip()
		if not value:
			return None
		try:
			return int(value)
		except ValueError:
			raise ValueError(f'SUBIQUITY_CLIENT_PORT must be an integer, got {value!r}')

	@property
	def SUBIQUITY_CLIENT_LOG_LEVEL(self) -> str:
		return os.getenv('SUBIQUITY_CLIENT_LOG_LEVEL', 'info').strip().lower() or 'info'


CONFIG = Config()
