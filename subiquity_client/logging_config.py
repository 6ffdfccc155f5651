import logging
import sys
from typing import TextIO

from subiquity_client.config import CONFIG

LOG_FORMAT = '%(levelname)-8s [%(name)s] %(message)s'

# Chatty third-party loggers that would otherwise drown out request traces
_THIRD_PARTY_LOGGERS = ('httpx', 'httpcore')


def setup_logging(stream: TextIO | None = None, log_level: str | None = None, force_setup: bool = False) -> logging.Logger:
	"""Attach a stream handler to the subiquity_client logger.

	The library never calls this itself; frontends that do not configure
	logging on their own can use it to get readable request traces.

	Args:
		stream: Output stream, defaults to stderr
		log_level: Level name (debug, info, warning, ...), defaults to SUBIQUITY_CLIENT_LOG_LEVEL
		force_setup: Replace an existing handler instead of returning early

	Returns:
		The configured subiquity_client logger
	"""
	logger = logging.getLogger('subiquity_client')

	if logger.handlers and not force_setup:
		return logger

	for handler in list(logger.handlers):
		logger.removeHandler(handler)

	level_name = (log_level or CONFIG.SUBIQUITY_CLIENT_LOG_LEVEL).upper()
	level = logging.getLevelName(level_name)
	if not isinstance(level, int):
		raise ValueError(f'Unknown log level: {level_name!r}')

	handler = logging.StreamHandler(stream or sys.stderr)
	handler.setFormatter(logging.Formatter(LOG_FORMAT))
	logger.addHandler(handler)
	logger.setLevel(level)
	logger.propagate = False

	for name in _THIRD_PARTY_LOGGERS:
		logging.getLogger(name).setLevel(logging.WARNING)

	return logger
