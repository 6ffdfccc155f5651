from dataclasses import dataclass

from subiquity_client.config import CONFIG


@dataclass(frozen=True)
class Endpoint:
	"""Where the installer backend listens.

	A port of 0 means address is the path of a Unix domain socket.
	"""

	address: str
	port: int = 0

	@classmethod
	def unix(cls, path: str) -> 'Endpoint':
		return cls(address=path, port=0)

	@classmethod
	def localhost(cls, port: int) -> 'Endpoint':
		return cls(address='localhost', port=port)

	@classmethod
	def from_config(cls) -> 'Endpoint':
		"""Build the endpoint from SUBIQUITY_CLIENT_PORT or SUBIQUITY_CLIENT_SOCKET"""
		port = CONFIG.SUBIQUITY_CLIENT_PORT
		if port is not None:
			return cls.localhost(port)
		return cls.unix(CONFIG.SUBIQUITY_CLIENT_SOCKET)

	@property
	def is_unix(self) -> bool:
		return self.port == 0

	@property
	def authority(self) -> str:
		# Requests over a Unix socket still need a host for the URL and Host header
		if self.is_unix:
			return 'localhost'
		if ':' in self.address and not self.address.startswith('['):
			# IPv6 literal
			return f'[{self.address}]:{self.port}'
		return f'{self.address}:{self.port}'

	def __str__(self) -> str:
		if self.is_unix:
			return f'unix:{self.address}'
		return f'{self.address}:{self.port}'
