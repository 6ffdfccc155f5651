from enum import Enum

from pydantic import Field

from subiquity_client.codec import SubiquityModel


class IdentityData(SubiquityModel):
	"""User account created on the target system.

	crypted_password is treated as a secret in logs.
	"""

	realname: str = ''
	username: str = ''
	crypted_password: str = ''
	hostname: str = ''


class UsernameValidation(str, Enum):
	OK = 'OK'
	ALREADY_IN_USE = 'ALREADY_IN_USE'
	SYSTEM_RESERVED = 'SYSTEM_RESERVED'
	INVALID_CHARS = 'INVALID_CHARS'
	TOO_LONG = 'TOO_LONG'


class SSHData(SubiquityModel):
	install_server: bool
	allow_pw: bool
	authorized_keys: list[str] = Field(default_factory=list)
