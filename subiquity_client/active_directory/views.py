from enum import Enum

from subiquity_client.codec import SubiquityModel


class ADConnectionInfo(SubiquityModel):
	"""Active Directory join parameters. password is a secret."""

	admin_name: str = ''
	domain_name: str = ''
	password: str = ''


# The backend serializes these enums by member name


class AdAdminNameValidation(str, Enum):
	OK = 'OK'
	EMPTY = 'EMPTY'
	INVALID_CHARS = 'INVALID_CHARS'


class AdDomainNameValidation(str, Enum):
	OK = 'OK'
	EMPTY = 'EMPTY'
	TOO_LONG = 'TOO_LONG'
	INVALID_CHARS = 'INVALID_CHARS'
	START_DOT = 'START_DOT'
	END_DOT = 'END_DOT'
	START_HYPHEN = 'START_HYPHEN'
	END_HYPHEN = 'END_HYPHEN'
	MULTIPLE_DOTS = 'MULTIPLE_DOTS'
	REALM_NOT_FOUND = 'REALM_NOT_FOUND'


class AdPasswordValidation(str, Enum):
	OK = 'OK'
	EMPTY = 'EMPTY'


class AdJoinResult(str, Enum):
	OK = 'OK'
	JOIN_ERROR = 'JOIN_ERROR'
	EMPTY_HOSTNAME = 'EMPTY_HOSTNAME'
	PAM_ERROR = 'PAM_ERROR'
	UNKNOWN = 'UNKNOWN'
