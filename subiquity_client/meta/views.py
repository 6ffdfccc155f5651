from enum import Enum

from pydantic import Field

from subiquity_client.codec import SubiquityModel


class Variant(str, Enum):
	"""Client variant announced to the backend via meta/client_variant"""

	SERVER = 'server'
	DESKTOP = 'desktop'
	WSL_SETUP = 'wsl_setup'
	WSL_CONFIGURATION = 'wsl_configuration'


class ApplicationState(str, Enum):
	STARTING_UP = 'STARTING_UP'
	CLOUD_INIT_WAIT = 'CLOUD_INIT_WAIT'
	CLOUD_INIT_FAIL = 'CLOUD_INIT_FAIL'
	EARLY_COMMANDS = 'EARLY_COMMANDS'
	WAITING = 'WAITING'
	NEEDS_CONFIRMATION = 'NEEDS_CONFIRMATION'
	RUNNING = 'RUNNING'
	LATE_COMMANDS = 'LATE_COMMANDS'
	UU_RUNNING = 'UU_RUNNING'
	UU_CANCELLING = 'UU_CANCELLING'
	DONE = 'DONE'
	ERROR = 'ERROR'
	EXITED = 'EXITED'


class ErrorReportState(str, Enum):
	INCOMPLETE = 'INCOMPLETE'
	LOADING = 'LOADING'
	DONE = 'DONE'
	ERROR_GENERATING = 'ERROR_GENERATING'
	ERROR_LOADING = 'ERROR_LOADING'


class ErrorReportKind(str, Enum):
	BLOCK_PROBE_FAIL = 'BLOCK_PROBE_FAIL'
	DISK_PROBE_FAIL = 'DISK_PROBE_FAIL'
	INSTALL_FAIL = 'INSTALL_FAIL'
	UI = 'UI'
	NETWORK_FAIL = 'NETWORK_FAIL'
	SERVER_REQUEST_FAIL = 'SERVER_REQUEST_FAIL'
	NETWORK_CLIENT_FAIL = 'NETWORK_CLIENT_FAIL'
	UNKNOWN = 'UNKNOWN'


class ErrorReportRef(SubiquityModel):
	"""Reference to a crash report generated by the backend"""

	state: ErrorReportState
	base: str
	kind: ErrorReportKind
	seen: bool
	oops_id: str | None = None


class ApplicationStatus(SubiquityModel):
	state: ApplicationState
	confirming_tty: str = ''
	error: ErrorReportRef | None = None
	cloud_init_ok: bool | None = None
	interactive: bool | None = None
	echo_syslog_id: str = ''
	log_syslog_id: str = ''
	event_syslog_id: str = ''


class SourceSelection(SubiquityModel):
	name: str
	description: str
	id: str
	size: int
	variant: str
	default: bool


class SourceSelectionAndSetting(SubiquityModel):
	sources: list[SourceSelection] = Field(default_factory=list)
	current_id: str
	search_drivers: bool = False
