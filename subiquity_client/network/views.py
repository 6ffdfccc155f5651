from enum import Enum

from pydantic import Field

from subiquity_client.codec import SubiquityModel


class PackageInstallState(str, Enum):
	NOT_NEEDED = 'NOT_NEEDED'
	NOT_AVAILABLE = 'NOT_AVAILABLE'
	INSTALLING = 'INSTALLING'
	FAILED = 'FAILED'
	DONE = 'DONE'


class DHCPStatus(SubiquityModel):
	enabled: bool
	state: str | None = None
	addresses: list[str] = Field(default_factory=list)


class StaticConfig(SubiquityModel):
	addresses: list[str] = Field(default_factory=list)
	gateway: str | None = None
	nameservers: list[str] = Field(default_factory=list)
	searchdomains: list[str] = Field(default_factory=list)


class NetDevInfo(SubiquityModel):
	"""A network device known to the backend.

	Wireless and bond details are not modelled and are dropped on decode.
	"""

	name: str
	type: str
	is_connected: bool
	is_used: bool
	disabled_reason: str | None = None
	hwaddr: str | None = None
	vendor: str | None = None
	model: str | None = None
	is_virtual: bool = False
	has_config: bool = False
	dhcp4: DHCPStatus
	dhcp6: DHCPStatus
	static4: StaticConfig = Field(default_factory=StaticConfig)
	static6: StaticConfig = Field(default_factory=StaticConfig)


class NetworkStatus(SubiquityModel):
	devices: list[NetDevInfo] = Field(default_factory=list)
	wlan_support_install_state: PackageInstallState = PackageInstallState.NOT_NEEDED
