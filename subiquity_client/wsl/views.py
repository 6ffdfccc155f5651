from subiquity_client.codec import SubiquityModel


class WSLSetupOptions(SubiquityModel):
	install_language_support_packages: bool = True


class WSLConfigurationBase(SubiquityModel):
	automount_root: str = '/mnt/'
	automount_options: str = ''
	network_generatehosts: bool = True
	network_generateresolvconf: bool = True


class WSLConfigurationAdvanced(SubiquityModel):
	automount_enabled: bool = True
	automount_mountfstab: bool = True
	interop_enabled: bool = True
	interop_appendwindowspath: bool = True
	systemd_enabled: bool = False
