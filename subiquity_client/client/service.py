"""Typed client for the installer backend API.

Usage:
	client = SubiquityClient()
	client.open(Endpoint.unix('/run/subiquity/socket'))
	try:
		storage = await client.get_storage_v2(wait=False)
		gap = storage.disks[0].gaps[0]
		storage = await client.add_partition_v2(storage.disks[0].id, gap, Partition(size=gap.size, format='ext4', mount='/'))
	finally:
		await client.close()

Every operation is a single request/response round trip. Non-200 responses
raise SubiquityException, malformed bodies raise SubiquityDecodeError and
connection failures propagate from httpx. Nothing is retried.
"""

import logging
from typing import Any

import httpx

from subiquity_client.active_directory.views import (
	AdAdminNameValidation,
	ADConnectionInfo,
	AdDomainNameValidation,
	AdJoinResult,
	AdPasswordValidation,
)
from subiquity_client.codec import decode
from subiquity_client.drivers.views import CodecsData, DriversResponse
from subiquity_client.identity.views import IdentityData, SSHData, UsernameValidation
from subiquity_client.keyboard.views import AnyStep, KeyboardSetting, KeyboardSetup
from subiquity_client.meta.views import ApplicationState, ApplicationStatus, SourceSelectionAndSetting, Variant
from subiquity_client.mirror.views import MirrorCheckResponse, MirrorGet, MirrorPost, MirrorPostResponse
from subiquity_client.network.views import NetworkStatus
from subiquity_client.redaction import (
	describe,
	hide_password,
	redact_check_token_answer,
	redact_connection_info,
	redact_guided_choice,
	redact_guided_response,
	redact_identity,
	redact_pro_info,
	redact_upcs_wait_response,
	redacted_response_formatter,
)
from subiquity_client.refresh.views import Change, RefreshStatus
from subiquity_client.storage.views import (
	AddPartitionV2,
	Gap,
	GuidedChoiceV2,
	GuidedStorageResponseV2,
	ModifyPartitionV2,
	Partition,
	ReformatDisk,
	StorageResponseV2,
)
from subiquity_client.timezone.views import TimeZoneInfo
from subiquity_client.transport.service import Transport
from subiquity_client.transport.views import Endpoint
from subiquity_client.ubuntu_pro.views import (
	UbuntuProCheckTokenAnswer,
	UbuntuProInfo,
	UPCSInitiateResponse,
	UPCSWaitResponse,
)
from subiquity_client.wsl.views import WSLConfigurationAdvanced, WSLConfigurationBase, WSLSetupOptions

logger = logging.getLogger(__name__)

_format_guided_response = redacted_response_formatter(GuidedStorageResponseV2, redact_guided_response)
_format_identity_response = redacted_response_formatter(IdentityData, redact_identity)
_format_connection_info_response = redacted_response_formatter(ADConnectionInfo, redact_connection_info)
_format_pro_info_response = redacted_response_formatter(UbuntuProInfo, redact_pro_info)
_format_check_token_response = redacted_response_formatter(UbuntuProCheckTokenAnswer, redact_check_token_answer)
_format_upcs_wait_response = redacted_response_formatter(UPCSWaitResponse, redact_upcs_wait_response)


class SubiquityClient:
	"""One typed coroutine per backend capability.

	Long-poll operations (``wait=True``) may be held open by the backend until
	its state changes; the client imposes no timeout of its own.
	"""

	def __init__(self, transport: Transport | None = None) -> None:
		self.transport = transport or Transport()

	def open(self, endpoint: Endpoint, transport: httpx.AsyncBaseTransport | None = None) -> None:
		self.transport.open(endpoint, transport)

	async def close(self) -> None:
		await self.transport.close()

	async def __aenter__(self) -> 'SubiquityClient':
		return self

	async def __aexit__(self, *exc_info: Any) -> None:
		await self.close()

	# Meta

	async def variant(self) -> Variant:
		return decode(Variant, await self.transport.call('variant()', 'GET', 'meta/client_variant'))

	async def set_variant(self, variant: Variant) -> None:
		await self.transport.call(describe('set_variant', variant), 'POST', 'meta/client_variant', {'variant': variant})

	async def source(self) -> SourceSelectionAndSetting:
		return SourceSelectionAndSetting.from_json(await self.transport.call('source()', 'GET', 'source'))

	async def set_source(self, source_id: str, search_drivers: bool | None = None) -> None:
		params: dict[str, Any] = {'source_id': source_id}
		if search_drivers is not None:
			params['search_drivers'] = search_drivers
		await self.transport.call(describe('set_source', source_id), 'POST', 'source', params)

	async def free_only(self) -> bool:
		return decode(bool, await self.transport.call('free_only()', 'GET', 'meta/free_only'))

	async def set_free_only(self, enable: bool) -> None:
		await self.transport.call(describe('set_free_only', enable), 'POST', 'meta/free_only', {'enable': enable})

	async def status(self, current: ApplicationState | None = None) -> ApplicationStatus:
		"""Get the installer state.

		With current set, the backend holds the response until its state differs from current.
		"""
		if current is not None:
			data = await self.transport.call(describe('status', current), 'GET', 'meta/status', {'cur': current})
		else:
			data = await self.transport.call('status()', 'GET', 'meta/status')

		result = ApplicationStatus.from_json(data)
		logger.info(f'state: {current.name if current else None} => {result.state.name}')
		return result

	async def mark_configured(self, endpoint_names: list[str]) -> None:
		"""Mark the controllers for endpoint_names as configured."""
		await self.transport.call(
			describe('mark_configured', endpoint_names),
			'POST',
			'meta/mark_configured',
			{'endpoint_names': endpoint_names},
		)

	async def confirm(self, tty: str) -> None:
		"""Confirm that the installation should proceed."""
		await self.transport.call(describe('confirm', tty), 'POST', 'meta/confirm', {'tty': tty})

	async def reboot(self, immediate: bool = False) -> None:
		await self._shutdown(describe('reboot', immediate), 'REBOOT', immediate)

	async def shutdown(self, immediate: bool = False) -> None:
		await self._shutdown(describe('shutdown', immediate), 'POWEROFF', immediate)

	async def _shutdown(self, method: str, mode: str, immediate: bool) -> None:
		try:
			await self.transport.call(method, 'POST', 'shutdown', {'mode': mode, 'immediate': immediate})
		except (httpx.RemoteProtocolError, httpx.ReadError) as e:
			# The backend may go away before answering
			logger.debug(f'Connection dropped during {method}: {e}')

	# Locale, proxy, keyboard, timezone

	async def locale(self) -> str:
		return decode(str, await self.transport.call('locale()', 'GET', 'locale'))

	async def set_locale(self, locale: str) -> None:
		await self.transport.call(describe('set_locale', locale), 'POST', 'locale', body=locale)

	async def proxy(self) -> str:
		return decode(str, await self.transport.call('proxy()', 'GET', 'proxy'))

	async def set_proxy(self, proxy: str) -> None:
		await self.transport.call(describe('set_proxy', proxy), 'POST', 'proxy', body=proxy)

	async def keyboard(self) -> KeyboardSetup:
		return KeyboardSetup.from_json(await self.transport.call('keyboard()', 'GET', 'keyboard'))

	async def set_keyboard(self, setting: KeyboardSetting) -> None:
		await self.transport.call(describe('set_keyboard', setting), 'POST', 'keyboard', body=setting)

	async def set_input_source(self, setting: KeyboardSetting) -> None:
		await self.transport.call(describe('set_input_source', setting), 'POST', 'keyboard/input_source', body=setting)

	async def get_keyboard_step(self, index: str = '0') -> AnyStep:
		"""Fetch one step of the keyboard detection wizard; see KeyboardStepper."""
		data = await self.transport.call(describe('get_keyboard_step', index), 'GET', 'keyboard/steps', {'index': index})
		return decode(AnyStep, data)

	async def timezone(self) -> TimeZoneInfo:
		return TimeZoneInfo.from_json(await self.transport.call('timezone()', 'GET', 'timezone'))

	async def set_timezone(self, timezone: str) -> None:
		await self.transport.call(describe('set_timezone', timezone), 'POST', 'timezone', {'tz': timezone})

	# Identity and SSH

	async def identity(self) -> IdentityData:
		data = await self.transport.call('identity()', 'GET', 'identity', format_log=_format_identity_response)
		return IdentityData.from_json(data)

	async def set_identity(self, identity: IdentityData) -> None:
		await self.transport.call(
			describe('set_identity', redact_identity(identity)),
			'POST',
			'identity',
			body=identity,
		)

	async def validate_username(self, username: str) -> UsernameValidation:
		data = await self.transport.call(
			describe('validate_username', username),
			'GET',
			'identity/validate_username',
			{'username': username},
		)
		return decode(UsernameValidation, data)

	async def ssh(self) -> SSHData:
		return SSHData.from_json(await self.transport.call('ssh()', 'GET', 'ssh'))

	async def set_ssh(self, data: SSHData) -> None:
		await self.transport.call(describe('set_ssh', data), 'POST', 'ssh', body=data)

	# Mirror

	async def mirror(self) -> MirrorGet:
		return MirrorGet.from_json(await self.transport.call('mirror()', 'GET', 'mirror'))

	async def set_mirror(self, mirror: MirrorPost | None) -> MirrorPostResponse:
		data = await self.transport.call(describe('set_mirror', mirror), 'POST', 'mirror', body=mirror)
		return decode(MirrorPostResponse, data)

	async def check_mirror_start(self, cancel_ongoing: bool = False) -> None:
		await self.transport.call(
			describe('check_mirror_start', cancel_ongoing),
			'POST',
			'mirror/check_mirror/start',
			{'cancel_ongoing': cancel_ongoing},
		)

	async def check_mirror_progress(self) -> MirrorCheckResponse | None:
		data = await self.transport.call('check_mirror_progress()', 'GET', 'mirror/check_mirror/progress')
		return decode(MirrorCheckResponse | None, data)

	async def check_mirror_abort(self) -> None:
		await self.transport.call('check_mirror_abort()', 'POST', 'mirror/check_mirror/abort')

	# Drivers and codecs

	async def drivers(self) -> DriversResponse:
		return DriversResponse.from_json(await self.transport.call('drivers()', 'GET', 'drivers'))

	async def set_drivers(self, install: bool) -> None:
		await self.transport.call(describe('set_drivers', install), 'POST', 'drivers', body={'install': install})

	async def codecs(self) -> CodecsData:
		return CodecsData.from_json(await self.transport.call('codecs()', 'GET', 'codecs'))

	async def set_codecs(self, install: bool) -> None:
		await self.transport.call(describe('set_codecs', install), 'POST', 'codecs', body={'install': install})

	# Storage

	async def has_rst(self) -> bool:
		"""Returns whether RST is turned on."""
		return decode(bool, await self.transport.call('has_rst()', 'GET', 'storage/has_rst'))

	async def has_bitlocker(self) -> bool:
		"""Returns whether any disks contain BitLocker partitions."""
		disks = decode(list[Any], await self.transport.call('has_bitlocker()', 'GET', 'storage/has_bitlocker'))
		return len(disks) > 0

	async def get_guided_storage_v2(self, wait: bool = True) -> GuidedStorageResponseV2:
		data = await self.transport.call(
			describe('get_guided_storage_v2', wait),
			'GET',
			'storage/v2/guided',
			{'wait': wait},
			format_log=_format_guided_response,
		)
		return GuidedStorageResponseV2.from_json(data)

	async def set_guided_storage_v2(self, choice: GuidedChoiceV2) -> GuidedStorageResponseV2:
		data = await self.transport.call(
			describe('set_guided_storage_v2', redact_guided_choice(choice)),
			'POST',
			'storage/v2/guided',
			body=choice,
			format_log=_format_guided_response,
		)
		return GuidedStorageResponseV2.from_json(data)

	async def get_original_storage_v2(self) -> StorageResponseV2:
		data = await self.transport.call('get_original_storage_v2()', 'GET', 'storage/v2/orig_config')
		return StorageResponseV2.from_json(data)

	async def get_storage_v2(self, wait: bool = True) -> StorageResponseV2:
		data = await self.transport.call(describe('get_storage_v2', wait), 'GET', 'storage/v2', {'wait': wait})
		return StorageResponseV2.from_json(data)

	async def set_storage_v2(self) -> StorageResponseV2:
		return StorageResponseV2.from_json(await self.transport.call('set_storage_v2()', 'POST', 'storage/v2'))

	async def reset_storage_v2(self) -> StorageResponseV2:
		return StorageResponseV2.from_json(await self.transport.call('reset_storage_v2()', 'POST', 'storage/v2/reset'))

	async def add_partition_v2(self, disk_id: str, gap: Gap, partition: Partition) -> StorageResponseV2:
		"""Create partition in gap on disk_id; returns the whole updated snapshot."""
		data = await self.transport.call(
			describe('add_partition_v2', disk_id, partition),
			'POST',
			'storage/v2/add_partition',
			body=AddPartitionV2(disk_id=disk_id, gap=gap, partition=partition),
		)
		return StorageResponseV2.from_json(data)

	async def edit_partition_v2(self, disk_id: str, partition: Partition) -> StorageResponseV2:
		data = await self.transport.call(
			describe('edit_partition_v2', disk_id, partition),
			'POST',
			'storage/v2/edit_partition',
			body=ModifyPartitionV2(disk_id=disk_id, partition=partition),
		)
		return StorageResponseV2.from_json(data)

	async def delete_partition_v2(self, disk_id: str, partition: Partition) -> StorageResponseV2:
		data = await self.transport.call(
			describe('delete_partition_v2', disk_id, partition),
			'POST',
			'storage/v2/delete_partition',
			body=ModifyPartitionV2(disk_id=disk_id, partition=partition),
		)
		return StorageResponseV2.from_json(data)

	async def add_boot_partition_v2(self, disk_id: str) -> StorageResponseV2:
		data = await self.transport.call(
			describe('add_boot_partition_v2', disk_id),
			'POST',
			'storage/v2/add_boot_partition',
			{'disk_id': disk_id},
		)
		return StorageResponseV2.from_json(data)

	async def reformat_disk_v2(self, disk_id: str, ptable: str | None = None) -> StorageResponseV2:
		data = await self.transport.call(
			describe('reformat_disk_v2', disk_id),
			'POST',
			'storage/v2/reformat_disk',
			body=ReformatDisk(disk_id=disk_id, ptable=ptable),
		)
		return StorageResponseV2.from_json(data)

	# Snap refresh

	async def check_refresh(self, wait: bool = True) -> RefreshStatus:
		data = await self.transport.call(describe('check_refresh', wait), 'GET', 'refresh', {'wait': wait})
		return RefreshStatus.from_json(data)

	async def start_refresh(self) -> str:
		"""Start refreshing the installer snap; returns the snapd change id."""
		return decode(str, await self.transport.call('start_refresh()', 'POST', 'refresh'))

	async def get_refresh_progress(self, change_id: str) -> Change:
		data = await self.transport.call(
			describe('get_refresh_progress', change_id),
			'GET',
			'refresh/progress',
			{'change_id': change_id},
		)
		return Change.from_json(data)

	# Network

	async def network(self) -> NetworkStatus:
		return NetworkStatus.from_json(await self.transport.call('network()', 'GET', 'network'))

	async def set_network(self) -> None:
		await self.transport.call('set_network()', 'POST', 'network')

	async def has_network(self) -> bool:
		return decode(bool, await self.transport.call('has_network()', 'GET', 'network/has_network'))

	async def global_addresses(self) -> list[str]:
		return decode(list[str], await self.transport.call('global_addresses()', 'GET', 'network/global_addresses'))

	# Active Directory

	async def active_directory(self) -> ADConnectionInfo:
		data = await self.transport.call(
			'active_directory()',
			'GET',
			'active_directory',
			format_log=_format_connection_info_response,
		)
		return ADConnectionInfo.from_json(data)

	async def set_active_directory(self, info: ADConnectionInfo) -> None:
		await self.transport.call(
			describe('set_active_directory', redact_connection_info(info)),
			'POST',
			'active_directory',
			body=info,
		)

	async def has_active_directory_support(self) -> bool:
		data = await self.transport.call('has_active_directory_support()', 'GET', 'active_directory/has_support')
		return decode(bool, data)

	async def check_ad_admin_name(self, admin_name: str) -> AdAdminNameValidation:
		data = await self.transport.call(
			describe('check_ad_admin_name', admin_name),
			'POST',
			'active_directory/check_admin_name',
			body=admin_name,
		)
		return decode(AdAdminNameValidation, data)

	async def check_ad_domain_name(self, domain_name: str) -> list[AdDomainNameValidation]:
		data = await self.transport.call(
			describe('check_ad_domain_name', domain_name),
			'POST',
			'active_directory/check_domain_name',
			body=domain_name,
		)
		return decode(list[AdDomainNameValidation], data)

	async def check_ad_password(self, password: str) -> AdPasswordValidation:
		data = await self.transport.call(
			describe('check_ad_password', hide_password(password)),
			'POST',
			'active_directory/check_password',
			body=password,
		)
		return decode(AdPasswordValidation, data)

	async def get_ad_join_result(self, wait: bool = True) -> AdJoinResult:
		data = await self.transport.call(
			describe('get_ad_join_result', wait),
			'GET',
			'active_directory/join_result',
			{'wait': wait},
		)
		return decode(AdJoinResult, data)

	# Ubuntu Pro

	async def ubuntu_pro(self) -> UbuntuProInfo:
		data = await self.transport.call('ubuntu_pro()', 'GET', 'ubuntu_pro', format_log=_format_pro_info_response)
		return UbuntuProInfo.from_json(data)

	async def set_ubuntu_pro(self, token: str) -> None:
		info = UbuntuProInfo(token=token)
		await self.transport.call(describe('set_ubuntu_pro', redact_pro_info(info)), 'POST', 'ubuntu_pro', body=info)

	async def skip_ubuntu_pro(self) -> None:
		await self.transport.call('skip_ubuntu_pro()', 'POST', 'ubuntu_pro/skip')

	async def check_ubuntu_pro_token(self, token: str) -> UbuntuProCheckTokenAnswer:
		data = await self.transport.call(
			describe('check_ubuntu_pro_token', hide_password(token)),
			'GET',
			'ubuntu_pro/check_token',
			{'token': token},
			secret_params=('token',),
			format_log=_format_check_token_response,
		)
		return UbuntuProCheckTokenAnswer.from_json(data)

	async def initiate_pro_contract_selection(self) -> UPCSInitiateResponse:
		data = await self.transport.call(
			'initiate_pro_contract_selection()',
			'POST',
			'ubuntu_pro/contract_selection/initiate',
		)
		return UPCSInitiateResponse.from_json(data)

	async def wait_pro_contract_selection(self) -> UPCSWaitResponse:
		"""Long-poll until the user attaches a token or the magic-attach code expires."""
		data = await self.transport.call(
			'wait_pro_contract_selection()',
			'GET',
			'ubuntu_pro/contract_selection/wait',
			format_log=_format_upcs_wait_response,
		)
		return UPCSWaitResponse.from_json(data)

	async def cancel_pro_contract_selection(self) -> None:
		await self.transport.call('cancel_pro_contract_selection()', 'POST', 'ubuntu_pro/contract_selection/cancel')

	# WSL

	async def wsl_setup_options(self) -> WSLSetupOptions:
		return WSLSetupOptions.from_json(await self.transport.call('wsl_setup_options()', 'GET', 'wslsetupoptions'))

	async def set_wsl_setup_options(self, options: WSLSetupOptions) -> None:
		await self.transport.call(describe('set_wsl_setup_options', options), 'POST', 'wslsetupoptions', body=options)

	async def wsl_configuration_base(self) -> WSLConfigurationBase:
		return WSLConfigurationBase.from_json(await self.transport.call('wsl_configuration_base()', 'GET', 'wslconfbase'))

	async def set_wsl_configuration_base(self, conf: WSLConfigurationBase) -> None:
		await self.transport.call(describe('set_wsl_configuration_base', conf), 'POST', 'wslconfbase', body=conf)

	async def wsl_configuration_advanced(self) -> WSLConfigurationAdvanced:
		data = await self.transport.call('wsl_configuration_advanced()', 'GET', 'wslconfadvanced')
		return WSLConfigurationAdvanced.from_json(data)

	async def set_wsl_configuration_advanced(self, conf: WSLConfigurationAdvanced) -> None:
		await self.transport.call(describe('set_wsl_configuration_advanced', conf), 'POST', 'wslconfadvanced', body=conf)
