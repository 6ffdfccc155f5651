"""End-to-end tests for SubiquityClient operations."""

import json
import logging

import httpx
import pytest
from pytest_httpserver import HTTPServer

from subiquity_client.active_directory.views import ADConnectionInfo, AdDomainNameValidation, AdJoinResult
from subiquity_client.client.service import SubiquityClient
from subiquity_client.exceptions import SubiquityDecodeError, SubiquityException
from subiquity_client.identity.views import IdentityData, SSHData, UsernameValidation
from subiquity_client.keyboard.views import KeyboardSetting, StepPressKey
from subiquity_client.meta.views import ApplicationState, Variant
from subiquity_client.mirror.views import MirrorCheckStatus, MirrorPost, MirrorPostResponse
from subiquity_client.refresh.views import RefreshCheckState, TaskStatus
from subiquity_client.storage.views import (
	Gap,
	GuidedCapability,
	GuidedChoiceV2,
	GuidedStorageTargetManual,
	Partition,
	ProbeStatus,
	StorageResponseV2,
)
from subiquity_client.transport.views import Endpoint
from subiquity_client.wsl.views import WSLConfigurationAdvanced, WSLConfigurationBase, WSLSetupOptions

from .conftest import FakeBackend, storage_response


@pytest.fixture
async def http_client(httpserver: HTTPServer):
	client = SubiquityClient()
	client.open(Endpoint.localhost(httpserver.port))
	yield client
	await client.close()


class TestAgainstHTTPServer:
	@pytest.mark.asyncio
	async def test_add_partition(self, http_client: SubiquityClient, httpserver: HTTPServer):
		gap = Gap(offset=0, size=1000)
		partition = Partition(size=500)
		expected_body = {'disk_id': 'disk0', 'gap': gap.to_json(), 'partition': partition.to_json()}
		httpserver.expect_request('/storage/v2/add_partition', method='POST', json=expected_body).respond_with_json(
			storage_response(
				{'$type': 'Partition', 'number': 1, 'size': 500, 'offset': 0},
				{'$type': 'Gap', 'offset': 500, 'size': 500, 'usable': 'YES'},
			)
		)

		response = await http_client.add_partition_v2('disk0', gap, partition)

		assert isinstance(response, StorageResponseV2)
		assert response.status is ProbeStatus.DONE
		disk = response.disk('disk0')
		assert disk is not None
		assert isinstance(disk.partitions[0], Partition)
		assert disk.gaps == [Gap(offset=500, size=500)]
		assert expected_body['gap']['$type'] == 'Gap'
		assert expected_body['partition']['$type'] == 'Partition'
		httpserver.check_assertions()

	@pytest.mark.asyncio
	async def test_wait_query(self, http_client: SubiquityClient, httpserver: HTTPServer):
		httpserver.expect_request('/storage/v2', method='GET', query_string='wait=true').respond_with_json(storage_response())
		httpserver.expect_request('/storage/v2', method='GET', query_string='wait=false').respond_with_json(storage_response())

		await http_client.get_storage_v2()
		await http_client.get_storage_v2(wait=False)

		httpserver.check_assertions()

	@pytest.mark.asyncio
	async def test_error_body_is_raw_text(self, http_client: SubiquityClient, httpserver: HTTPServer):
		httpserver.expect_request('/locale').respond_with_data('<h1>Internal Server Error</h1>', status=500)

		with pytest.raises(SubiquityException) as exc_info:
			await http_client.locale()

		assert exc_info.value.status_code == 500
		assert exc_info.value.message == '<h1>Internal Server Error</h1>'


class TestMeta:
	@pytest.mark.asyncio
	async def test_variant(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('GET', 'meta/client_variant', 'desktop')
		backend.respond('POST', 'meta/client_variant', None)

		assert await client.variant() is Variant.DESKTOP
		await client.set_variant(Variant.WSL_SETUP)
		assert backend.last.url.params['variant'] == '"wsl_setup"'

	@pytest.mark.asyncio
	async def test_status_logs_transition(self, client: SubiquityClient, backend: FakeBackend, caplog):
		caplog.set_level(logging.INFO, logger='subiquity_client')
		backend.respond('GET', 'meta/status', {'state': 'RUNNING', 'confirming_tty': '', 'interactive': True})

		status = await client.status(ApplicationState.WAITING)

		assert status.state is ApplicationState.RUNNING
		assert backend.last.url.params['cur'] == '"WAITING"'
		assert 'state: WAITING => RUNNING' in caplog.messages

		await client.status()
		assert 'cur' not in backend.last.url.params
		assert 'state: None => RUNNING' in caplog.messages

	@pytest.mark.asyncio
	async def test_source(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond(
			'GET',
			'source',
			{
				'sources': [
					{
						'name': 'Ubuntu Server',
						'description': 'The default install',
						'id': 'ubuntu-server',
						'size': 1234,
						'variant': 'server',
						'default': True,
					}
				],
				'current_id': 'ubuntu-server',
				'search_drivers': False,
			},
		)
		backend.respond('POST', 'source', None)

		source = await client.source()
		assert source.sources[0].id == source.current_id

		await client.set_source('ubuntu-server-minimal', search_drivers=True)
		assert backend.last.url.params['source_id'] == '"ubuntu-server-minimal"'
		assert backend.last.url.params['search_drivers'] == 'true'

		await client.set_source('ubuntu-server')
		assert 'search_drivers' not in backend.last.url.params

	@pytest.mark.asyncio
	async def test_mark_configured(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('POST', 'meta/mark_configured', None)

		await client.mark_configured(['locale', 'keyboard'])

		assert json.loads(backend.last.url.params['endpoint_names']) == ['locale', 'keyboard']

	@pytest.mark.asyncio
	async def test_reboot_tolerates_dropped_connection(self, client: SubiquityClient, backend: FakeBackend):
		def handler(request: httpx.Request) -> httpx.Response:
			backend.requests.append(request)
			raise httpx.RemoteProtocolError('Server disconnected without sending a response.', request=request)

		await client.close()
		client.open(Endpoint.unix('/run/subiquity/socket'), httpx.MockTransport(handler))

		await client.reboot(immediate=True)

		assert backend.last.url.params['mode'] == '"REBOOT"'
		assert backend.last.url.params['immediate'] == 'true'

	@pytest.mark.asyncio
	async def test_shutdown_mode(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('POST', 'shutdown', None)

		await client.shutdown()

		assert backend.last.url.params['mode'] == '"POWEROFF"'
		assert backend.last.url.params['immediate'] == 'false'


class TestSimpleSettings:
	@pytest.mark.asyncio
	async def test_locale_body_is_json_string(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('POST', 'locale', None)
		backend.respond('GET', 'locale', 'fr_FR.UTF-8')

		await client.set_locale('fr_FR.UTF-8')
		assert backend.last.content == b'"fr_FR.UTF-8"'
		assert await client.locale() == 'fr_FR.UTF-8'

	@pytest.mark.asyncio
	async def test_keyboard(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond(
			'GET',
			'keyboard',
			{
				'setting': {'layout': 'us', 'variant': '', 'toggle': None},
				'layouts': [{'code': 'us', 'name': 'English (US)', 'variants': [{'code': 'intl', 'name': 'Intl'}]}],
			},
		)
		backend.respond('POST', 'keyboard/input_source', None)

		setup = await client.keyboard()
		assert setup.layouts[0].variants[0].code == 'intl'

		await client.set_input_source(KeyboardSetting(layout='de', variant='nodeadkeys'))
		assert backend.last_json() == {'layout': 'de', 'variant': 'nodeadkeys', 'toggle': None}

	@pytest.mark.asyncio
	async def test_keyboard_step(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('GET', 'keyboard/steps', {'$type': 'StepPressKey', 'symbols': ['z'], 'keycodes': {'44': '1'}})

		step = await client.get_keyboard_step()

		assert isinstance(step, StepPressKey)
		assert step.keycodes == {44: '1'}
		assert backend.last.url.params['index'] == '"0"'

	@pytest.mark.asyncio
	async def test_timezone(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('GET', 'timezone', {'timezone': 'Europe/Paris', 'from_geoip': True})
		backend.respond('POST', 'timezone', None)

		assert (await client.timezone()).from_geoip
		await client.set_timezone('geoip')
		assert backend.last.url.params['tz'] == '"geoip"'

	@pytest.mark.asyncio
	async def test_identity_and_ssh(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('GET', 'identity/validate_username', 'SYSTEM_RESERVED')
		backend.respond('POST', 'ssh', None)

		assert await client.validate_username('root') is UsernameValidation.SYSTEM_RESERVED
		assert backend.last.url.params['username'] == '"root"'

		await client.set_ssh(SSHData(install_server=True, allow_pw=False, authorized_keys=['ssh-ed25519 AAAA']))
		assert backend.last_json() == {'install_server': True, 'allow_pw': False, 'authorized_keys': ['ssh-ed25519 AAAA']}

	@pytest.mark.asyncio
	async def test_mirror(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('POST', 'mirror', 'NO_USABLE_MIRROR')
		backend.respond('GET', 'mirror/check_mirror/progress', None)

		result = await client.set_mirror(MirrorPost(elected='http://archive.ubuntu.com/ubuntu'))
		assert result is MirrorPostResponse.NO_USABLE_MIRROR
		assert backend.last_json()['elected'] == 'http://archive.ubuntu.com/ubuntu'

		assert await client.check_mirror_progress() is None

		backend.respond(
			'GET',
			'mirror/check_mirror/progress',
			{'url': 'http://archive.ubuntu.com/ubuntu', 'status': 'RUNNING', 'output': 'Get:1'},
		)
		progress = await client.check_mirror_progress()
		assert progress is not None and progress.status is MirrorCheckStatus.RUNNING

	@pytest.mark.asyncio
	async def test_drivers_and_codecs(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond(
			'GET',
			'drivers',
			{'install': False, 'drivers': ['nvidia-driver-535'], 'local_only': False, 'search_drivers': True},
		)
		backend.respond('POST', 'codecs', None)

		assert (await client.drivers()).drivers == ['nvidia-driver-535']
		await client.set_codecs(True)
		assert backend.last_json() == {'install': True}

	@pytest.mark.asyncio
	async def test_wsl(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('GET', 'wslconfbase', WSLConfigurationBase(automount_root='/win/').to_json())
		backend.respond('POST', 'wslconfadvanced', None)
		backend.respond('POST', 'wslsetupoptions', None)

		assert (await client.wsl_configuration_base()).automount_root == '/win/'
		await client.set_wsl_configuration_advanced(WSLConfigurationAdvanced(systemd_enabled=True))
		assert backend.last_json()['systemd_enabled'] is True
		await client.set_wsl_setup_options(WSLSetupOptions(install_language_support_packages=False))
		assert backend.last_json() == {'install_language_support_packages': False}


class TestStorage:
	@pytest.mark.asyncio
	async def test_bitlocker_and_rst(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('GET', 'storage/has_rst', False)
		backend.respond('GET', 'storage/has_bitlocker', [])

		assert await client.has_rst() is False
		assert await client.has_bitlocker() is False

		backend.respond('GET', 'storage/has_bitlocker', [storage_response()['disks'][0]])
		assert await client.has_bitlocker() is True

	@pytest.mark.asyncio
	async def test_guided_targets(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond(
			'GET',
			'storage/v2/guided',
			{
				'status': 'DONE',
				'error_report': None,
				'configured': None,
				'targets': [
					{'$type': 'GuidedStorageTargetReformat', 'disk_id': 'disk0', 'allowed': ['DIRECT', 'LVM'], 'disallowed': []},
					{'$type': 'GuidedStorageTargetManual', 'allowed': ['MANUAL'], 'disallowed': []},
				],
			},
		)
		backend.respond('POST', 'storage/v2/guided', {'status': 'DONE', 'configured': None, 'targets': []})

		response = await client.get_guided_storage_v2()
		assert backend.last.url.params['wait'] == 'true'
		assert [type(t).__name__ for t in response.targets] == ['GuidedStorageTargetReformat', 'GuidedStorageTargetManual']

		await client.set_guided_storage_v2(GuidedChoiceV2(target=response.targets[1], capability=GuidedCapability.MANUAL))
		body = backend.last_json()
		assert body['target']['$type'] == 'GuidedStorageTargetManual'
		assert body['password'] is None
		assert body['sizing_policy'] == 'SCALED'
		assert isinstance(response.targets[1], GuidedStorageTargetManual)

	@pytest.mark.asyncio
	async def test_mutations_return_snapshots(self, client: SubiquityClient, backend: FakeBackend):
		snapshot = storage_response({'$type': 'Partition', 'number': 1, 'size': 1000, 'format': 'ext4', 'mount': '/'})
		for path in ('edit_partition', 'delete_partition', 'add_boot_partition', 'reformat_disk', 'reset'):
			backend.respond('POST', f'storage/v2/{path}', snapshot)
		partition = Partition(number=1, size=1000, format='ext4', mount='/home')

		response = await client.edit_partition_v2('disk0', partition)
		assert backend.last_json() == {'disk_id': 'disk0', 'partition': partition.to_json()}
		assert response.disks[0].find_partition(1) is not None

		await client.delete_partition_v2('disk0', partition)
		assert backend.last.url.path == '/storage/v2/delete_partition'

		await client.add_boot_partition_v2('disk0')
		assert backend.last.url.params['disk_id'] == '"disk0"'
		assert backend.last.content == b''

		await client.reformat_disk_v2('disk0', ptable='msdos')
		assert backend.last_json() == {'disk_id': 'disk0', 'ptable': 'msdos'}

		await client.reset_storage_v2()
		assert backend.last.url.path == '/storage/v2/reset'

	@pytest.mark.asyncio
	async def test_unknown_disk_object_is_a_decode_error(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('GET', 'storage/v2/orig_config', storage_response({'$type': 'Hole', 'size': 1}))

		with pytest.raises(SubiquityDecodeError) as exc_info:
			await client.get_original_storage_v2()

		assert exc_info.value.value == 'Hole'


class TestRefresh:
	@pytest.mark.asyncio
	async def test_refresh_flow(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('GET', 'refresh', {'availability': 'AVAILABLE', 'current_snap_version': '23.04', 'new_snap_version': '23.10'})
		backend.respond('POST', 'refresh', '1234')
		backend.respond(
			'GET',
			'refresh/progress',
			{'id': '1234', 'kind': 'refresh-snap', 'summary': 'Refresh', 'status': 'Doing', 'tasks': [], 'ready': False},
		)

		status = await client.check_refresh(wait=False)
		assert status.availability is RefreshCheckState.AVAILABLE
		change_id = await client.start_refresh()
		change = await client.get_refresh_progress(change_id)

		assert backend.last.url.params['change_id'] == '"1234"'
		assert change.status is TaskStatus.DOING
		assert change.err is None


class TestNetworkAndDirectory:
	@pytest.mark.asyncio
	async def test_network(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('GET', 'network/has_network', True)
		backend.respond('GET', 'network/global_addresses', ['10.0.0.2', 'fe80::1'])

		assert await client.has_network() is True
		assert await client.global_addresses() == ['10.0.0.2', 'fe80::1']

	@pytest.mark.asyncio
	async def test_active_directory_checks(self, client: SubiquityClient, backend: FakeBackend):
		backend.respond('POST', 'active_directory/check_domain_name', ['START_DOT', 'MULTIPLE_DOTS'])
		backend.respond('GET', 'active_directory/join_result', 'EMPTY_HOSTNAME')

		result = await client.check_ad_domain_name('.example..com')
		assert result == [AdDomainNameValidation.START_DOT, AdDomainNameValidation.MULTIPLE_DOTS]
		assert backend.last_json() == '.example..com'

		assert await client.get_ad_join_result() is AdJoinResult.EMPTY_HOSTNAME
		assert backend.last.url.params['wait'] == 'true'


OPERATIONS = [
	('variant', lambda c: c.variant()),
	('set_variant', lambda c: c.set_variant(Variant.SERVER)),
	('source', lambda c: c.source()),
	('set_source', lambda c: c.set_source('ubuntu-server')),
	('free_only', lambda c: c.free_only()),
	('set_free_only', lambda c: c.set_free_only(True)),
	('status', lambda c: c.status()),
	('mark_configured', lambda c: c.mark_configured(['locale'])),
	('confirm', lambda c: c.confirm('/dev/tty1')),
	('reboot', lambda c: c.reboot()),
	('shutdown', lambda c: c.shutdown(immediate=True)),
	('locale', lambda c: c.locale()),
	('set_locale', lambda c: c.set_locale('C')),
	('proxy', lambda c: c.proxy()),
	('set_proxy', lambda c: c.set_proxy('')),
	('keyboard', lambda c: c.keyboard()),
	('set_keyboard', lambda c: c.set_keyboard(KeyboardSetting(layout='us'))),
	('set_input_source', lambda c: c.set_input_source(KeyboardSetting(layout='us'))),
	('get_keyboard_step', lambda c: c.get_keyboard_step('0')),
	('timezone', lambda c: c.timezone()),
	('set_timezone', lambda c: c.set_timezone('UTC')),
	('identity', lambda c: c.identity()),
	('set_identity', lambda c: c.set_identity(IdentityData(username='ubuntu'))),
	('validate_username', lambda c: c.validate_username('ubuntu')),
	('ssh', lambda c: c.ssh()),
	('set_ssh', lambda c: c.set_ssh(SSHData(install_server=False, allow_pw=True))),
	('mirror', lambda c: c.mirror()),
	('set_mirror', lambda c: c.set_mirror(None)),
	('check_mirror_start', lambda c: c.check_mirror_start()),
	('check_mirror_progress', lambda c: c.check_mirror_progress()),
	('check_mirror_abort', lambda c: c.check_mirror_abort()),
	('drivers', lambda c: c.drivers()),
	('set_drivers', lambda c: c.set_drivers(False)),
	('codecs', lambda c: c.codecs()),
	('set_codecs', lambda c: c.set_codecs(False)),
	('has_rst', lambda c: c.has_rst()),
	('has_bitlocker', lambda c: c.has_bitlocker()),
	('get_guided_storage_v2', lambda c: c.get_guided_storage_v2()),
	(
		'set_guided_storage_v2',
		lambda c: c.set_guided_storage_v2(GuidedChoiceV2(target=GuidedStorageTargetManual(), capability=GuidedCapability.MANUAL)),
	),
	('get_original_storage_v2', lambda c: c.get_original_storage_v2()),
	('get_storage_v2', lambda c: c.get_storage_v2()),
	('set_storage_v2', lambda c: c.set_storage_v2()),
	('reset_storage_v2', lambda c: c.reset_storage_v2()),
	('add_partition_v2', lambda c: c.add_partition_v2('disk0', Gap(offset=0, size=1000), Partition(size=500))),
	('edit_partition_v2', lambda c: c.edit_partition_v2('disk0', Partition(number=1))),
	('delete_partition_v2', lambda c: c.delete_partition_v2('disk0', Partition(number=1))),
	('add_boot_partition_v2', lambda c: c.add_boot_partition_v2('disk0')),
	('reformat_disk_v2', lambda c: c.reformat_disk_v2('disk0')),
	('check_refresh', lambda c: c.check_refresh()),
	('start_refresh', lambda c: c.start_refresh()),
	('get_refresh_progress', lambda c: c.get_refresh_progress('1')),
	('network', lambda c: c.network()),
	('set_network', lambda c: c.set_network()),
	('has_network', lambda c: c.has_network()),
	('global_addresses', lambda c: c.global_addresses()),
	('active_directory', lambda c: c.active_directory()),
	('set_active_directory', lambda c: c.set_active_directory(ADConnectionInfo(password='pw'))),
	('has_active_directory_support', lambda c: c.has_active_directory_support()),
	('check_ad_admin_name', lambda c: c.check_ad_admin_name('admin')),
	('check_ad_domain_name', lambda c: c.check_ad_domain_name('example.com')),
	('check_ad_password', lambda c: c.check_ad_password('pw')),
	('get_ad_join_result', lambda c: c.get_ad_join_result()),
	('ubuntu_pro', lambda c: c.ubuntu_pro()),
	('set_ubuntu_pro', lambda c: c.set_ubuntu_pro('token')),
	('skip_ubuntu_pro', lambda c: c.skip_ubuntu_pro()),
	('check_ubuntu_pro_token', lambda c: c.check_ubuntu_pro_token('token')),
	('initiate_pro_contract_selection', lambda c: c.initiate_pro_contract_selection()),
	('wait_pro_contract_selection', lambda c: c.wait_pro_contract_selection()),
	('cancel_pro_contract_selection', lambda c: c.cancel_pro_contract_selection()),
	('wsl_setup_options', lambda c: c.wsl_setup_options()),
	('set_wsl_setup_options', lambda c: c.set_wsl_setup_options(WSLSetupOptions())),
	('wsl_configuration_base', lambda c: c.wsl_configuration_base()),
	('set_wsl_configuration_base', lambda c: c.set_wsl_configuration_base(WSLConfigurationBase())),
	('wsl_configuration_advanced', lambda c: c.wsl_configuration_advanced()),
	('set_wsl_configuration_advanced', lambda c: c.set_wsl_configuration_advanced(WSLConfigurationAdvanced())),
]


@pytest.mark.asyncio
@pytest.mark.parametrize('name,operation', OPERATIONS, ids=[name for name, _ in OPERATIONS])
async def test_every_operation_raises_on_server_error(client: SubiquityClient, backend: FakeBackend, name, operation):
	backend.respond_all(500, 'boom')

	with pytest.raises(SubiquityException) as exc_info:
		await operation(client)

	assert exc_info.value.status_code == 500
	assert exc_info.value.message == 'boom'
	assert exc_info.value.method.startswith(f'{name}(')
	assert len(backend.requests) == 1


def test_every_public_operation_is_covered():
	public = {
		name
		for name in vars(SubiquityClient)
		if not name.startswith('_') and callable(getattr(SubiquityClient, name)) and name not in ('open', 'close')
	}

	assert public == {name for name, _ in OPERATIONS}
