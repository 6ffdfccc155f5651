"""Storage payloads for the storage/v2 endpoints.

Two families are polymorphic and carry a ``$type`` discriminator:

	DiskObject            Partition | Gap
	GuidedStorageTarget   GuidedStorageTargetReformat | GuidedStorageTargetResize
	                      | GuidedStorageTargetUseGap | GuidedStorageTargetManual

All sizes and offsets are integers in bytes.
"""

from enum import Enum
from typing import Literal

from pydantic import Field

from subiquity_client.codec import SubiquityModel, discriminated_union
from subiquity_client.meta.views import ErrorReportRef


class GapUsable(str, Enum):
	YES = 'YES'
	TOO_MANY_PRIMARY_PARTS = 'TOO_MANY_PRIMARY_PARTS'


class ProbeStatus(str, Enum):
	PROBING = 'PROBING'
	FAILED = 'FAILED'
	DONE = 'DONE'


class OsProber(SubiquityModel):
	"""Operating system detected on a partition by os-prober"""

	long: str
	label: str
	type: str
	subpath: str | None = None
	version: str | None = None


class Partition(SubiquityModel):
	"""A partition on a disk, as reported by or sent to the backend.

	Every field except the discriminator is optional so that a partially
	specified partition (e.g. only a size) can be sent to add_partition.
	"""

	type: Literal['Partition'] = Field(default='Partition', alias='$type')
	size: int | None = None
	number: int | None = None
	preserve: bool | None = None
	wipe: str | None = None
	annotations: list[str] = Field(default_factory=list)
	mount: str | None = None
	format: str | None = None
	grub_device: bool | None = None
	boot: bool | None = None
	os: OsProber | None = None
	offset: int | None = None
	estimated_min_size: int | None = None
	resize: bool | None = None
	path: str | None = None
	is_in_use: bool = False


class Gap(SubiquityModel):
	"""Unallocated space on a disk"""

	type: Literal['Gap'] = Field(default='Gap', alias='$type')
	offset: int
	size: int
	usable: GapUsable = GapUsable.YES


DiskObject = discriminated_union('DiskObject', Partition, Gap)


class Disk(SubiquityModel):
	id: str
	label: str
	type: str
	size: int
	usage_labels: list[str] = Field(default_factory=list)
	partitions: list[DiskObject] = Field(default_factory=list)
	ok_for_guided: bool = False
	ptable: str | None = None
	preserve: bool = False
	path: str | None = None
	boot_device: bool = False
	can_be_boot_device: bool = False
	model: str | None = None
	vendor: str | None = None
	has_in_use_partition: bool = False

	@property
	def gaps(self) -> list[Gap]:
		return [obj for obj in self.partitions if isinstance(obj, Gap)]

	def find_partition(self, number: int) -> Partition | None:
		for obj in self.partitions:
			if isinstance(obj, Partition) and obj.number == number:
				return obj
		return None


class StorageResponseV2(SubiquityModel):
	"""Full storage snapshot; supersedes any previously received snapshot"""

	status: ProbeStatus
	error_report: ErrorReportRef | None = None
	disks: list[Disk] = Field(default_factory=list)
	need_root: bool = False
	need_boot: bool = False
	install_minimum_size: int | None = None

	def disk(self, disk_id: str) -> Disk | None:
		for disk in self.disks:
			if disk.id == disk_id:
				return disk
		return None


# Guided storage


class GuidedCapability(str, Enum):
	MANUAL = 'MANUAL'
	DIRECT = 'DIRECT'
	LVM = 'LVM'
	LVM_LUKS = 'LVM_LUKS'
	ZFS = 'ZFS'
	CORE_BOOT_ENCRYPTED = 'CORE_BOOT_ENCRYPTED'
	CORE_BOOT_UNENCRYPTED = 'CORE_BOOT_UNENCRYPTED'
	CORE_BOOT_PREFER_ENCRYPTED = 'CORE_BOOT_PREFER_ENCRYPTED'
	CORE_BOOT_PREFER_UNENCRYPTED = 'CORE_BOOT_PREFER_UNENCRYPTED'
	DD = 'DD'


class GuidedDisallowedCapabilityReason(str, Enum):
	TOO_SMALL = 'TOO_SMALL'
	CORE_BOOT_ENCRYPTION_UNAVAILABLE = 'CORE_BOOT_ENCRYPTION_UNAVAILABLE'
	NOT_UEFI = 'NOT_UEFI'
	THIRD_PARTY_DRIVERS = 'THIRD_PARTY_DRIVERS'


class GuidedDisallowedCapability(SubiquityModel):
	capability: GuidedCapability
	reason: GuidedDisallowedCapabilityReason
	message: str | None = None


class SizingPolicy(str, Enum):
	SCALED = 'SCALED'
	ALL = 'ALL'


class _GuidedStorageTargetBase(SubiquityModel):
	allowed: list[GuidedCapability] = Field(default_factory=list)
	disallowed: list[GuidedDisallowedCapability] = Field(default_factory=list)


class GuidedStorageTargetReformat(_GuidedStorageTargetBase):
	type: Literal['GuidedStorageTargetReformat'] = Field(default='GuidedStorageTargetReformat', alias='$type')
	disk_id: str


class GuidedStorageTargetResize(_GuidedStorageTargetBase):
	type: Literal['GuidedStorageTargetResize'] = Field(default='GuidedStorageTargetResize', alias='$type')
	disk_id: str
	partition_number: int
	new_size: int
	minimum: int | None = None
	recommended: int | None = None
	maximum: int | None = None


class GuidedStorageTargetUseGap(_GuidedStorageTargetBase):
	type: Literal['GuidedStorageTargetUseGap'] = Field(default='GuidedStorageTargetUseGap', alias='$type')
	disk_id: str
	gap: Gap


class GuidedStorageTargetManual(_GuidedStorageTargetBase):
	type: Literal['GuidedStorageTargetManual'] = Field(default='GuidedStorageTargetManual', alias='$type')


GuidedStorageTarget = discriminated_union(
	'GuidedStorageTarget',
	GuidedStorageTargetReformat,
	GuidedStorageTargetResize,
	GuidedStorageTargetUseGap,
	GuidedStorageTargetManual,
)


class GuidedChoiceV2(SubiquityModel):
	"""The guided storage choice sent to storage/v2/guided.

	password is a secret: it is sent on the wire as-is but must only be
	logged through subiquity_client.redaction.
	"""

	target: GuidedStorageTarget
	capability: GuidedCapability
	password: str | None = None
	sizing_policy: SizingPolicy | None = SizingPolicy.SCALED
	reset_partition: bool = False


class GuidedStorageResponseV2(SubiquityModel):
	status: ProbeStatus
	error_report: ErrorReportRef | None = None
	configured: GuidedChoiceV2 | None = None
	targets: list[GuidedStorageTarget] = Field(default_factory=list)


# Request bodies for the manual partitioning endpoints


class ReformatDisk(SubiquityModel):
	disk_id: str
	ptable: str | None = None


class AddPartitionV2(SubiquityModel):
	disk_id: str
	gap: Gap
	partition: Partition


class ModifyPartitionV2(SubiquityModel):
	disk_id: str
	partition: Partition
