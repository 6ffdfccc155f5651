"""Snap refresh status and snapd change/task records"""

from enum import Enum
from typing import Any

from pydantic import Field

from subiquity_client.codec import SubiquityModel


class RefreshCheckState(str, Enum):
	UNKNOWN = 'UNKNOWN'
	AVAILABLE = 'AVAILABLE'
	UNAVAILABLE = 'UNAVAILABLE'


class RefreshStatus(SubiquityModel):
	availability: RefreshCheckState
	current_snap_version: str = ''
	new_snap_version: str = ''


class TaskStatus(str, Enum):
	DO = 'Do'
	DOING = 'Doing'
	DONE = 'Done'
	ABORT = 'Abort'
	UNDO = 'Undo'
	UNDOING = 'Undoing'
	HOLD = 'Hold'
	ERROR = 'Error'


class TaskProgress(SubiquityModel):
	label: str = ''
	done: int = 0
	total: int = 0


class Task(SubiquityModel):
	id: str
	kind: str
	summary: str
	status: TaskStatus
	progress: TaskProgress = Field(default_factory=TaskProgress)


class Change(SubiquityModel):
	id: str
	kind: str
	summary: str
	status: TaskStatus
	tasks: list[Task] = Field(default_factory=list)
	ready: bool
	err: str | None = None
	# Opaque result payload, shape depends on the change kind
	data: Any = None
