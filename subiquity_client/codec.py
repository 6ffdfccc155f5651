"""JSON codec for installer API payloads.

Every record is a frozen pydantic model. Polymorphic payloads are modelled as
discriminated unions keyed on the ``$type`` field; decoding an unknown tag is
an error and never falls back to a default variant.

Example:
	DiskObject = discriminated_union('DiskObject', Partition, Gap)

	obj = decode(DiskObject, {'$type': 'Gap', 'offset': 0, 'size': 1024})
	assert encode(obj)['$type'] == 'Gap'
"""

import re
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from subiquity_client.exceptions import SubiquityDecodeError

M = TypeVar('M', bound='SubiquityModel')

DISCRIMINATOR = '$type'

# Union name lookups, keyed by the set of variant tags and by the annotated type itself
_UNION_NAMES_BY_TAGS: dict[frozenset[str], str] = {}
_UNION_ADAPTERS: dict[int, tuple[str, TypeAdapter]] = {}
_ADAPTERS: dict[Any, TypeAdapter] = {}

_QUOTED_RE = re.compile(r"'([^']*)'")


class SubiquityModel(BaseModel):
	"""Base class for all installer API records.

	Instances are immutable snapshots: use copy_with() to derive a modified value.
	"""

	model_config = ConfigDict(frozen=True, populate_by_name=True)

	@classmethod
	def from_json(cls: type[M], data: Any) -> M:
		"""Decode a JSON value, raising SubiquityDecodeError on structural mismatches"""
		return decode(cls, data)

	def to_json(self) -> dict[str, Any]:
		"""Encode to a JSON-compatible dict using wire field names"""
		return self.model_dump(mode='json', by_alias=True)

	def copy_with(self: M, **changes: Any) -> M:
		"""Return a new value with the given fields replaced; self is left untouched"""
		return self.model_copy(update=changes)


def variant_tag(model: type[BaseModel]) -> str:
	"""Return the $type tag a union variant writes on the wire."""
	field = model.model_fields.get('type')
	if field is None or field.alias != DISCRIMINATOR or not isinstance(field.default, str):
		raise TypeError(f'{model.__name__} is not a discriminated union variant')
	return field.default


def discriminated_union(name: str, *variants: type[BaseModel]) -> Any:
	"""Build a union type dispatched on the $type field.

	Each variant must declare ``type: Literal['<Tag>'] = Field(default='<Tag>', alias='$type')``.
	The name is used in decode errors, both for top-level and nested occurrences.
	"""
	if len(variants) < 2:
		raise TypeError(f'{name} needs at least two variants')

	tags = frozenset(variant_tag(v) for v in variants)
	union_type = Annotated[Union[variants], Field(discriminator='type')]  # type: ignore[valid-type]

	_UNION_NAMES_BY_TAGS[tags] = name
	_UNION_ADAPTERS[id(union_type)] = (name, TypeAdapter(union_type))
	return union_type


def type_name(tp: Any) -> str:
	"""Human readable name of a decode target, used in error messages."""
	registered = _UNION_ADAPTERS.get(id(tp))
	if registered is not None:
		return registered[0]
	if get_origin(tp) is not None:
		args = ', '.join(type_name(arg) for arg in get_args(tp))
		return f'{type_name(get_origin(tp))}[{args}]'
	return getattr(tp, '__name__', repr(tp))


def _adapter(tp: Any) -> TypeAdapter:
	registered = _UNION_ADAPTERS.get(id(tp))
	if registered is not None:
		return registered[1]
	try:
		adapter = _ADAPTERS.get(tp)
	except TypeError:
		# Unhashable type expression, build a throwaway adapter
		return TypeAdapter(tp)
	if adapter is None:
		adapter = _ADAPTERS[tp] = TypeAdapter(tp)
	return adapter


def decode(tp: Any, data: Any) -> Any:
	"""Decode a JSON value into a model, registered union, enum or plain type.

	Raises:
		SubiquityDecodeError: on missing required fields, wrong types, unknown enum
			constants or unknown/missing $type discriminators
	"""
	try:
		if isinstance(tp, type) and issubclass(tp, BaseModel):
			return tp.model_validate(data)
		return _adapter(tp).validate_python(data)
	except ValidationError as e:
		raise decode_error(type_name(tp), e) from e


def encode(value: Any) -> Any:
	"""Encode a model, enum, list or scalar into its JSON-compatible form."""
	if isinstance(value, SubiquityModel):
		return value.to_json()
	return to_jsonable_python(value, by_alias=True)


def _format_loc(loc: tuple[int | str, ...]) -> str | None:
	if not loc:
		return None
	return '.'.join(str(part) for part in loc)


def decode_error(name: str, error: ValidationError) -> SubiquityDecodeError:
	"""Convert the first pydantic validation error into a SubiquityDecodeError."""
	details = error.errors(include_url=False)
	if not details:
		return SubiquityDecodeError(name, detail=str(error))

	first = details[0]
	kind = first['type']
	loc = tuple(first['loc'])
	ctx = first.get('ctx') or {}

	if kind in ('union_tag_invalid', 'union_tag_not_found'):
		expected = frozenset(_QUOTED_RE.findall(str(ctx.get('expected_tags', ''))))
		union_name = _UNION_NAMES_BY_TAGS.get(expected, name)
		field = _format_loc((*loc, DISCRIMINATOR))
		if kind == 'union_tag_not_found':
			return SubiquityDecodeError(union_name, field, None, f'missing {DISCRIMINATOR} discriminator')
		tag = ctx.get('tag')
		return SubiquityDecodeError(
			union_name,
			field,
			tag,
			f'unknown variant {tag!r}, expected one of {ctx.get("expected_tags", "")}',
		)

	value = None if kind == 'missing' else first.get('input')
	return SubiquityDecodeError(name, _format_loc(loc), value, first['msg'])
