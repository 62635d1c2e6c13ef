"""Form state store with composite-key addressing and repeat counters."""

import copy
import logging
import re
from types import MappingProxyType
from typing import Optional, Dict, Any, Mapping, Set

from careforms.schemas.template import FormTemplate, FormSection, FormField, FieldType

logger = logging.getLogger(__name__)


def composite_key(section_id: str, field_id: str, instance_index: Optional[int] = None) -> str:
    """
    Build the address of one field value.

    ``section.field`` for a single-instance section,
    ``section.<i>.field`` for instance ``i`` of a repeatable section.
    """
    if instance_index is None:
        return f"{section_id}.{field_id}"
    if instance_index < 0:
        raise ValueError(f"instance_index must be >= 0, got {instance_index}")
    return f"{section_id}.{instance_index}.{field_id}"


def instance_prefix(section_id: str, instance_index: int) -> str:
    """Prefix shared by every key of one repeat instance."""
    return f"{section_id}.{instance_index}."


def field_key(section: FormSection, field: FormField, instance_index: int = 0) -> str:
    """Composite key for ``field``, ignoring the index on non-repeatable sections."""
    return composite_key(
        section.id,
        field.id,
        instance_index if section.is_repeatable else None,
    )


def reconstruct_repeat_counts(template: FormTemplate, form_state: Mapping[str, Any]) -> Dict[str, int]:
    """
    Recover how many instances each repeatable section has.

    Saved drafts only hold leaf values, so the count is derived from the
    highest instance index present in the keys. Sections without any
    matching key get a single instance.
    """
    counts: Dict[str, int] = {}
    for section in template.sections:
        if not section.is_repeatable:
            continue
        pattern = re.compile(rf"^{re.escape(section.id)}\.(\d+)\.")
        max_index = -1
        for key in form_state:
            match = pattern.match(key)
            if match:
                max_index = max(max_index, int(match.group(1)))
        counts[section.id] = max_index + 1 if max_index >= 0 else 1
    return counts


def legal_keys(template: FormTemplate, repeat_counts: Mapping[str, int]) -> Set[str]:
    """Every key that may hold a value for the given instance counts."""
    keys = set()
    for section in template.sections:
        count = max(1, repeat_counts.get(section.id, 1)) if section.is_repeatable else 1
        for i in range(count):
            for field in section.fields:
                keys.add(field_key(section, field, i))
    return keys


class FormStateStore:
    """
    Mutable answer set for one editing session.

    Values live in a flat map keyed by composite key; checkbox fields hold
    lists, every other field type holds a string. Repeatable sections keep
    an instance counter that never drops below one.
    """

    def __init__(
        self,
        template: FormTemplate,
        data: Optional[Mapping[str, Any]] = None,
        repeat_counts: Optional[Mapping[str, int]] = None,
    ):
        self.template = template
        self._data: Dict[str, Any] = dict(data or {})
        if repeat_counts is None:
            repeat_counts = reconstruct_repeat_counts(template, self._data)
        self._repeat_counts: Dict[str, int] = {
            section_id: max(1, count) for section_id, count in repeat_counts.items()
        }
        self.errors: Dict[str, str] = {}

    @property
    def data(self) -> Mapping[str, Any]:
        """Read-only view of the current values."""
        return MappingProxyType(self._data)

    @property
    def repeat_counts(self) -> Dict[str, int]:
        return dict(self._repeat_counts)

    def snapshot(self, preserve_shape: bool = False) -> Dict[str, Any]:
        """
        Deep copy of the values, safe to hand to persistence.

        With ``preserve_shape`` the last instance of every repeatable
        section gets an empty placeholder when it holds no key yet, so
        ``reconstruct_repeat_counts`` recovers rows that were added but
        left blank.
        """
        data = copy.deepcopy(self._data)
        if not preserve_shape:
            return data

        for section in self.template.sections:
            count = self.repeat_count(section.id)
            if not section.is_repeatable or count <= 1 or not section.fields:
                continue
            last = count - 1
            prefix = instance_prefix(section.id, last)
            if any(key.startswith(prefix) for key in data):
                continue
            first = section.fields[0]
            data[composite_key(section.id, first.id, last)] = [] if first.field_type == FieldType.CHECKBOX else ""
        return data

    def repeat_count(self, section_id: str) -> int:
        section = self.template.get_section(section_id)
        if section is not None and not section.is_repeatable:
            return 1
        return self._repeat_counts.get(section_id, 1)

    def get_value(
        self,
        section_id: str,
        field_id: str,
        instance_index: Optional[int] = None,
        use_default: bool = False,
    ) -> Any:
        value = self._data.get(composite_key(section_id, field_id, instance_index))
        if value is None and use_default:
            section = self.template.get_section(section_id)
            for field in (section.fields if section else ()):
                if field.id == field_id:
                    return field.default_value
        return value

    def set_field(
        self,
        section_id: str,
        field_id: str,
        value: Any,
        instance_index: Optional[int] = None,
    ) -> str:
        """Write a value and clear any error recorded for its key."""
        key = composite_key(section_id, field_id, instance_index)
        self._data[key] = value
        self.errors.pop(key, None)
        return key

    def set_checklist_option(
        self,
        section_id: str,
        field_id: str,
        option: str,
        checked: bool,
        instance_index: Optional[int] = None,
    ) -> str:
        """Add or remove one option of a checkbox field."""
        current = self._data.get(composite_key(section_id, field_id, instance_index))
        if current is None or current == "":
            current = []
        elif isinstance(current, str):
            current = [current]

        if checked:
            values = list(current) if option in current else [*current, option]
        else:
            values = [v for v in current if v != option]

        return self.set_field(section_id, field_id, values, instance_index)

    def add_repeat_instance(self, section_id: str, max_repeat: Optional[int] = None) -> int:
        """
        Add one instance to a repeatable section.

        At ``max_repeat`` (or the section's own bound when none is given)
        this does nothing. Returns the resulting count.
        """
        section = self.template.get_section(section_id)
        if section is not None:
            if not section.is_repeatable:
                logger.debug("Ignoring add on non-repeatable section %s", section_id)
                return 1
            if max_repeat is None:
                max_repeat = section.max_repeat

        count = self._repeat_counts.get(section_id, 1)
        if max_repeat is not None and count >= max_repeat:
            return count

        self._repeat_counts[section_id] = count + 1
        return count + 1

    def remove_repeat_instance(self, section_id: str, instance_index: int) -> int:
        """
        Drop every value of one instance and shrink the counter.

        The counter is floored at one. Returns the resulting count.
        """
        prefix = instance_prefix(section_id, instance_index)
        for key in [k for k in self._data if k.startswith(prefix)]:
            del self._data[key]
            self.errors.pop(key, None)

        count = max(1, self._repeat_counts.get(section_id, 1) - 1)
        self._repeat_counts[section_id] = count
        return count

    def set_errors(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)

    def __repr__(self) -> str:
        return f"<FormStateStore(template_id={self.template.id}, keys={len(self._data)})>"
