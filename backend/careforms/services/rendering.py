"""Field rendering dispatch.

Each field type maps to exactly one renderer producing a UI-agnostic
``FieldWidget`` descriptor. The dispatch table is checked against
``FieldType`` at import so a new type cannot be added without a renderer.
"""

from dataclasses import dataclass, field as dc_field
from enum import Enum as PyEnum
from typing import Optional, List, Tuple, Any, Callable, Dict

from careforms.config import get_settings
from careforms.exceptions import UnsupportedFieldTypeError
from careforms.schemas.template import FormTemplate, FormSection, FormField, FieldType
from careforms.services.form_state import FormStateStore, field_key


class WidgetKind(str, PyEnum):
    """Edit affordances a renderer can produce."""
    TEXT_INPUT = "text_input"
    DATE_INPUT = "date_input"
    VOICE_TEXT = "voice_text"
    SELECT = "select"
    RADIO_GROUP = "radio_group"
    CHECKBOX_GROUP = "checkbox_group"


@dataclass
class FieldWidget:
    kind: WidgetKind
    key: str
    label: str
    value: Any
    required: bool = False
    options: Tuple[str, ...] = ()
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    multiline: bool = False
    voice_enabled: bool = False
    error: Optional[str] = None


@dataclass
class RenderedInstance:
    index: Optional[int]
    heading: Optional[str]
    can_remove: bool
    widgets: List[FieldWidget] = dc_field(default_factory=list)


@dataclass
class RenderedSection:
    section_id: str
    title: str
    instances: List[RenderedInstance]
    can_add: bool


def is_narrative_label(label: Optional[str]) -> bool:
    """Text fields whose label suggests a free-form answer get voice input."""
    if not label:
        return False
    lowered = label.lower()
    return any(keyword in lowered for keyword in get_settings().narrative_keywords_list)


def _base_widget(kind: WidgetKind, field: FormField, key: str, value: Any, store: FormStateStore) -> FieldWidget:
    return FieldWidget(
        kind=kind,
        key=key,
        label=field.label,
        value=value,
        required=field.is_required,
        placeholder=field.placeholder,
        help_text=field.help_text,
        error=store.errors.get(key),
    )


def _render_text(field, key, value, store):
    if is_narrative_label(field.label):
        widget = _base_widget(WidgetKind.VOICE_TEXT, field, key, value or "", store)
        widget.voice_enabled = True
        return widget
    return _base_widget(WidgetKind.TEXT_INPUT, field, key, value or "", store)


def _render_date(field, key, value, store):
    return _base_widget(WidgetKind.DATE_INPUT, field, key, value or "", store)


def _render_textarea(field, key, value, store):
    widget = _base_widget(WidgetKind.VOICE_TEXT, field, key, value or "", store)
    widget.multiline = True
    widget.voice_enabled = True
    return widget


def _render_select(field, key, value, store):
    widget = _base_widget(WidgetKind.SELECT, field, key, value or "", store)
    widget.options = field.options or ()
    return widget


def _render_radio(field, key, value, store):
    widget = _base_widget(WidgetKind.RADIO_GROUP, field, key, value or "", store)
    widget.options = field.options or ()
    return widget


def _render_checkbox(field, key, value, store):
    if isinstance(value, str):
        value = [value] if value else []
    widget = _base_widget(WidgetKind.CHECKBOX_GROUP, field, key, list(value or []), store)
    widget.options = field.options or ()
    return widget


_RENDERERS: Dict[FieldType, Callable[..., FieldWidget]] = {
    FieldType.TEXT: _render_text,
    FieldType.DATE: _render_date,
    FieldType.TEXTAREA: _render_textarea,
    FieldType.SELECT: _render_select,
    FieldType.RADIO: _render_radio,
    FieldType.CHECKBOX: _render_checkbox,
}

_missing = set(FieldType) - set(_RENDERERS)
if _missing:
    raise RuntimeError(f"No renderer registered for field types: {sorted(t.value for t in _missing)}")


def render_field(
    section: FormSection,
    field: FormField,
    store: FormStateStore,
    instance_index: Optional[int] = None,
) -> FieldWidget:
    """Produce the widget descriptor for one field instance."""
    try:
        field_type = FieldType(field.field_type)
    except ValueError:
        raise UnsupportedFieldTypeError(field.field_type)

    key = field_key(section, field, instance_index or 0)
    value = store.get_value(
        section.id,
        field.id,
        instance_index if section.is_repeatable else None,
        use_default=True,
    )
    return _RENDERERS[field_type](field, key, value, store)


def render_section(section: FormSection, store: FormStateStore) -> RenderedSection:
    count = store.repeat_count(section.id)
    instances = []

    for i in range(count):
        index = i if section.is_repeatable else None
        heading = f"{section.title} #{i + 1}" if section.is_repeatable and count > 1 else None
        instances.append(RenderedInstance(
            index=index,
            heading=heading,
            can_remove=section.is_repeatable and i > 0,
            widgets=[render_field(section, field, store, index) for field in section.fields],
        ))

    can_add = section.is_repeatable and (section.max_repeat is None or count < section.max_repeat)
    return RenderedSection(
        section_id=section.id,
        title=section.title,
        instances=instances,
        can_add=can_add,
    )


def render_form(template: FormTemplate, store: FormStateStore) -> List[RenderedSection]:
    """Render every section instance of a template in order."""
    return [render_section(section, store) for section in template.sections]
