"""Required-field validation over a template and its form state."""

from typing import Any, Dict, Mapping

from careforms.schemas.template import FormTemplate
from careforms.services.form_state import field_key


def is_missing(value: Any) -> bool:
    """A required value is missing when absent, empty text or an empty selection."""
    if value is None or value == "":
        return True
    if isinstance(value, (list, tuple)) and len(value) == 0:
        return True
    return False


def validate(
    template: FormTemplate,
    form_state: Mapping[str, Any],
    repeat_counts: Mapping[str, int],
) -> Dict[str, str]:
    """
    Check every required field of every section instance.

    Returns a map of composite key to message; an empty map means the
    form may be submitted. Drafts are saved regardless of the result.
    """
    errors: Dict[str, str] = {}

    for section in template.sections:
        count = max(1, repeat_counts.get(section.id, 1)) if section.is_repeatable else 1

        for i in range(count):
            for field in section.fields:
                if not field.is_required:
                    continue
                key = field_key(section, field, i)
                if is_missing(form_state.get(key)):
                    errors[key] = f"{field.label} is required"

    return errors
