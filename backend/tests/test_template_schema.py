import pytest
from pydantic import ValidationError

from careforms.schemas.template import FieldType, FormField, FormSection, FormTemplate


def test_options_decoded_from_json_string():
    field = FormField.model_validate({
        "label": "Service",
        "fieldType": "select",
        "options": '["Respite", "Community Based Support"]',
    })
    assert field.options == ("Respite", "Community Based Support")


def test_options_accept_plain_list():
    field = FormField(label="Response", field_type="radio", options=["Refused", "Successful"])
    assert field.options == ("Refused", "Successful")


def test_malformed_options_rejected():
    with pytest.raises(ValidationError):
        FormField.model_validate({"label": "Service", "fieldType": "select", "options": "[Respite"})


def test_multiselect_is_checkbox():
    field = FormField.model_validate({"label": "Prompts", "fieldType": "multiselect"})
    assert field.field_type == FieldType.CHECKBOX


def test_unknown_field_type_rejected():
    with pytest.raises(ValidationError):
        FormField.model_validate({"label": "Sig", "fieldType": "signature"})


def test_max_repeat_must_be_positive():
    with pytest.raises(ValidationError):
        FormSection.model_validate({"title": "Witnesses", "isRepeatable": True, "maxRepeat": 0})


def test_template_is_immutable(simple_template):
    with pytest.raises(ValidationError):
        simple_template.name = "Renamed"
    with pytest.raises(ValidationError):
        simple_template.sections[0].fields[0].is_required = False


def test_get_section(mixed_template):
    assert mixed_template.get_section("act").is_repeatable
    assert mixed_template.get_section("missing") is None


def test_generated_ids_are_unique():
    template = FormTemplate.model_validate({
        "id": "t",
        "name": "Generated",
        "sections": [{"title": "A"}, {"title": "B"}],
    })
    assert template.sections[0].id != template.sections[1].id
