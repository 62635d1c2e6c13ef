"""Draft reconciliation: turn a stored response back into editing state."""

import logging
from typing import Optional, Dict, Any, Mapping, Iterable, Tuple

from careforms.config import get_settings
from careforms.schemas.template import FormTemplate
from careforms.services.form_state import FormStateStore, legal_keys, reconstruct_repeat_counts

logger = logging.getLogger(__name__)


def strip_reserved_keys(
    response_data: Optional[Mapping[str, Any]],
    reserved: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """
    Remove metadata the persistence layer embeds in response data.

    Configured reserved keys (e.g. ``_approval``) and any other
    underscore-prefixed key are dropped; composite keys never start
    with an underscore.
    """
    if reserved is None:
        reserved = get_settings().reserved_response_keys_list
    reserved = set(reserved)
    return {
        key: value
        for key, value in (response_data or {}).items()
        if key not in reserved and not key.startswith("_")
    }


def load_draft(response) -> Tuple[str, Dict[str, Any]]:
    """Split a stored response into its template id and clean form state."""
    return response.template_id, strip_reserved_keys(response.response_data)


def reconcile_draft(template: FormTemplate, response_data: Optional[Mapping[str, Any]]) -> FormStateStore:
    """
    Seed a form state store from a previously saved snapshot.

    Repeat counters are rebuilt from the instance indexes present in the
    keys, since drafts do not store them.
    """
    data = strip_reserved_keys(response_data)
    counts = reconstruct_repeat_counts(template, data)

    unknown = set(data) - legal_keys(template, counts)
    if unknown:
        logger.debug(
            "Draft for template %s carries %d keys outside the template: %s",
            template.id, len(unknown), sorted(unknown)
        )

    return FormStateStore(template, data, counts)
