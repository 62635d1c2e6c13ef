"""HTTP-level tests for templates, responses and transcription."""

from types import SimpleNamespace

from careforms.main import app
from careforms.models.response import FormResponse
from careforms.routers.transcription import get_transcription_service
from careforms.services.draft import load_draft, reconcile_draft
from careforms.services.response import DatabaseResponseSink
from careforms.services.form_session import FormSession
from careforms.services.template import TemplateService
from careforms.services.transcription import TranscriptionService

TEMPLATE_PAYLOAD = {
    "name": "Daily Progress Note",
    "formType": "progress_note",
    "sections": [
        {
            "id": "act",
            "title": "Activity",
            "orderIndex": 1,
            "isRepeatable": True,
            "maxRepeat": 3,
            "fields": [
                {"id": "desc", "label": "Activity Description", "fieldType": "textarea", "isRequired": True},
            ],
        },
        {
            "id": "info",
            "title": "Client Information",
            "orderIndex": 0,
            "fields": [
                {"id": "name", "label": "Client Name", "fieldType": "text", "isRequired": True},
                {
                    "id": "svc",
                    "label": "Service Type",
                    "fieldType": "select",
                    "options": '["Respite", "Behavioral Support"]',
                },
            ],
        },
    ],
}


def _create_template(client):
    response = client.post("/api/templates", json=TEMPLATE_PAYLOAD)
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_create_template_orders_sections(client):
    data = _create_template(client)

    assert data["name"] == "Daily Progress Note"
    assert data["formType"] == "progress_note"
    assert data["isActive"] is True
    assert [s["id"] for s in data["sections"]] == ["info", "act"]
    assert data["sections"][0]["fields"][1]["options"] == ["Respite", "Behavioral Support"]
    assert data["sections"][1]["isRepeatable"] is True


def test_get_and_list_templates(client):
    created = _create_template(client)

    fetched = client.get(f"/api/templates/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["sections"] == created["sections"]

    listed = client.get("/api/templates").json()
    assert [t["id"] for t in listed] == [created["id"]]


def test_unknown_template_is_404(client):
    assert client.get("/api/templates/nope").status_code == 404


def test_invalid_field_type_rejected(client):
    payload = {
        "name": "Broken",
        "sections": [{"title": "S", "fields": [{"label": "Sig", "fieldType": "signature"}]}],
    }
    assert client.post("/api/templates", json=payload).status_code == 422


def test_deleted_template_is_hidden(client):
    created = _create_template(client)

    assert client.delete(f"/api/templates/{created['id']}").status_code == 200

    assert client.get("/api/templates").json() == []
    draft = client.post("/api/responses", json={"templateId": created["id"], "responseData": {}})
    assert draft.status_code == 404


def test_incomplete_draft_is_accepted(client):
    template = _create_template(client)

    response = client.post("/api/responses", json={
        "templateId": template["id"],
        "responseData": {"info.name": "Ada", "act.1.desc": ""},
    })

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "draft"
    assert body["templateId"] == template["id"]
    assert body["responseData"] == {"info.name": "Ada", "act.1.desc": ""}
    assert body["submittedAt"] is None


def test_incomplete_submission_is_rejected(client):
    template = _create_template(client)

    response = client.post("/api/responses", json={
        "templateId": template["id"],
        "responseData": {"info.name": "Ada", "act.0.desc": "Walked", "act.1.desc": ""},
        "status": "submitted",
    })

    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == {"act.1.desc": "Activity Description is required"}
    assert client.get("/api/responses").json() == []


def test_draft_then_submit(client):
    template = _create_template(client)
    draft = client.post("/api/responses", json={
        "templateId": template["id"],
        "responseData": {"info.name": "Ada"},
    }).json()

    submitted = client.put(f"/api/responses/{draft['id']}", json={
        "responseData": {"info.name": "Ada", "act.0.desc": "Walked"},
        "status": "submitted",
    })

    assert submitted.status_code == 200
    assert submitted.json()["status"] == "submitted"
    assert submitted.json()["submittedAt"] is not None

    again = client.put(f"/api/responses/{draft['id']}", json={"responseData": {}})
    assert again.status_code == 400

    drafts = client.get("/api/responses", params={"status_filter": "draft"}).json()
    assert drafts == []


def test_update_missing_response_is_404(client):
    assert client.put("/api/responses/nope", json={"responseData": {}}).status_code == 404


def test_review_metadata_survives_edit_and_is_stripped_on_load(client, db_session):
    template = _create_template(client)
    draft = client.post("/api/responses", json={
        "templateId": template["id"],
        "responseData": {"info.name": "Ada"},
    }).json()

    # A reviewer sends the draft back with a comment
    record = db_session.get(FormResponse, draft["id"])
    record.response_data = {**record.response_data, "_approval": {"status": "rejected", "comment": "Add detail"}}
    db_session.commit()

    updated = client.put(f"/api/responses/{draft['id']}", json={
        "responseData": {"info.name": "Ada Lovelace"},
    }).json()
    assert updated["responseData"]["_approval"]["comment"] == "Add detail"

    reopened = client.get(f"/api/responses/{draft['id']}").json()
    template_id, data = load_draft(SimpleNamespace(
        template_id=reopened["templateId"],
        response_data=reopened["responseData"],
    ))
    assert template_id == template["id"]
    assert data == {"info.name": "Ada Lovelace"}


def test_form_session_persists_through_database(client, db_session):
    template = _create_template(client)
    form_template = TemplateService.get_template(db_session, template["id"])
    sink = DatabaseResponseSink(db_session)

    session = FormSession(form_template, sink)
    session.store.set_field("info", "name", "Ada")
    session.store.add_repeat_instance("act")
    draft_id = session.save_draft()

    stored = client.get(f"/api/responses/{draft_id}").json()
    assert stored["status"] == "draft"
    assert reconcile_draft(form_template, stored["responseData"]).repeat_count("act") == 2

    resumed = FormSession(form_template, sink, initial_data=stored["responseData"], response_id=draft_id)
    resumed.store.set_field("act", "desc", "Walked", 0)
    resumed.store.set_field("act", "desc", "Cooked", 1)
    result = resumed.submit()

    assert result.submitted
    assert result.response_id == draft_id
    assert client.get(f"/api/responses/{draft_id}").json()["status"] == "submitted"


def test_transcribe_without_key_is_503(client):
    app.dependency_overrides[get_transcription_service] = lambda: TranscriptionService(api_key="")

    response = client.post(
        "/api/transcribe",
        files={"audio": ("recording.webm", b"audio", "audio/webm")},
        data={"language": "en"},
    )

    assert response.status_code == 503
    assert response.json()["error"] == "Transcription service not configured"

    status_response = client.get("/api/transcribe/status").json()
    assert status_response == {
        "available": False,
        "provider": "none",
        "message": "Speech-to-text service is not configured",
    }


def test_transcribe_without_audio_is_400(client):
    app.dependency_overrides[get_transcription_service] = lambda: TranscriptionService(api_key="test-key")

    response = client.post("/api/transcribe", data={"language": "en"})

    assert response.status_code == 400
    assert client.get("/api/transcribe/status").json()["available"] is True


def test_fields_are_ordered_by_order_index(client, db_session):
    payload = {
        "name": "Shift Log",
        "sections": [{
            "id": "s",
            "title": "Shift",
            "fields": [
                {"id": "notes", "label": "Notes", "fieldType": "textarea", "orderIndex": 2},
                {"id": "start", "label": "Start", "fieldType": "text", "orderIndex": 0},
                {"id": "end", "label": "End", "fieldType": "text", "orderIndex": 1},
            ],
        }],
    }
    created = client.post("/api/templates", json=payload).json()

    assert [f["id"] for f in created["sections"][0]["fields"]] == ["start", "end", "notes"]

    record = TemplateService.get_template_record(db_session, created["id"])
    # Rows written before ordering was enforced
    record.sections = [{**record.sections[0], "fields": list(reversed(record.sections[0]["fields"]))}]
    db_session.commit()

    form_template = TemplateService.get_template(db_session, created["id"])
    assert [f.id for f in form_template.sections[0].fields] == ["start", "end", "notes"]


def test_rejected_submission_leaves_draft_untouched(client, db_session):
    template = _create_template(client)
    draft = client.post("/api/responses", json={
        "templateId": template["id"],
        "responseData": {"info.name": "Ada"},
    }).json()

    rejected = client.put(f"/api/responses/{draft['id']}", json={
        "responseData": {"info.name": ""},
        "status": "submitted",
    })
    assert rejected.status_code == 422

    # A later commit on the same session must not persist the rejected data
    db_session.commit()
    db_session.expire_all()
    stored = client.get(f"/api/responses/{draft['id']}").json()
    assert stored["responseData"] == {"info.name": "Ada"}
    assert stored["status"] == "draft"
