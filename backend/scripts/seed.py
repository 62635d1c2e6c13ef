"""Seed script to create the default form templates for development/demo."""

import json
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from careforms.database import SessionLocal, init_db
from careforms.models.template import Template
from careforms.schemas.template import TemplateCreate
from careforms.services.template import TemplateService

logger = logging.getLogger("careforms.seed")


DEFAULT_TEMPLATES = [
    {
        "name": "Incident Report Form",
        "description": "Standard incident report form for documenting any incidents during service",
        "formType": "incident_report",
        "sections": [
            {
                "title": "Employee Information",
                "orderIndex": 0,
                "fields": [
                    {"label": "Employee Name", "fieldType": "text", "orderIndex": 0, "isRequired": True,
                     "placeholder": "Enter your full name"},
                    {"label": "Date of Incident", "fieldType": "date", "orderIndex": 1, "isRequired": True},
                    {"label": "Time of Incident", "fieldType": "text", "orderIndex": 2, "isRequired": True,
                     "placeholder": "e.g., 2:30 PM"},
                ],
            },
            {
                "title": "Incident Details",
                "orderIndex": 1,
                "fields": [
                    {"label": "Employee Statement of Incident", "fieldType": "textarea", "orderIndex": 0,
                     "isRequired": True, "placeholder": "Describe what happened in detail..."},
                    {"label": "Client Name", "fieldType": "text", "orderIndex": 1, "isRequired": True},
                    {"label": "Client Statement of Incident", "fieldType": "textarea", "orderIndex": 2,
                     "isRequired": False, "placeholder": "If applicable, describe client's account of the incident"},
                    {"label": "What action has been taken to resolve this matter?", "fieldType": "textarea",
                     "orderIndex": 3, "isRequired": True, "placeholder": "Describe actions taken..."},
                ],
            },
            {
                "title": "Witnesses",
                "orderIndex": 2,
                "isRepeatable": True,
                "maxRepeat": 5,
                "fields": [
                    {"label": "Witness Name", "fieldType": "text", "orderIndex": 0, "isRequired": False},
                    {"label": "Witness Statement Notes", "fieldType": "text", "orderIndex": 1, "isRequired": False},
                ],
            },
            {
                "title": "Signatures",
                "orderIndex": 3,
                "fields": [
                    {"label": "Employee Signature", "fieldType": "text", "orderIndex": 0, "isRequired": True,
                     "placeholder": "Type your full name"},
                    {"label": "Date", "fieldType": "date", "orderIndex": 1, "isRequired": True},
                ],
            },
        ],
    },
    {
        "name": "Progress Note - Service Strategies",
        "description": "Standard progress note with service strategies checklist",
        "formType": "progress_note",
        "sections": [
            {
                "title": "Service Information",
                "orderIndex": 0,
                "fields": [
                    {"label": "Consumer Name", "fieldType": "text", "orderIndex": 0, "isRequired": True},
                    {"label": "Date", "fieldType": "date", "orderIndex": 1, "isRequired": True},
                    {"label": "Intervention Used During Service Today", "fieldType": "select", "orderIndex": 2,
                     "isRequired": True,
                     "options": json.dumps([
                         "Community-Based Support",
                         "Individual Support - Daily Living",
                         "Respite",
                         "Behavioral Support",
                         "Career Planning/Vocational",
                     ])},
                ],
            },
            {
                "title": "Service Strategies (Check at least one, and check all that apply)",
                "orderIndex": 1,
                "fields": [
                    {"label": "Service Strategies Used", "fieldType": "checkbox", "orderIndex": 0,
                     "isRequired": True, "helpText": "Check all that apply",
                     "options": json.dumps([
                         "Assistance with Activities of Daily Living",
                         "Assistance with Increasing Community Participation",
                         "Assistance with Increasing Independence",
                         "Assistance with On-The-Job Support",
                         "Assistance with Learning Activities",
                     ])},
                ],
            },
            {
                "title": "Daily Objectives",
                "orderIndex": 2,
                "fields": [
                    {"label": "What is your Objective/Goal for today? Was this goal achieved?",
                     "fieldType": "textarea", "orderIndex": 0, "isRequired": True,
                     "placeholder": "Describe today's goal and whether it was achieved..."},
                    {"label": "List the activities that were completed during service today",
                     "fieldType": "textarea", "orderIndex": 1, "isRequired": True,
                     "placeholder": "List all completed activities..."},
                ],
            },
            {
                "title": "Intervention Used During Service",
                "description": "(check at least one; and check all that apply)",
                "orderIndex": 3,
                "fields": [
                    {"label": "Prompts/Interventions", "fieldType": "checkbox", "orderIndex": 0, "isRequired": True,
                     "options": json.dumps([
                         "Verbal prompt/Reminders",
                         "Verbal direction",
                         "Modeling",
                         "Physical Assistance",
                         "Hand over hand assistance",
                         "Gestural prompt",
                         "Visual schedule/cue",
                         "Encouraged Problem Solving",
                         "Reflective supportive listening",
                     ])},
                ],
            },
            {
                "title": "Consumer Response",
                "orderIndex": 4,
                "fields": [
                    {"label": "Response", "fieldType": "radio", "orderIndex": 0, "isRequired": True,
                     "options": json.dumps([
                         "Refused",
                         "Successful Response to Staff's Support",
                         "Unsuccessful Response to Staff's Support",
                     ])},
                ],
            },
            {
                "title": "Signature",
                "orderIndex": 5,
                "fields": [
                    {"label": "Employee's Signature", "fieldType": "text", "orderIndex": 0, "isRequired": True,
                     "placeholder": "Type your full name"},
                    {"label": "Date", "fieldType": "date", "orderIndex": 1, "isRequired": True},
                ],
            },
        ],
    },
]


def seed_database():
    """Create the default templates that do not exist yet."""
    db = SessionLocal()

    try:
        logger.info("Creating templates...")

        for template_config in DEFAULT_TEMPLATES:
            existing = db.query(Template).filter(Template.name == template_config["name"]).first()
            if existing:
                logger.info("  Template already present: %s", template_config["name"])
                continue

            TemplateService.create_template(db, TemplateCreate.model_validate(template_config))
            logger.info("  Created template: %s", template_config["name"])

        logger.info("Seed data created successfully!")

    except Exception as e:
        logger.error("Error: %s", e)
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    logger.info("Creating database tables...")
    init_db()

    seed_database()
