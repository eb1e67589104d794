"""Template duplication, archiving and export, each recorded in the event log."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

import structlog
from sqlalchemy.exc import SQLAlchemyError

from ..events.events_repository import EventsRepository
from ..exceptions import RepositoryError
from .proposals_repository import ProposalTemplatesRepository
from .proposals_schemas import ProposalTemplate, ProposalTemplateCreate

logger = structlog.get_logger(__name__)

EVENT_AREA = "proposals-templates"

_WHITESPACE_RE = re.compile(r"\s+")


def _service_type_of(template: ProposalTemplate) -> str | None:
    if template.service_type:
        return template.service_type
    for variable in template.variables:
        if variable.name == "service_type":
            return variable.default_value
    return None


@dataclass(slots=True)
class ProposalTemplateService:
    repo: ProposalTemplatesRepository
    events: EventsRepository

    def list_templates(self) -> list[ProposalTemplate]:
        return self.repo.list_all()

    def get(self, template_id: str) -> ProposalTemplate:
        return self.repo.get(template_id)

    def create(self, payload: ProposalTemplateCreate, *, user_id: str | None = None) -> ProposalTemplate:
        template = self.repo.create({**payload.model_dump(), "created_by": user_id})
        self._log_operation("created", template.id, template.name)
        return template

    def duplicate_template(self, template_id: str, *, user_id: str | None = None) -> ProposalTemplate:
        source = self.repo.get(template_id)
        copy = self.repo.create(
            {
                "name": f"Copy of {source.name}",
                "subject": source.subject,
                "content": source.content,
                "service_type": _service_type_of(source),
                "status": "draft",
                "variables": [variable.model_dump() for variable in source.variables],
                "created_by": user_id,
            }
        )
        self._log_operation("duplicated", copy.id, copy.name)
        return copy

    def toggle_template_archive(self, template_id: str) -> ProposalTemplate:
        current = self.repo.get(template_id)
        new_status = "active" if current.status == "archived" else "archived"
        template = self.repo.set_status(template_id, new_status)
        self._log_operation("archived" if new_status == "archived" else "unarchived", template_id)
        return template

    def export_template_as_json(self, template_id: str) -> tuple[str, str]:
        """Return ``(filename, content)``; content carries a UTF-8 BOM."""
        template = self.repo.get(template_id)
        payload = {
            "id": template.id,
            "name": template.name,
            "service": _service_type_of(template) or "",
            "status": template.status or ("active" if template.is_active else "draft"),
            "content": template.content,
            "updated_at": template.updated_at.isoformat(),
        }
        filename = f"template-{_WHITESPACE_RE.sub('-', template.name.lower())}.json"
        self._log_operation("exported", template.id, template.name)
        return filename, "\ufeff" + json.dumps(payload, indent=2, ensure_ascii=False)

    def _log_operation(self, action: str, template_id: str, template_name: str | None = None) -> None:
        logger.info("proposals.template." + action, template_id=template_id, template_name=template_name)
        try:
            self.events.log_event(
                level="info",
                area=EVENT_AREA,
                message=f"Template {action}: {template_name or template_id}",
                meta={"template_id": template_id, "action": action, "template_name": template_name},
            )
        except (SQLAlchemyError, RepositoryError) as exc:
            logger.error("proposals.template.log_failed", action=action, error=str(exc))
