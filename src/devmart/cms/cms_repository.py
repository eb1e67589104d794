"""SQLAlchemy repositories for publishable content and its satellites."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..db.db_models import (
    BlogCategoryModel,
    BlogPostModel,
    ContactSubmissionModel,
    FAQModel,
    PageModel,
    ProjectImageModel,
    ProjectModel,
    ServiceModel,
)
from ..exceptions import NotFoundError, ValidationError, ensure_found, handle_sqlalchemy_errors
from .cms_schemas import BlogCategory, ContactSubmission, ContentItem, FAQAdminItem, FAQItem, ProjectImage

CONTENT_MODELS: dict[str, type[Any]] = {
    "services": ServiceModel,
    "projects": ProjectModel,
    "blog_posts": BlogPostModel,
    "pages": PageModel,
}


class ContentRepository:
    """CRUD over one content table (``services``, ``projects``, ``blog_posts``, ``pages``)."""

    def __init__(self, session_factory: Callable[[], Session], kind: str) -> None:
        self._session_factory = session_factory
        self.kind = kind
        self.model = CONTENT_MODELS[kind]

    @property
    def session_factory(self) -> Callable[[], Session]:
        return self._session_factory

    def _select(self):
        stmt = select(self.model)
        if self.model is ProjectModel:
            stmt = stmt.options(selectinload(ProjectModel.images))
        elif self.model is BlogPostModel:
            stmt = stmt.options(selectinload(BlogPostModel.categories))
        return stmt

    def list_all(self) -> list[ContentItem]:
        with self._session_factory() as session:
            rows = session.execute(self._select().order_by(self.model.updated_at.desc())).scalars()
            return [self._to_domain(row) for row in rows]

    def list_published(self) -> list[ContentItem]:
        with self._session_factory() as session:
            stmt = (
                self._select()
                .where(self.model.status == "published")
                .order_by(self.model.published_at.desc())
            )
            return [self._to_domain(row) for row in session.execute(stmt).scalars()]

    def get(self, item_id: str) -> ContentItem:
        with self._session_factory() as session:
            row = session.execute(self._select().where(self.model.id == item_id)).scalar_one_or_none()
            return self._to_domain(ensure_found(row, entity=self.kind, identifier=item_id))

    def get_published_by_slug(self, slug: str) -> ContentItem:
        with self._session_factory() as session:
            stmt = self._select().where(self.model.slug == slug, self.model.status == "published")
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_domain(ensure_found(row, entity=self.kind, identifier=slug))

    def create(self, values: dict[str, Any]) -> ContentItem:
        now = datetime.utcnow()
        row = self.model(**self._columns(values), created_at=now, updated_at=now)
        with handle_sqlalchemy_errors(entity=self.kind), self._session_factory() as session:
            self._assign_categories(session, row, values.get("category_ids"))
            session.add(row)
            session.commit()
        return self.get(row.id)

    def update(self, item_id: str, values: dict[str, Any]) -> ContentItem:
        with handle_sqlalchemy_errors(entity=self.kind), self._session_factory() as session:
            row = ensure_found(session.get(self.model, item_id), entity=self.kind, identifier=item_id)
            for key, value in self._columns(values).items():
                setattr(row, key, value)
            self._assign_categories(session, row, values.get("category_ids"))
            row.updated_at = datetime.utcnow()
            session.commit()
        return self.get(item_id)

    def delete(self, item_id: str) -> None:
        with handle_sqlalchemy_errors(entity=self.kind), self._session_factory() as session:
            row = ensure_found(session.get(self.model, item_id), entity=self.kind, identifier=item_id)
            session.delete(row)
            session.commit()

    def _assign_categories(self, session: Session, row: Any, category_ids: list[str] | None) -> None:
        if category_ids is None:
            return
        if self.model is not BlogPostModel:
            raise ValidationError(f"{self.kind} do not have categories")
        wanted = list(dict.fromkeys(category_ids))
        found = list(
            session.execute(select(BlogCategoryModel).where(BlogCategoryModel.id.in_(wanted))).scalars()
        )
        missing = set(wanted) - {category.id for category in found}
        if missing:
            raise ValidationError(f"Unknown blog categories: {', '.join(sorted(missing))}")
        row.categories = found

    def _columns(self, values: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in values.items() if hasattr(self.model, key)}

    @staticmethod
    def _to_domain(row: Any) -> ContentItem:
        return ContentItem.model_validate(row)


class ProjectImagesRepository:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def list_for_project(self, project_id: str) -> list[ProjectImage]:
        with self._session_factory() as session:
            stmt = (
                select(ProjectImageModel)
                .where(ProjectImageModel.project_id == project_id)
                .order_by(ProjectImageModel.sort_order)
            )
            return [ProjectImage.model_validate(row) for row in session.execute(stmt).scalars()]

    def add(self, project_id: str, *, url: str, alt: str | None = None, sort_order: int | None = None) -> ProjectImage:
        with handle_sqlalchemy_errors(entity="project_image"), self._session_factory() as session:
            ensure_found(session.get(ProjectModel, project_id), entity="projects", identifier=project_id)
            if sort_order is None:
                current = session.execute(
                    select(func.max(ProjectImageModel.sort_order)).where(
                        ProjectImageModel.project_id == project_id
                    )
                ).scalar()
                sort_order = 0 if current is None else current + 1
            row = ProjectImageModel(
                project_id=project_id,
                url=url,
                alt=alt,
                sort_order=sort_order,
                created_at=datetime.utcnow(),
            )
            session.add(row)
            session.commit()
            return ProjectImage.model_validate(row)

    def update_order(self, image_id: str, sort_order: int) -> ProjectImage:
        with handle_sqlalchemy_errors(entity="project_image"), self._session_factory() as session:
            row = ensure_found(session.get(ProjectImageModel, image_id), entity="project_image", identifier=image_id)
            row.sort_order = sort_order
            session.commit()
            return ProjectImage.model_validate(row)

    def delete(self, image_id: str) -> None:
        with handle_sqlalchemy_errors(entity="project_image"), self._session_factory() as session:
            row = session.get(ProjectImageModel, image_id)
            if row is None:
                raise NotFoundError(f"project_image '{image_id}' not found")
            session.delete(row)
            session.commit()


class ContactSubmissionsRepository:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def create(self, *, name: str, email: str, subject: str | None, message: str, ip: str | None) -> ContactSubmission:
        row = ContactSubmissionModel(
            name=name,
            email=email,
            subject=subject,
            message=message,
            ip=ip,
            created_at=datetime.utcnow(),
        )
        with handle_sqlalchemy_errors(entity="contact_submission"), self._session_factory() as session:
            session.add(row)
            session.commit()
        return ContactSubmission.model_validate(row)

    def count(self) -> int:
        with self._session_factory() as session:
            return session.execute(select(func.count(ContactSubmissionModel.id))).scalar_one()

    def list_page(self, *, offset: int = 0, limit: int = 100) -> list[ContactSubmission]:
        with self._session_factory() as session:
            stmt = (
                select(ContactSubmissionModel)
                .order_by(ContactSubmissionModel.created_at.desc())
                .offset(offset)
                .limit(limit)
            )
            return [ContactSubmission.model_validate(row) for row in session.execute(stmt).scalars()]


class FAQRepository:
    model = FAQModel

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @property
    def session_factory(self) -> Callable[[], Session]:
        return self._session_factory

    def list_published(self) -> list[FAQItem]:
        with self._session_factory() as session:
            stmt = select(FAQModel).where(FAQModel.status == "published").order_by(FAQModel.sort_order)
            return [FAQItem.model_validate(row) for row in session.execute(stmt).scalars()]

    def list_all(self) -> list[FAQAdminItem]:
        with self._session_factory() as session:
            stmt = select(FAQModel).order_by(FAQModel.sort_order, FAQModel.created_at)
            return [FAQAdminItem.model_validate(row) for row in session.execute(stmt).scalars()]

    def get(self, faq_id: str) -> FAQAdminItem:
        with self._session_factory() as session:
            row = ensure_found(session.get(FAQModel, faq_id), entity="faq", identifier=faq_id)
            return FAQAdminItem.model_validate(row)

    def next_sort_order(self) -> int:
        with self._session_factory() as session:
            current = session.execute(select(func.max(FAQModel.sort_order))).scalar()
            return 0 if current is None else current + 1

    def create(self, values: dict[str, Any]) -> FAQAdminItem:
        now = datetime.utcnow()
        row = FAQModel(**values, created_at=now, updated_at=now)
        with handle_sqlalchemy_errors(entity="faq"), self._session_factory() as session:
            session.add(row)
            session.commit()
            return FAQAdminItem.model_validate(row)

    def update(self, faq_id: str, values: dict[str, Any]) -> FAQAdminItem:
        with handle_sqlalchemy_errors(entity="faq"), self._session_factory() as session:
            row = ensure_found(session.get(FAQModel, faq_id), entity="faq", identifier=faq_id)
            for key, value in values.items():
                setattr(row, key, value)
            row.updated_at = datetime.utcnow()
            session.commit()
            return FAQAdminItem.model_validate(row)

    def delete(self, faq_id: str) -> None:
        with handle_sqlalchemy_errors(entity="faq"), self._session_factory() as session:
            row = ensure_found(session.get(FAQModel, faq_id), entity="faq", identifier=faq_id)
            session.delete(row)
            session.commit()


class BlogCategoriesRepository:
    model = BlogCategoryModel

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @property
    def session_factory(self) -> Callable[[], Session]:
        return self._session_factory

    def list_all(self) -> list[BlogCategory]:
        with self._session_factory() as session:
            stmt = select(BlogCategoryModel).order_by(BlogCategoryModel.name)
            return [BlogCategory.model_validate(row) for row in session.execute(stmt).scalars()]

    def create(self, *, name: str, slug: str) -> BlogCategory:
        row = BlogCategoryModel(name=name, slug=slug)
        with handle_sqlalchemy_errors(entity="blog_category"), self._session_factory() as session:
            session.add(row)
            session.commit()
            return BlogCategory.model_validate(row)

    def delete(self, category_id: str) -> None:
        with handle_sqlalchemy_errors(entity="blog_category"), self._session_factory() as session:
            row = ensure_found(
                session.get(BlogCategoryModel, category_id),
                entity="blog_category",
                identifier=category_id,
            )
            session.delete(row)
            session.commit()
