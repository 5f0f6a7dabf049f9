"""Course catalog loader.

Loads course templates from data/config/catalog_v1.yaml. Each hobby gets
its own trial course named after the template, e.g. "Cooking Professional
Development".

Usage:
    from hobbyu.config.catalog import load_catalog

    catalog = load_catalog(config.catalog_path)
    catalog.trial_course_for(Hobby.COOKING).title
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog
import yaml

from hobbyu.core.models import Hobby

logger = structlog.get_logger(__name__)


@dataclass
class CourseTemplate:
    """A course offered for every hobby."""

    key: str
    title_template: str
    description: str
    duration_days: int
    is_trial: bool = False
    price: float | None = None


@dataclass
class Course:
    """A course resolved for a specific hobby."""

    course_id: str
    key: str
    title: str
    description: str
    duration_days: int
    is_trial: bool
    price: float | None = None


@dataclass
class Catalog:
    """All course templates."""

    templates: dict[str, CourseTemplate] = field(default_factory=dict)

    def _resolve(self, template: CourseTemplate, hobby: Hobby) -> Course:
        return Course(
            course_id=f"{hobby.value.lower()}-{template.key}",
            key=template.key,
            title=template.title_template.format(hobby=hobby.value),
            description=template.description.format(hobby=hobby.value),
            duration_days=template.duration_days,
            is_trial=template.is_trial,
            price=template.price,
        )

    def trial_course_for(self, hobby: Hobby) -> Course:
        """Get the trial course for a hobby."""
        for template in self.templates.values():
            if template.is_trial:
                return self._resolve(template, hobby)
        # Ultimate fallback
        return self._resolve(_get_default_templates()["trial"], hobby)

    def course_for(self, key: str, hobby: Hobby) -> Course | None:
        """Get a course by template key for a hobby."""
        template = self.templates.get(key)
        if template is None:
            return None
        return self._resolve(template, hobby)

    def courses_for(self, hobby: Hobby) -> list[Course]:
        """List every course available for a hobby."""
        return [self._resolve(t, hobby) for t in self.templates.values()]

    def course_by_id(self, course_id: str, hobby: Hobby) -> Course | None:
        """Resolve a course ID such as "cooking-advanced" for a hobby.

        IDs belonging to another hobby resolve to None.
        """
        prefix = f"{hobby.value.lower()}-"
        if not course_id.startswith(prefix):
            return None
        return self.course_for(course_id[len(prefix):], hobby)


def _get_default_templates() -> dict[str, CourseTemplate]:
    """Get default course templates when the catalog file is missing."""
    return {
        "trial": CourseTemplate(
            key="trial",
            title_template="{hobby} Professional Development",
            description="Daily lessons turning your {hobby} passion into a profession.",
            duration_days=90,
            is_trial=True,
        ),
        "advanced": CourseTemplate(
            key="advanced",
            title_template="Advanced {hobby} Mastery",
            description="Advanced techniques for certified {hobby} graduates.",
            duration_days=90,
            is_trial=False,
        ),
    }


def load_catalog(catalog_path: Path | None = None) -> Catalog:
    """Load the course catalog.

    Args:
        catalog_path: Path to catalog YAML. Missing file -> defaults.

    Returns:
        Catalog object.
    """
    if catalog_path is None or not catalog_path.exists():
        logger.debug("catalog_file_not_found", path=str(catalog_path))
        return Catalog(templates=_get_default_templates())

    data = yaml.safe_load(catalog_path.read_text(encoding="utf-8")) or {}
    courses_data = data.get("courses", {})

    templates: dict[str, CourseTemplate] = {}
    for key, cdata in courses_data.items():
        templates[key] = CourseTemplate(
            key=key,
            title_template=cdata.get("title", key),
            description=cdata.get("description", ""),
            duration_days=int(cdata.get("duration_days", 90)),
            is_trial=bool(cdata.get("is_trial", False)),
            price=cdata.get("price"),
        )

    if not templates:
        logger.warning("catalog_empty", path=str(catalog_path))
        templates = _get_default_templates()

    logger.debug("loaded_catalog", count=len(templates))
    return Catalog(templates=templates)
