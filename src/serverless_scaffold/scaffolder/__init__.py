"""Template rendering, generation plans, and the shared generation pipeline."""

from serverless_scaffold.scaffolder.base import BaseGenerator, GenerationResult
from serverless_scaffold.scaffolder.errors import (
    DuplicateEntryError,
    ManifestValidationError,
    ProjectExistsError,
    ScaffoldError,
    TemplateRenderError,
)
from serverless_scaffold.scaffolder.plan import GenerationPlan, TemplateEntry
from serverless_scaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "BaseGenerator",
    "DuplicateEntryError",
    "GenerationPlan",
    "GenerationResult",
    "ManifestValidationError",
    "ProjectExistsError",
    "ScaffoldError",
    "TemplateEntry",
    "TemplateRenderError",
    "TemplateRenderer",
]
