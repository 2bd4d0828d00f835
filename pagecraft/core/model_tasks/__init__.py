"""
Model tasks.

Each task pairs prompt templates with a result schema, a combiner and a
fallback. ModelClient is the single boundary to the hosted model.

Exports: ModelClient, ModelRequest, ModelTask and the four task classes
"""

from pagecraft.core.model_tasks.base import ModelTask, TaskPrompts
from pagecraft.core.model_tasks.model_client import ModelClient, ModelRequest
from pagecraft.core.model_tasks.refinement import RefinementTask
from pagecraft.core.model_tasks.structure import StructureTask
from pagecraft.core.model_tasks.typesetting import TypesettingTask
from pagecraft.core.model_tasks.website import WebsiteTask

__all__ = [
    "ModelClient",
    "ModelRequest",
    "ModelTask",
    "TaskPrompts",
    "RefinementTask",
    "StructureTask",
    "TypesettingTask",
    "WebsiteTask",
]
