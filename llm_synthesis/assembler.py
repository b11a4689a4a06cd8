"""Report assembly: merges deterministic aggregates with the model's reply.

Whatever the normalizer produced, the assembled report carries every
advertised field. Data-shape problems in the reply never raise here.
"""

import logging
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from llm_synthesis.schema import (
    InternetInsights,
    InternetReport,
    PopulationReport,
    ProjectionOutput,
    UrbanRuralInsights,
    UrbanRuralReport,
)
from llm_synthesis.validator import NormalizedReply

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _validate_with_repair(
    model_cls: Type[_ModelT],
    candidate: Dict[str, Any],
    fallback: Dict[str, Any],
) -> _ModelT:
    """Validate *candidate*, replacing any invalid field with its fallback value."""
    try:
        return model_cls.model_validate(candidate)
    except ValidationError as exc:
        invalid = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        logger.warning(
            "Replacing invalid reply fields model=%s fields=%s",
            model_cls.__name__,
            sorted(invalid),
        )
        repaired = {**candidate, **{key: fallback.get(key) for key in invalid}}
        return model_cls.model_validate(repaired)


def _fill_missing(supplied: Dict[str, Any], deterministic: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of *supplied* with every missing or null key taken from *deterministic*."""
    merged = dict(supplied)
    for key, value in deterministic.items():
        if merged.get(key) is None:
            merged[key] = value
    return merged


def merge_insights(
    reply: NormalizedReply,
    deterministic: Dict[str, Any],
    model_cls: Type[_ModelT],
) -> _ModelT:
    """Build the insights object for a report.

    Structured replies keep the model's values and get every missing or
    null advertised field from *deterministic*. Fallback replies use
    *deterministic* as-is.
    """
    if not reply.is_structured:
        return model_cls.model_validate(deterministic)

    supplied = reply.object_field("insights") or {}
    return _validate_with_repair(model_cls, _fill_missing(supplied, deterministic), deterministic)


def resolve_projection(
    reply: NormalizedReply,
    deterministic: Optional[Dict[str, Any]],
) -> Optional[ProjectionOutput]:
    """Merge the model projection over the computed one, field by field.

    Without a computed projection a well-formed model projection is kept
    as-is and a malformed one is dropped.
    """
    supplied = reply.object_field("projection") or {}
    if deterministic is None:
        if not supplied:
            return None
        try:
            return ProjectionOutput.model_validate(supplied)
        except ValidationError:
            logger.warning("Reply projection malformed and nothing computed, dropping it")
            return None
    return _validate_with_repair(ProjectionOutput, _fill_missing(supplied, deterministic), deterministic)


def assemble_population_report(
    reply: NormalizedReply,
    projection: Optional[Dict[str, Any]],
    prompt_text: str,
) -> PopulationReport:
    return PopulationReport(
        summary=reply.summary(),
        highlights=reply.highlights(),
        projection=resolve_projection(reply, projection),
        raw_prompt=prompt_text,
    )


def assemble_urban_rural_report(
    reply: NormalizedReply,
    insights: Dict[str, Any],
    prompt_text: str,
) -> UrbanRuralReport:
    return UrbanRuralReport(
        summary=reply.summary(),
        highlights=reply.highlights(),
        insights=merge_insights(reply, insights, UrbanRuralInsights),
        raw_prompt=prompt_text,
    )


def assemble_internet_report(
    reply: NormalizedReply,
    insights: Dict[str, Any],
    prompt_text: str,
) -> InternetReport:
    return InternetReport(
        summary=reply.summary(),
        highlights=reply.highlights(),
        insights=merge_insights(reply, insights, InternetInsights),
        raw_prompt=prompt_text,
    )
