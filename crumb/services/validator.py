from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .models import Recipe
from .types import RecipeDraft, StrategyResult

DEFAULT_MIN_INGREDIENTS = 3
DEFAULT_MIN_STEPS = 3


@dataclass
class QualityReport:
    passed: bool
    ingredient_count: int
    instruction_count: int
    problems: list[str] = field(default_factory=list)


def check_quality(
    draft: RecipeDraft,
    min_ingredients: int = DEFAULT_MIN_INGREDIENTS,
    min_steps: int = DEFAULT_MIN_STEPS,
) -> QualityReport:
    """Minimum-quality gate: a title, enough ingredients, enough real steps."""
    ingredient_count = len(draft.ingredients)
    instruction_count = sum(1 for step in draft.steps if not step.is_header)

    problems: list[str] = []
    if not (draft.title or "").strip():
        problems.append("missing title")
    if ingredient_count < min_ingredients:
        problems.append(f"{ingredient_count} ingredients (need {min_ingredients})")
    if instruction_count < min_steps:
        problems.append(f"{instruction_count} steps (need {min_steps})")

    return QualityReport(
        passed=not problems,
        ingredient_count=ingredient_count,
        instruction_count=instruction_count,
        problems=problems,
    )


def select_candidate(results: Iterable[StrategyResult]) -> Optional[StrategyResult]:
    """
    Pick the winner among strategy results, given in priority order.

    Strategy priority is the only tie-break: the first accepted result wins.
    """
    for result in results:
        if result.accepted and result.draft is not None:
            return result
    return None


def finalize(draft: RecipeDraft) -> Recipe:
    return Recipe(
        title=draft.title or "",
        ingredients=list(draft.ingredients),
        steps=list(draft.steps),
        times=draft.times,
        author=draft.author,
        image_url=draft.image_url,
        source_url=draft.source_url,
        source_name=draft.source_name,
        category=draft.category,
        extracted_by=draft.extracted_by,
    )
