from __future__ import annotations

from .types import CategorySummary, Prompt, PromptRef, SummaryReport


def summarize(prompts: list[Prompt]) -> SummaryReport:
    """Per-category counts. A prompt in two categories counts once in each."""
    breakdown: dict[str, CategorySummary] = {}
    for prompt in prompts:
        for name in prompt.categories:
            entry = breakdown.setdefault(name, CategorySummary(name=name))
            entry.count += 1
            entry.prompts.append(
                PromptRef(id=prompt.id, text=prompt.text, language=prompt.language, created_at=prompt.created_at)
            )

    # ties keep first-seen order
    ordered = sorted(breakdown.values(), key=lambda s: s.count, reverse=True)
    return SummaryReport(
        total_prompts=len(prompts),
        total_categories=len(ordered),
        summary=ordered,
        breakdown=breakdown,
    )
