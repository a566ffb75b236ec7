from memory_prompts.analytics import summarize
from memory_prompts.types import Prompt


def test_multi_category_prompt_counts_once_per_category():
    a = Prompt(text="A", categories=["Familia"])
    b = Prompt(text="B", categories=["Familia", "Infancia"])
    report = summarize([a, b])

    assert [(s.name, s.count) for s in report.summary] == [("Familia", 2), ("Infancia", 1)]
    assert report.total_prompts == 2
    assert report.total_categories == 2
    assert [r.id for r in report.breakdown["Familia"].prompts] == [a.id, b.id]
    assert report.breakdown["Infancia"].prompts[0].text == "B"


def test_sum_of_counts_at_least_total_prompts():
    prompts = [
        Prompt(text="1", categories=["Viajes"]),
        Prompt(text="2", categories=["Viajes", "Familia", "Infancia"]),
        Prompt(text="3", categories=[]),
    ]
    report = summarize(prompts)
    assert sum(s.count for s in report.summary) == 4
    assert report.total_prompts == 3


def test_single_category_per_prompt_sums_to_total():
    prompts = [Prompt(text=str(i), categories=["Familia" if i % 2 else "Viajes"]) for i in range(5)]
    report = summarize(prompts)
    assert sum(s.count for s in report.summary) == report.total_prompts


def test_ties_keep_first_encountered_order():
    prompts = [
        Prompt(text="1", categories=["Viajes"]),
        Prompt(text="2", categories=["Familia"]),
        Prompt(text="3", categories=["Música"]),
        Prompt(text="4", categories=["Música"]),
    ]
    assert [s.name for s in summarize(prompts).summary] == ["Música", "Viajes", "Familia"]


def test_empty_input():
    report = summarize([])
    assert report.summary == []
    assert report.breakdown == {}
    assert report.total_prompts == 0
