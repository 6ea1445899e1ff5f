"""Prompt builders for the five article facets and their summaries.

Every article prompt carries the keyword, its dictionary definition and the
ranked reference documents serialized as JSON.
"""

from __future__ import annotations

from typing import List

_ARTICLE_TEMPLATE = """# Task: Generate text to help learn economic terms

The following is reference data about "{keyword}":

<definition>{definition}</definition>

<reference_data>
{reference}
</reference_data>

<task>
Using the data above, please write an educational text explaining {subject} "{keyword}".
</task>

<requirements>
- Length: Greater than 1000 characters and less than 2000 characters.
- Target audience: Learners encountering economic terms for the first time.
- Tone: Formal style.
{extra_requirements}- Format: News article format(no markdown needed).
</requirements>

<output_format>
Output a title and the explanatory text, without additional notes or meta information. Write all content in {language}.
</output_format>
"""

_NO_CONCEPT = (
    "- Prohibition : Since the concept of the keyword has already been written in another "
    "article, do not explain the concept of the keyword here.\n"
)


def _article_prompt(
    keyword: str,
    definition: str,
    reference: str,
    language: str,
    subject: str,
    structure: List[str],
    repeat_concept: bool = False,
) -> str:
    extra = "" if repeat_concept else _NO_CONCEPT
    extra += "- Structure: Write in the order of:\n"
    extra += "".join(f"  - {step}\n" for step in structure)
    return _ARTICLE_TEMPLATE.format(
        keyword=keyword,
        definition=definition,
        reference=reference,
        subject=subject,
        extra_requirements=extra,
        language=language,
    )


def create_concept_prompt(keyword: str, definition: str, reference: str, language: str = "Korean") -> str:
    return _article_prompt(
        keyword,
        definition,
        reference,
        language,
        subject="the concept of",
        structure=["Definition.", "Key content.", "A simple example."],
        repeat_concept=True,
    )


def create_example_prompt(keyword: str, definition: str, reference: str, language: str = "Korean") -> str:
    return _article_prompt(
        keyword,
        definition,
        reference,
        language,
        subject="real-world examples of",
        structure=[
            f"Present 2–3 concrete cases from everyday life or recent news where {keyword} appears.",
            "For each case, explain how the term applies and what it changed.",
            "Close by summarising what the examples have in common.",
        ],
    )


def create_related_words_prompt(keyword: str, definition: str, reference: str, language: str = "Korean") -> str:
    return _article_prompt(
        keyword,
        definition,
        reference,
        language,
        subject="the related words of",
        structure=[
            f"Select 2–3 terms closely related to {keyword} and explain their relationships.",
            "If there is a clear opposing or conflicting concept, present it as well. "
            "(e.g., inflation ↔ deflation)",
            "Describe a scenario where these terms appear together.",
        ],
    )


def create_importance_prompt(keyword: str, definition: str, reference: str, language: str = "Korean") -> str:
    return _article_prompt(
        keyword,
        definition,
        reference,
        language,
        subject="the Importance and Economic Impact of",
        structure=[
            f"Explain the impact of {keyword} on an individual's life (e.g., savings, investment, consumption).",
            "Explain the impact on business management and the national economy "
            "(e.g., government policy, trade).",
            "Conclude by emphasizing why one should know this term.",
        ],
    )


def create_exploration_prompt(keyword: str, definition: str, reference: str, language: str = "Korean") -> str:
    return _article_prompt(
        keyword,
        definition,
        reference,
        language,
        subject="the In-Depth Exploration and Common Misconceptions of",
        structure=[
            f"Identify and explain 1–2 common misconceptions or incorrect assumptions people often "
            f"have about {keyword}. (Example: \"Is inflation always a bad thing?\")",
            f"Provide an in-depth analysis by connecting {keyword} to a recent economic issue.",
            "Conclude by posing a thought-provoking question for the learner to ponder further.",
        ],
    )


ARTICLE_PROMPT_BUILDERS = (
    create_concept_prompt,
    create_example_prompt,
    create_related_words_prompt,
    create_importance_prompt,
    create_exploration_prompt,
)


def create_article_prompts(keyword: str, definition: str, reference: str, language: str = "Korean") -> List[str]:
    """Build the concept, example, related-words, importance and exploration prompts, in that order."""
    return [build(keyword, definition, reference, language) for build in ARTICLE_PROMPT_BUILDERS]


def create_summary_prompt(content: str, language: str = "Korean") -> str:
    return f"""# Task: Summarize an educational article

<article>
{content}
</article>

<requirements>
- Length: 2–3 sentences, less than 300 characters.
- Keep only the main point a learner should remember.
- Do not add information that is not in the article.
</requirements>

<output_format>
Output only the summary text. Write all content in {language}.
</output_format>
"""
