"""Prompt builder for quizzes generated from a persisted article."""

from __future__ import annotations


def create_quizzes_prompt(content: str, language: str = "Korean", count: int = 3) -> str:
    return f"""# Task: Create quizzes to check understanding of an article about economic terms

<article>
{content}
</article>

<requirements>
- Number of quizzes: {count}.
- Each quiz is multiple choice with exactly 4 options.
- The answer must be one of the options, copied exactly.
- Questions must be answerable from the article alone.
- Add a one or two sentence explanation of why the answer is correct.
</requirements>

<output_format>
Return the quizzes as a JSON object with a "quizzes" list. Write all content in {language}.
</output_format>
"""
