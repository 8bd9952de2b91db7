"""Default prompt templates for the Generator, Reflector and Curator.

Templates use ``str.format`` placeholders; literal braces in the JSON
examples are doubled.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

GENERATOR_PROMPT = """\
You are an expert problem solver. Use the playbook of accumulated advice
to answer the question. Each playbook line shows a bullet ID, its advice
and how often it has been helpful, harmful or neutral so far.

Playbook:
{playbook}

Recent reflections:
{reflection}

Question:
{question}

Additional context:
{context}

Instructions:
- Pick the bullets that apply and cite their IDs in your reasoning, e.g. [general-00001].
- Prefer bullets with more helpful than harmful marks.
- Think step by step, then commit to a single final answer.

Respond with a single JSON object and nothing else:
{{
  "reasoning": "<step-by-step reasoning>",
  "bullet_ids": ["<id of each bullet you used>"],
  "final_answer": "<your final answer>"
}}
"""

JSON_ONLY_SUFFIX = (
    "\n\nMake sure to output only a single valid JSON object. "
    "Please escape all quotes or use single quotes to avoid outputting extra text."
)

GENERATOR_RETRY_SUFFIX = JSON_ONLY_SUFFIX

# ---------------------------------------------------------------------------
# Reflector
# ---------------------------------------------------------------------------

REFLECTOR_PROMPT = """\
You are a careful reviewer. Analyse the attempt below against the ground
truth and the environment feedback, find what went wrong (or right), and
judge each playbook bullet the solver relied on.

Question:
{question}

Solver reasoning:
{reasoning}

Solver prediction: {prediction}
Ground truth: {ground_truth}
Feedback: {feedback}

Playbook bullets consulted:
{playbook_excerpt}

Tag each consulted bullet:
- "helpful": it moved the solver toward the correct answer
- "harmful": it misled the solver
- "neutral": it did not matter here

Respond with a single JSON object and nothing else:
{{
  "reasoning": "<your analysis>",
  "error_identification": "<what went wrong, or empty if correct>",
  "root_cause_analysis": "<why it went wrong>",
  "correct_approach": "<what should be done instead>",
  "key_insight": "<one reusable lesson>",
  "bullet_tags": [
    {{"id": "<bullet id>", "tag": "helpful|harmful|neutral"}}
  ]
}}
"""

REFLECTOR_RETRY_SUFFIX = (
    "\n\nPlease strictly output valid JSON, escape double quotes, "
    "and do not output additional explanatory text."
)

# ---------------------------------------------------------------------------
# Curator
# ---------------------------------------------------------------------------

CURATOR_PROMPT = """\
You are the curator of a playbook of reusable advice. Turn the latest
reflection into a small set of edits that make the playbook more useful.

Training progress: {progress}
Playbook stats: {stats}

Latest reflection:
{reflection}

Question context:
{question_context}

Current playbook:
{playbook}

Available operations:
- ADD: new advice. Fields: section, content, optional metadata with initial counters.
- UPDATE: rewrite advice. Fields: bullet_id, content, optional metadata overwriting counters.
- TAG: adjust counters. Fields: bullet_id, metadata such as {{"helpful": 1}}.
- REMOVE: delete advice that is wrong or redundant. Fields: bullet_id.

Rules:
- Only add advice that is new, specific and reusable; never duplicate an existing bullet.
- Prefer UPDATE over ADD when a bullet already covers the idea.
- Return an empty operations list when nothing should change.

Respond with a single JSON object and nothing else:
{{
  "reasoning": "<why these edits>",
  "operations": [
    {{"type": "ADD", "section": "<section name>", "content": "<advice>", "metadata": {{"helpful": 1}}}}
  ]
}}
"""

CURATOR_RETRY_SUFFIX = (
    "\n\nReminder: Only output valid JSON. Please escape double quotes or use "
    "single quotes for all strings. Do not add extra text."
)
