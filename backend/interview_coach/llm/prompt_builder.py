import json

from .scoring_schema import FEEDBACK_SCHEMA


def build_feedback_prompt(question, answer):
    schema = json.dumps(FEEDBACK_SCHEMA, indent=2).replace('"0-10"', "0-10")
    return f"""
You are an expert interview coach analyzing interview responses.

Analyze the response for:
1. Tone (confident, nervous, unsure, neutral)
2. Filler words (um, uh, like, you know, etc.)
3. Grammar issues
4. Relevance to the question
5. Overall score (0-10)
6. Improvement suggestions
7. One follow-up question

STRICT RULES:
- Return ONLY valid JSON.
- No commentary.
- No markdown.
- "score" must be an integer between 0 and 10.

Respond ONLY with this exact JSON structure:
{schema}

Interview Question: "{question}"

Candidate Response: "{answer}"
"""
