"""Model prompt templates for brief normalization."""

import json

from prompt_brief.config.schema import DEFAULT_SCHEMA, SchemaRegistry

NORMALIZER_SYSTEM_PROMPT = (
    "You normalize conversation history into concise structured brief JSON "
    "for downstream prompt generation. Return JSON only."
)

NORMALIZER_RULES = [
    "- confidence must be a number between 0 and 1.",
    "- assumptions should explain inferred or uncertain interpretations.",
    "- If field is unknown, set value = null and confidence = 0 with one assumption.",
]


def build_normalizer_prompt(transcript: str, schema: SchemaRegistry = DEFAULT_SCHEMA) -> str:
    """Build the normalizer instruction for one transcript.

    Args:
        transcript: Conversation as ``role: content`` lines.
        schema: Registry whose field keys define the expected JSON shape.

    Returns:
        Prompt text asking for strict JSON.
    """
    shape = {
        "fields": {
            key.value: {"value": None, "confidence": 0, "assumptions": []}
            for key in schema.field_keys
        },
        "unresolvedConflicts": [
            {
                "field": schema.field_keys[0].value,
                "reason": "short explanation",
                "candidates": ["candidate 1", "candidate 2"],
            }
        ],
        "globalAssumptions": ["assumption"],
    }

    return "\n".join([
        "Normalize this conversation into a strict brief JSON object.",
        "Infer missing fields from natural language intent (not only explicit labels).",
        "Keep uncertainty explicit with confidence and assumptions for inferred values.",
        "Return JSON only with this exact shape:",
        json.dumps(shape, indent=2),
        "Rules:",
        *NORMALIZER_RULES,
        "",
        f"Transcript:\n{transcript}",
    ])
