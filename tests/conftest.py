"""Pytest configuration and fixtures."""

import json

import pytest


@pytest.fixture
def ready_transcript() -> str:
    """Conversation covering every required stage."""
    return "\n".join([
        "user: objective: Draft a launch email campaign",
        "assistant: Sounds good. Who is it for?",
        "user: Build it for first-time managers.",
        "user: Base it on the onboarding docs and incident notes from last quarter.",
        "user: We should avoid legal claims and keep it under 150 words.",
        "user: Output format: markdown bullets",
    ])


@pytest.fixture
def sparse_messages() -> list[dict]:
    """Message history that only names an audience."""
    return [
        {"role": "user", "content": "Need onboarding checklist prompt for new managers."},
    ]


@pytest.fixture
def model_reply_factory():
    """Build an async model stub returning a fixed reply and recording prompts."""

    def factory(reply):
        prompts: list[str] = []

        async def model_call(prompt: str) -> str:
            prompts.append(prompt)
            if isinstance(reply, Exception):
                raise reply
            return reply if isinstance(reply, str) else json.dumps(reply)

        model_call.prompts = prompts
        return model_call

    return factory


@pytest.fixture
def full_model_reply() -> dict:
    """Model reply confidently filling every required field."""
    return {
        "fields": {
            "objective": {"value": "Create onboarding checklist", "confidence": 0.86, "assumptions": []},
            "audience": {"value": "First-time managers", "confidence": 0.84, "assumptions": []},
            "context": {"value": "Existing HR playbook", "confidence": 0.8, "assumptions": []},
            "constraints": {"value": "Limit to concise bullets", "confidence": 0.79, "assumptions": []},
            "outputFormat": {"value": "Markdown list", "confidence": 0.78, "assumptions": []},
        },
        "unresolvedConflicts": [],
        "globalAssumptions": ["Examples not provided."],
    }
