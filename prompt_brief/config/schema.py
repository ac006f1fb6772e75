"""Schema Registry - brief field declarations and stage definitions.

Read-only configuration built once at import time. Operations that need it
take a ``SchemaRegistry`` argument defaulting to ``DEFAULT_SCHEMA``.
"""

import re
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Mapping

from prompt_brief.models import FieldKey, FieldThreshold, RuleSet, StageDefinition


@dataclass(frozen=True)
class FieldDefinition:
    """Detection data for one brief field."""

    key: FieldKey
    patterns: tuple[re.Pattern, ...]
    aliases: tuple[str, ...] = ()

    def matches(self, normalized_text: str) -> bool:
        return any(pattern.search(normalized_text) for pattern in self.patterns)


@dataclass(frozen=True)
class SchemaRegistry:
    """Immutable field and stage configuration.

    ``fields`` order is the detection tie-break order.
    """

    fields: tuple[FieldDefinition, ...]
    stages: tuple[StageDefinition, ...]
    _index: Mapping[FieldKey, FieldDefinition] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        keys = [definition.key for definition in self.fields]
        if len(set(keys)) != len(keys) or set(keys) != set(FieldKey):
            raise ValueError("Schema fields must declare every FieldKey exactly once")

        stage_keys = [stage.key for stage in self.stages]
        if len(set(stage_keys)) != len(stage_keys):
            raise ValueError("Stage keys must be unique")

        declared = set(keys)
        for stage in self.stages:
            for rule_set in stage.completion_rules:
                unknown = [key for key in rule_set.referenced_fields() if key not in declared]
                if unknown:
                    raise ValueError(
                        f"Stage '{stage.key}' references undeclared fields: {unknown}"
                    )

        object.__setattr__(
            self, "_index", MappingProxyType({d.key: d for d in self.fields})
        )

    @property
    def field_keys(self) -> list[FieldKey]:
        return [definition.key for definition in self.fields]

    def definition(self, key: FieldKey) -> FieldDefinition:
        return self._index[key]

    @cached_property
    def alias_map(self) -> Mapping[str, FieldKey]:
        """Lower-cased label -> field key, covering key names and aliases."""
        mapping: dict[str, FieldKey] = {}
        for definition in self.fields:
            for label in (definition.key.value, *definition.aliases):
                mapping[label.lower()] = definition.key
        return MappingProxyType(mapping)

    @property
    def required_stage_keys(self) -> list[str]:
        return [stage.key for stage in self.stages if stage.required]


def _patterns(*expressions: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(expression) for expression in expressions)


def _threshold(field_key: FieldKey, min_confidence: float) -> FieldThreshold:
    return FieldThreshold(field_key=field_key, min_confidence=min_confidence)


# =============================================================================
# Field Definitions
# Patterns run against normalized (lower-cased, whitespace-collapsed) text.
# =============================================================================

FIELD_DEFINITIONS = (
    FieldDefinition(
        key=FieldKey.OBJECTIVE,
        patterns=_patterns(r"\bobjective\b", r"\bgoal\b", r"\bi need\b", r"\bi want\b", r"\btask\b"),
        aliases=("objective",),
    ),
    FieldDefinition(
        key=FieldKey.AUDIENCE,
        # "for" is deliberately broad and shadows narrower cues of later fields
        patterns=_patterns(r"\baudience\b", r"\bfor\b", r"\btarget\b", r"\breaders?\b", r"\busers?\b"),
        aliases=("audience",),
    ),
    FieldDefinition(
        key=FieldKey.CONTEXT,
        patterns=_patterns(r"\bcontext\b", r"\bbackground\b", r"\bsource\b", r"\bdata\b", r"\binput\b"),
        aliases=("context",),
    ),
    FieldDefinition(
        key=FieldKey.CONSTRAINTS,
        patterns=_patterns(r"\bconstraint\b", r"\bmust\b", r"\bshould\b", r"\blimit\b", r"\bavoid\b"),
        aliases=("constraints",),
    ),
    FieldDefinition(
        key=FieldKey.NON_GOALS,
        patterns=_patterns(r"\bnon-goals?\b", r"\bout of scope\b", r"\bdo not\b", r"\bdon't\b", r"\bnot include\b"),
        aliases=("non-goal", "non-goals", "non goals"),
    ),
    FieldDefinition(
        key=FieldKey.OUTPUT_FORMAT,
        patterns=_patterns(r"\boutput\s*format\b", r"\bformat\b", r"\bjson\b", r"\bmarkdown\b", r"\btable\b"),
        aliases=("output format",),
    ),
    FieldDefinition(
        key=FieldKey.TONE,
        patterns=_patterns(r"\btone\b", r"\bvoice\b", r"\bstyle\b", r"\bformal\b", r"\bcasual\b"),
        aliases=("tone",),
    ),
    FieldDefinition(
        key=FieldKey.EXAMPLES,
        patterns=_patterns(r"\bexample\b", r"\bsample\b", r"\bfew-shot\b", r"\blike this\b"),
        aliases=("example", "examples"),
    ),
    FieldDefinition(
        key=FieldKey.ACCEPTANCE_CRITERIA,
        patterns=_patterns(
            r"\bacceptance\s*criteria\b",
            r"\bsuccess\s*criteria\b",
            r"\bdefinition of done\b",
            r"\bquality bar\b",
        ),
        aliases=("acceptance criteria",),
    ),
)


# =============================================================================
# Stage Definitions (declaration order is reporting order)
# =============================================================================

STAGE_DEFINITIONS = (
    StageDefinition(
        key="objective",
        label="Objective",
        required=True,
        required_fields=("task", "successOutcome"),
        completion_rules=(RuleSet(all_of=(_threshold(FieldKey.OBJECTIVE, 0.45),)),),
        done_criteria=(
            "Complete when the user clearly states what they want the model to do "
            "and what a successful result looks like."
        ),
        follow_up_question=(
            "What exact outcome do you want, and how will you judge whether the answer is successful?"
        ),
    ),
    StageDefinition(
        key="audience",
        label="Audience",
        required=True,
        required_fields=("readerOrUser", "skillLevelOrRole"),
        completion_rules=(RuleSet(all_of=(_threshold(FieldKey.AUDIENCE, 0.4),)),),
        done_criteria=(
            "Complete when the intended audience or end-user is named, including role, "
            "expertise level, or context."
        ),
        follow_up_question="Who is the output for (role/experience level), and what do they already know?",
    ),
    StageDefinition(
        key="contextData",
        label="Context/Data",
        required=True,
        required_fields=("background", "inputsOrSources"),
        completion_rules=(RuleSet(all_of=(_threshold(FieldKey.CONTEXT, 0.4),)),),
        done_criteria=(
            "Complete when the user provides relevant background, source material, "
            "or data the model should use."
        ),
        follow_up_question="What background information, source material, or data should the model use?",
    ),
    StageDefinition(
        key="constraints",
        label="Constraints",
        required=True,
        required_fields=("limits", "nonGoalsOrBoundaries"),
        completion_rules=(
            RuleSet(
                any_of=(
                    _threshold(FieldKey.CONSTRAINTS, 0.4),
                    _threshold(FieldKey.NON_GOALS, 0.35),
                )
            ),
        ),
        done_criteria=(
            "Complete when hard constraints are clear (scope, tone, length, boundaries, "
            "or forbidden content)."
        ),
        follow_up_question=(
            "What constraints should I enforce (length, tone, boundaries, must/avoid requirements)?"
        ),
    ),
    StageDefinition(
        key="outputFormat",
        label="Output Format",
        required=True,
        required_fields=("structure", "deliveryStyle"),
        completion_rules=(
            RuleSet(
                any_of=(
                    _threshold(FieldKey.OUTPUT_FORMAT, 0.4),
                    _threshold(FieldKey.TONE, 0.35),
                )
            ),
        ),
        done_criteria=(
            "Complete when expected output structure is explicit (format, sections, "
            "bullets/table/json, etc.)."
        ),
        follow_up_question=(
            "How should the final answer be formatted (for example: bullets, table, JSON schema, sections)?"
        ),
    ),
    StageDefinition(
        key="qualityBar",
        label="Quality Bar",
        required=False,
        required_fields=("evaluationCriteria",),
        completion_rules=(RuleSet(all_of=(_threshold(FieldKey.ACCEPTANCE_CRITERIA, 0.35),)),),
        done_criteria=(
            "Complete when measurable quality criteria are provided (accuracy, depth, "
            "citations, checklist, edge cases)."
        ),
        follow_up_question=(
            "What quality bar should the response meet (e.g., depth, accuracy checks, "
            "citation style, acceptance criteria)?"
        ),
    ),
    StageDefinition(
        key="examples",
        label="Examples",
        required=False,
        required_fields=("sampleInputOrOutput",),
        completion_rules=(RuleSet(all_of=(_threshold(FieldKey.EXAMPLES, 0.35),)),),
        done_criteria=(
            "Complete when there is at least one example of desired (or undesired) input/output style."
        ),
        follow_up_question=(
            "Do you have an example of a good output (or a bad one to avoid) so I can match style and quality?"
        ),
    ),
)


DEFAULT_SCHEMA = SchemaRegistry(fields=FIELD_DEFINITIONS, stages=STAGE_DEFINITIONS)
