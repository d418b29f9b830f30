import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from mdchunk.document.nodes import FORMATTING_TYPES

logger = logging.getLogger(__name__)

RuleKey = Literal[
    "link",
    "image",
    "strong",
    "emphasis",
    "delete",
    "formatting",
    "list",
    "table",
    "blockquote",
    "code",
]

SplitRuleName = Literal["never-split", "allow-split", "size-split"]


class SplitRule(BaseModel):
    rule: SplitRuleName
    size: int | None = Field(default=None, gt=0)

    class Config:
        extra = "forbid"
        frozen = True

    @model_validator(mode="after")
    def _require_size(self) -> "SplitRule":
        if self.rule == "size-split" and self.size is None:
            raise ValueError("size-split rule requires a size")
        return self


class NodeRule(BaseModel):
    """Per-construct behavior.

    ``split`` accepts the short form ``"never-split"`` / ``"allow-split"``
    or a mapping such as ``{"rule": "size-split", "size": 500}``.
    ``transform`` runs during preprocessing and may return a replacement
    node, the node itself, or ``None`` to drop it.
    """

    split: SplitRule | None = None
    transform: Callable[..., Any] | None = None

    class Config:
        extra = "forbid"
        frozen = True

    @field_validator("split", mode="before")
    @classmethod
    def _expand_simple_rule(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"rule": value}
        return value


def default_rules() -> dict[str, NodeRule]:
    return {
        "link": NodeRule(split="never-split"),
        "image": NodeRule(split="never-split"),
    }


class SplitterOptions(BaseModel):
    chunk_size: int = Field(gt=0, strict=True)
    max_overflow_ratio: float = 1.0
    max_raw_size: int | None = Field(default=None, gt=0)
    rules: dict[RuleKey, NodeRule] = Field(default_factory=default_rules)

    # Tie-break tuning, see the text splitter
    min_fragment_ratio: float = Field(default=0.2, ge=0)
    structural_min_ratio: float = Field(default=0.3, ge=0)
    structural_max_ratio: float = Field(default=1.5, gt=0)
    raw_search_ratio: float = Field(default=0.8, ge=0, lt=1)

    class Config:
        extra = "forbid"
        frozen = True

    @field_validator("max_overflow_ratio")
    @classmethod
    def _clamp_overflow_ratio(cls, value: float) -> float:
        # sub-1.0 overflow is meaningless
        return max(1.0, value)

    @field_validator("rules", mode="before")
    @classmethod
    def _expand_rule_shorthand(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        expanded = {}
        for key, rule in value.items():
            if isinstance(rule, str) or (isinstance(rule, dict) and "rule" in rule):
                rule = {"split": rule}
            expanded[key] = rule
        return expanded

    @property
    def max_allowed_size(self) -> float:
        return self.chunk_size * self.max_overflow_ratio

    def rule_for(self, node_type: str) -> NodeRule | None:
        rule = self.rules.get(node_type)
        if (rule is None or rule.split is None) and node_type in FORMATTING_TYPES:
            return self.rules.get("formatting", rule)
        return rule

    def split_rule_for(self, node_type: str) -> SplitRule | None:
        rule = self.rule_for(node_type)
        return rule.split if rule else None

    @classmethod
    def from_yaml(cls, file_path: str | Path) -> "SplitterOptions":
        logger.info("Loading splitter options from: %s", file_path)
        with open(file_path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)
