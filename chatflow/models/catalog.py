"""
Model catalog.

Selectable model identifiers with their display labels.

Dependencies: pydantic
System role: Model selection contract
"""

from pydantic import BaseModel


class ModelOption(BaseModel):
    """One selectable model."""

    value: str
    label: str


DEFAULT_MODEL = "gpt-4-mini"

MODEL_CATALOG: tuple[ModelOption, ...] = (
    ModelOption(value="gpt-4-mini", label="GPT-4 Mini"),
    ModelOption(value="gpt-4", label="GPT-4"),
    ModelOption(value="gpt-4-mini-high", label="GPT-4 Mini High"),
    ModelOption(value="gpt-3", label="GPT-3.5"),
    ModelOption(value="gpt-3-mini", label="GPT-3.5 Mini"),
    ModelOption(value="gemini-flash", label="Gemini Flash"),
    ModelOption(value="gemini-pro", label="Gemini Pro"),
    ModelOption(value="claude-sonnet-4", label="Claude Sonnet 4"),
    ModelOption(value="claude-opus-4", label="Claude Opus 4"),
    ModelOption(value="grok-4", label="Grok 4"),
    ModelOption(value="deepseek", label="DeepSeek"),
)


def is_known_model(model_id: str) -> bool:
    return any(option.value == model_id for option in MODEL_CATALOG)
