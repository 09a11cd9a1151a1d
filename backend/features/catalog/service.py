"""Catalog lookups used by templates and the studio API."""

import random
from dataclasses import asdict
from typing import List, Optional

from backend.core.errors import ValidationError
from backend.features.catalog.constants import (
    AI_MODELS,
    ANALYSIS_GOALS,
    DIALOGUE_LANGUAGES,
    IDEA_SUGGESTIONS,
    SOCIAL_MEDIA_PLATFORMS,
    VIDEO_DURATIONS,
    AIModel,
)

IDEA_TABS = {"text", "image", "image-edit", "video"}


def models_for_tab(tab: str) -> List[AIModel]:
    return [m for m in AI_MODELS if m.type == tab]


def default_model(tab: str) -> Optional[str]:
    models = models_for_tab(tab)
    return models[0].id if models else None


def find_model(model_id: str) -> Optional[AIModel]:
    for model in AI_MODELS:
        if model.id == model_id:
            return model
    return None


def supports_segments(model_id: str) -> bool:
    model = find_model(model_id)
    return bool(model and model.supports_segments)


def language_name(language_id: str) -> str:
    for language in DIALOGUE_LANGUAGES:
        if language["id"] == language_id:
            return language["name"]
    return language_id


def platform_name(platform_id: str) -> str:
    for platform in SOCIAL_MEDIA_PLATFORMS:
        if platform["id"] == platform_id:
            return platform["name"]
    return platform_id


def goal_name(goal_id: str) -> str:
    for goal in ANALYSIS_GOALS:
        if goal["id"] == goal_id:
            return goal["name"]
    return goal_id


def random_idea(tab: str, rng: Optional[random.Random] = None) -> str:
    """Pick a style suggestion for the tabs that take free text."""
    if tab not in IDEA_TABS:
        raise ValidationError(f"Ideias não estão disponíveis para a aba '{tab}'")
    return (rng or random).choice(IDEA_SUGGESTIONS)


def catalog_payload() -> dict:
    tabs = sorted({m.type for m in AI_MODELS})
    return {
        "models": {tab: [asdict(m) for m in models_for_tab(tab)] for tab in tabs},
        "dialogue_languages": DIALOGUE_LANGUAGES,
        "social_platforms": SOCIAL_MEDIA_PLATFORMS,
        "video_durations": VIDEO_DURATIONS,
        "analysis_goals": ANALYSIS_GOALS,
    }
