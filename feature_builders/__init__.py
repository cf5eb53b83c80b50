"""
Sportsbook AI Feature Builders

Prompt + schema builders for each AI feature, all routed through the
Gemini completion client.
"""

from .builders import (
    FEATURES,
    FeatureDefinition,
    analyze_event_odds,
    check_kyc_document,
    explain_settlement,
    generate_betting_advice,
    generate_live_commentary,
    generate_personalized_promotion,
    moderate_chat_message,
    run_feature,
    suggest_odds,
    triage_fraud,
)

__all__ = [
    "FEATURES",
    "FeatureDefinition",
    "analyze_event_odds",
    "check_kyc_document",
    "explain_settlement",
    "generate_betting_advice",
    "generate_live_commentary",
    "generate_personalized_promotion",
    "moderate_chat_message",
    "run_feature",
    "suggest_odds",
    "triage_fraud",
]
