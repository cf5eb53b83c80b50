"""
Feature Request Builders

One builder per sportsbook feature. A builder turns typed domain input into
prompt slots, renders the feature's template and hands the prompt plus the
feature's schema to the completion client. Whatever the client returns is
passed back untouched.

Arithmetic the caller already knows (parlay odds, stake as a share of the
balance, payouts) is computed here so the model only explains, never derives.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from gemini_client import DEFAULT_MODEL, CompletionClient, InlinePart, SchemaField, TextPart
from gemini_client.client import ContentPart

from .models import (
    BettingAdvice,
    BettingAdviceInputs,
    FraudCheck,
    FraudCheckInputs,
    KycCheck,
    KycDocument,
    LiveCommentary,
    LiveUpdate,
    MatchEvent,
    ModerationResult,
    OddsAnalysis,
    OddsSuggesterInputs,
    Promotion,
    Selection,
    SettlementExplainerInputs,
    SettlementExplanation,
)
from .prompts import (
    BETTING_ADVICE_PROMPT,
    CHAT_MODERATION_PROMPT,
    FRAUD_TRIAGE_PROMPT,
    KYC_CHECK_PROMPT,
    LIVE_COMMENTARY_PROMPT,
    ODDS_SUGGESTION_PROMPT,
    PROMOTION_PROMPT,
    SETTLEMENT_EXPLANATION_PROMPT,
    PromptTemplate,
)
from .schemas import (
    BETTING_ADVICE_SCHEMA,
    FRAUD_CHECK_SCHEMA,
    KYC_CHECK_SCHEMA,
    LIVE_COMMENTARY_SCHEMA,
    MODERATION_SCHEMA,
    ODDS_ANALYSIS_SCHEMA,
    PROMOTION_SCHEMA,
    SETTLEMENT_SCHEMA,
)

logger = logging.getLogger(__name__)

# Home advantage assumed when an event listing carries none
DEFAULT_HOME_ADVANTAGE = 0.6

# Upper bound on recommended stake (percent of balance) per risk appetite
MAX_STAKE_PERCENT = {
    'low': 1.0,
    'medium': 2.5,
    'high': 5.0,
}


@dataclass(frozen=True)
class FeatureDefinition:
    """Prompt template and output schema of one feature."""
    name: str
    template: PromptTemplate
    schema: SchemaField


ODDS_SUGGESTION = FeatureDefinition("odds_suggestion", ODDS_SUGGESTION_PROMPT, ODDS_ANALYSIS_SCHEMA)
FRAUD_TRIAGE = FeatureDefinition("fraud_triage", FRAUD_TRIAGE_PROMPT, FRAUD_CHECK_SCHEMA)
KYC_CHECK = FeatureDefinition("kyc_check", KYC_CHECK_PROMPT, KYC_CHECK_SCHEMA)
CHAT_MODERATION = FeatureDefinition("chat_moderation", CHAT_MODERATION_PROMPT, MODERATION_SCHEMA)
SETTLEMENT_EXPLANATION = FeatureDefinition(
    "settlement_explanation", SETTLEMENT_EXPLANATION_PROMPT, SETTLEMENT_SCHEMA
)
LIVE_COMMENTARY = FeatureDefinition("live_commentary", LIVE_COMMENTARY_PROMPT, LIVE_COMMENTARY_SCHEMA)
PROMOTION = FeatureDefinition("promotion", PROMOTION_PROMPT, PROMOTION_SCHEMA)
BETTING_ADVICE = FeatureDefinition("betting_advice", BETTING_ADVICE_PROMPT, BETTING_ADVICE_SCHEMA)

FEATURES: Dict[str, FeatureDefinition] = {
    feature.name: feature
    for feature in (
        ODDS_SUGGESTION,
        FRAUD_TRIAGE,
        KYC_CHECK,
        CHAT_MODERATION,
        SETTLEMENT_EXPLANATION,
        LIVE_COMMENTARY,
        PROMOTION,
        BETTING_ADVICE,
    )
}


# ============================================================================
# Derived values
# ============================================================================

def total_odds(selections: Sequence[Selection]) -> float:
    """Combined decimal odds of all legs, rounded to 3 decimals."""
    return round(math.prod(s.odds for s in selections), 3)


def percent_of_balance(stake: float, balance: float) -> Optional[float]:
    """Stake as a percentage of the balance (2 decimals); None if the balance is not positive."""
    if balance <= 0:
        return None
    return round(stake / balance * 100, 2)


def describe_selections(selections: Sequence[Selection]) -> str:
    return ", ".join(f"{s.runnerName} to win in '{s.marketName}' @ {s.odds:g}" for s in selections)


def describe_stake(stake: Optional[float], balance: float, currency: str) -> str:
    if not stake:
        return "not set"
    share = percent_of_balance(stake, balance)
    if share is None:
        return f"{stake:.2f} {currency}"
    return f"{stake:.2f} {currency} ({share:g}% of balance)"


def split_form(form: str) -> List[str]:
    """Split "home | away" form strings; a single form applies to both sides."""
    if '|' in form:
        home, away = form.split('|', 1)
        return [home.strip(), away.strip()]
    return [form.strip(), form.strip()]


# ============================================================================
# Shared execution
# ============================================================================

async def run_feature(
    client: CompletionClient,
    feature: FeatureDefinition,
    slots: Dict[str, Any],
    attachments: Sequence[ContentPart] = (),
    model: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Render a feature's prompt and send it with the feature's schema.

    Args:
        client: Completion client
        feature: Feature definition (template + schema)
        slots: Values for the template placeholders
        attachments: Extra content parts sent after the prompt text
        model: Model override, DEFAULT_MODEL otherwise

    Returns:
        The client's result, unchanged
    """
    prompt = feature.template.render(**slots)
    content = [TextPart(prompt), *attachments]
    logger.debug(f"Running feature {feature.name} with {len(content)} content part(s)")
    return await client.complete(model or DEFAULT_MODEL, content, feature.schema)


# ============================================================================
# Builders
# ============================================================================

async def suggest_odds(
    client: CompletionClient,
    inputs: OddsSuggesterInputs,
    model: Optional[str] = None,
) -> Optional[OddsAnalysis]:
    """Suggest 1X2 market odds for a match from the admin suggester form."""
    start_time = inputs.startTime or datetime.now(timezone.utc)
    slots = {
        "home_team": inputs.homeTeam,
        "away_team": inputs.awayTeam,
        "competition": inputs.competition,
        "start_time": start_time.isoformat(),
        "venue": inputs.venue,
        "home_form": inputs.homeForm,
        "away_form": inputs.awayForm,
        "h2h": inputs.h2h,
        "home_advantage": inputs.homeAdvantage,
        "key_injuries": inputs.keyInjuries or "none",
        "pitch_character": inputs.pitchCharacter,
        "weather": inputs.weather,
    }
    return await run_feature(client, ODDS_SUGGESTION, slots, model=model)


def event_to_odds_inputs(event: MatchEvent) -> OddsSuggesterInputs:
    home_form, away_form = split_form(event.form)
    return OddsSuggesterInputs(
        homeTeam=event.teamA,
        awayTeam=event.teamB,
        competition=event.competition,
        venue=event.venue,
        homeForm=home_form,
        awayForm=away_form,
        h2h=event.h2h,
        homeAdvantage=DEFAULT_HOME_ADVANTAGE,
        keyInjuries=", ".join(event.keyInjuries),
        pitchCharacter=event.pitchCharacter,
        weather=event.weather,
    )


async def analyze_event_odds(
    client: CompletionClient,
    event: MatchEvent,
    model: Optional[str] = None,
) -> Optional[OddsAnalysis]:
    """Odds analysis for a listed event (the per-event AI odds view)."""
    return await suggest_odds(client, event_to_odds_inputs(event), model=model)


async def triage_fraud(
    client: CompletionClient,
    inputs: FraudCheckInputs,
    model: Optional[str] = None,
) -> Optional[FraudCheck]:
    """Score a bet for fraud or abuse risk before it is accepted."""
    combined_odds = math.prod(s.odds for s in inputs.selections)
    slots = {
        "selections": describe_selections(inputs.selections),
        "leg_count": len(inputs.selections),
        "stake": inputs.stake,
        "currency": inputs.account.currency,
        "total_odds": round(combined_odds, 3),
        "potential_payout": round(inputs.stake * combined_odds, 2),
        "bet_as_percent_of_balance": percent_of_balance(inputs.stake, inputs.account.balance),
        "user_id": inputs.profile.user_id,
        "balance": inputs.account.balance,
        "account_age_days": inputs.profile.account_age_days,
        "avg_stake": inputs.profile.avg_stake,
        "risk_appetite": inputs.profile.risk_appetite,
        "recent_activity": inputs.recent_activity or "none reported",
    }
    return await run_feature(client, FRAUD_TRIAGE, slots, model=model)


async def check_kyc_document(
    client: CompletionClient,
    document: KycDocument,
    model: Optional[str] = None,
) -> Optional[KycCheck]:
    """Read an identity document image and report extracted fields and image quality."""
    attachment = InlinePart(data=document.data, mime_type=document.mime_type)
    return await run_feature(client, KYC_CHECK, {}, attachments=[attachment], model=model)


async def moderate_chat_message(
    client: CompletionClient,
    message: str,
    model: Optional[str] = None,
) -> Optional[ModerationResult]:
    return await run_feature(client, CHAT_MODERATION, {"message": message}, model=model)


async def explain_settlement(
    client: CompletionClient,
    inputs: SettlementExplainerInputs,
    model: Optional[str] = None,
) -> Optional[SettlementExplanation]:
    slots = {
        "bet_id": inputs.bet_id,
        "selection_details": inputs.selection_details,
        "final_outcome": inputs.final_outcome,
        "settlement_status": inputs.settlement_status,
        "special_circumstances": inputs.special_circumstances or "none",
    }
    return await run_feature(client, SETTLEMENT_EXPLANATION, slots, model=model)


async def generate_live_commentary(
    client: CompletionClient,
    update: LiveUpdate,
    model: Optional[str] = None,
) -> Optional[LiveCommentary]:
    slots = {
        "over": update.over,
        "score": update.score or "not provided",
        "raw_event_text": update.raw_event_text,
    }
    return await run_feature(client, LIVE_COMMENTARY, slots, model=model)


async def generate_personalized_promotion(
    client: CompletionClient,
    betting_history: str,
    model: Optional[str] = None,
) -> Optional[Promotion]:
    return await run_feature(client, PROMOTION, {"betting_history": betting_history}, model=model)


async def generate_betting_advice(
    client: CompletionClient,
    inputs: BettingAdviceInputs,
    model: Optional[str] = None,
) -> Optional[BettingAdvice]:
    """Responsible-gambling advice on the current betslip."""
    context = describe_selections(inputs.selections)
    combined_odds = total_odds(inputs.selections)
    legs = len(inputs.selections)
    slots = {
        "question": inputs.question or f"Should I place this bet: {context}?",
        "context": context,
        "bet_type": f"Parlay ({legs})" if legs > 1 else "Single",
        "total_odds": combined_odds,
        "implied_probability": round(100 / combined_odds, 2),
        "stake": describe_stake(inputs.stake, inputs.account.balance, inputs.account.currency),
        "risk_appetite": inputs.profile.risk_appetite,
        "favorite_sports": ", ".join(inputs.profile.favorite_sports) or "none",
        "favorite_teams": ", ".join(inputs.profile.favorite_teams) or "none",
        "balance": inputs.account.balance,
        "currency": inputs.account.currency,
        "max_stake_percent": MAX_STAKE_PERCENT[inputs.profile.risk_appetite],
    }
    return await run_feature(client, BETTING_ADVICE, slots, model=model)
