"""
Gemini Response Schemas for the sportsbook features.

Each descriptor is passed to the completion client as the requested output
shape and is also what the response is validated against. The required list
of every schema names exactly the fields the caller reads.
"""

from gemini_client.schema import array, boolean, number, obj, string


def _odds_outcome(label: str):
    return obj(
        {
            "odds": number(f"Decimal odds for {label}, 3 decimals", nullable=True),
            "implied_prob": number(f"Implied probability for {label} in percent, 2 decimals", nullable=True),
        },
        required=["odds", "implied_prob"],
    )


ODDS_ANALYSIS_SCHEMA = obj(
    {
        "home": _odds_outcome("the home side"),
        "draw": _odds_outcome("a draw"),
        "away": _odds_outcome("the away side"),
        "book_margin_percent": number("Total implied probability minus 100"),
        "rationale_short": string("Conservative reasoning, at most 120 characters"),
        "notes": string("Why any numeric field is null", nullable=True),
    },
    required=["home", "draw", "away", "book_margin_percent", "rationale_short", "notes"],
)

FRAUD_CHECK_SCHEMA = obj(
    {
        "risk_score": number("Fraud risk from 0 (none) to 100 (certain)"),
        "risk_level": string("Risk band", enum=["low", "medium", "high"]),
        "flags": array(string(), "Short machine-readable risk indicators"),
        "recommended_action": string("Operator action", enum=["allow", "review", "block"]),
        "rationale_short": string("One-sentence justification, at most 160 characters"),
    },
    required=["risk_score", "risk_level", "flags", "recommended_action", "rationale_short"],
)

KYC_CHECK_SCHEMA = obj(
    {
        "id_type": string("Passport, Driving Licence, National ID or Unknown", nullable=True),
        "extracted_name": string("Full name as printed", nullable=True),
        "extracted_dob": string("Date of birth as YYYY-MM-DD", nullable=True),
        "is_clear": boolean("Text is sharp and readable, no glare"),
        "all_corners_visible": boolean("All four document corners are in frame"),
        "quality_notes": string("Short note on image quality"),
    },
    required=["id_type", "extracted_name", "extracted_dob", "is_clear", "all_corners_visible", "quality_notes"],
)

MODERATION_SCHEMA = obj(
    {
        "is_approved": boolean("True if the message may be shown in chat"),
        "rejection_reason": string("User-facing reason when rejected", nullable=True),
        "violation_category": string(
            "Policy category when rejected",
            nullable=True,
            enum=["harassment", "hate_speech", "spam", "self_harm", "illegal_betting", "personal_data", "other"],
        ),
    },
    required=["is_approved", "rejection_reason", "violation_category"],
)

SETTLEMENT_SCHEMA = obj(
    {
        "human_explanation": string("Plain-language explanation for the customer"),
        "audit_json": obj(
            {
                "bet_id": string(),
                "settlement_status": string(),
                "rule_applied": string("Name of the settlement rule that applies"),
                "payout_effect": string("Effect on the stake and returns"),
            },
            description="Structured record for the settlement audit trail",
        ),
    },
    required=["human_explanation", "audit_json"],
)

LIVE_COMMENTARY_SCHEMA = obj(
    {
        "micro_summary": string("Punchy summary of the event, at most 80 characters"),
        "event_type": string(
            "Kind of event",
            enum=["wicket", "boundary", "six", "milestone", "dot_ball", "extra", "other"],
        ),
    },
    required=["micro_summary", "event_type"],
)

PROMOTION_SCHEMA = obj(
    {
        "offer_type": string(
            "The type of offer (e.g., 'Free Bet', 'Odds Boost', 'Cashback').",
            enum=["Free Bet", "Odds Boost", "Cashback"],
        ),
        "bonus_amount": number(
            "The value of the bonus. For Odds Boost, this is the percentage boost. "
            "For others, it's a dollar amount."
        ),
        "promo_code": string("A short, catchy promotional code."),
        "description": string("A compelling, personalized description of the promotion for the user."),
    },
    required=["offer_type", "bonus_amount", "promo_code", "description"],
)

BETTING_ADVICE_SCHEMA = obj(
    {
        "reply": string("Direct answer to the user's question, at most 200 characters"),
        "confidence": string("Confidence in the advice", enum=["low", "medium", "high"]),
        "rationale_short": string("Reasoning, at most 120 characters"),
        "recommended_stake": obj(
            {"percent": number("Suggested stake as percent of balance, 0-5, 1 decimal")},
            required=["percent"],
        ),
    },
    required=["reply", "confidence", "rationale_short", "recommended_stake"],
)
