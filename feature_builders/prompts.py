"""
Prompt templates for the sportsbook features.

Templates use `${slot}` placeholders. Domain values are substituted verbatim.
"""

from string import Template
from typing import Any, FrozenSet


class PromptTemplate:
    """A named prompt with `${slot}` placeholders."""

    def __init__(self, name: str, text: str):
        self.name = name
        self.template = Template(text)
        self.slots: FrozenSet[str] = frozenset(
            match.group('named') or match.group('braced')
            for match in self.template.pattern.finditer(text)
            if match.group('named') or match.group('braced')
        )

    def render(self, **values: Any) -> str:
        """
        Fill every slot.

        Raises:
            ValueError: if a slot has no value
        """
        missing = sorted(self.slots - values.keys())
        if missing:
            raise ValueError(f"Prompt '{self.name}' is missing values for: {', '.join(missing)}")
        return self.template.substitute({k: _format_value(v) for k, v in values.items()}).strip()


def _format_value(value: Any) -> str:
    if value is None:
        return "n/a"
    if isinstance(value, float):
        text = f"{value:.10g}"
        # .10g goes exponential past 10 significant digits
        return repr(value) if 'e' in text else text
    return str(value)


ODDS_SUGGESTION_PROMPT = PromptTemplate("odds_suggestion", """
You are a professional sports odds analyst. Always respond **only** with JSON that strictly follows the schema below. Do not output any extra text, code fences, or explanations. Use short, conservative reasoning in the "rationale_short" field (<=120 chars). Use deterministic logic and do not hallucinate external data. If any numeric field cannot be estimated from inputs, return null for that field and set "notes" explaining why.

Generate suggested market odds for this event.

Match: ${home_team} vs ${away_team}
Competition: ${competition}
Start (ISO8601): ${start_time}
Venue: ${venue}
Inputs:
- home_form_last5: "${home_form}"
- away_form_last5: "${away_form}"
- head_to_head: "${h2h}"
- home_advantage_factor: ${home_advantage}
- key_injuries: "${key_injuries}"
- pitch_character: "${pitch_character}"
- weather_note: "${weather}"
Constraints:
- Output must be JSON matching schema below.
- Use decimal odds rounded to 3 decimals.
- Implied probability = 100 / decimal_odds rounded to 2 decimals.
- Ensure total implied probability >=100% and compute book_margin_percent accordingly.
- If the sport has no draw outcome, return null odds and implied_prob for "draw".
""")

FRAUD_TRIAGE_PROMPT = PromptTemplate("fraud_triage", """
You are a sportsbook risk analyst triaging a bet before it is accepted. Respond only with JSON matching the schema. Do not recompute the figures below; they are exact.

Bet:
- selections: ${selections}
- number_of_legs: ${leg_count}
- stake: ${stake} ${currency}
- total_odds: ${total_odds}
- potential_payout: ${potential_payout} ${currency}
- bet_as_percent_of_balance: ${bet_as_percent_of_balance}

Account:
- user_id: ${user_id}
- balance: ${balance} ${currency}
- account_age_days: ${account_age_days}
- average_stake: ${avg_stake} ${currency}
- declared_risk_appetite: ${risk_appetite}
- recent_activity: "${recent_activity}"

Constraints:
- risk_score is a number in range 0-100 (0 = no risk, 100 = certain fraud or abuse).
- risk_level: "low" for 0-33, "medium" for 34-66, "high" for 67-100.
- recommended_action: "allow", "review" or "block", consistent with risk_level.
- flags are short snake_case indicators, e.g. "stake_far_above_average", "new_account_high_stake".
- rationale_short is at most 160 characters.
""")

KYC_CHECK_PROMPT = PromptTemplate("kyc_check", """
You are a KYC document verification assistant. The attached image should be a government-issued identity document. Respond only with JSON matching the schema.

Tasks:
- Identify the document type (Passport, Driving Licence, National ID) or "Unknown".
- Extract the full name and the date of birth exactly as printed; format the date as YYYY-MM-DD.
- Set is_clear to true only if all text is sharp and readable with no glare.
- Set all_corners_visible to true only if all four corners of the document are in frame.
- quality_notes: one short sentence on image quality or what to fix.
If a field cannot be read, return null for it rather than guessing.
""")

CHAT_MODERATION_PROMPT = PromptTemplate("chat_moderation", """
You are a content moderator for a sportsbook live chat. Decide whether the message below may be shown to other users. Respond only with JSON matching the schema.

Reject messages containing harassment, hate speech, spam or advertising, self-harm content, promotion of illegal or unlicensed betting, or personal data (phone numbers, emails, addresses). Banter about teams and players is allowed.

If approved, set rejection_reason and violation_category to null. If rejected, give a short, polite, user-facing rejection_reason.

Message: "${message}"
""")

SETTLEMENT_EXPLANATION_PROMPT = PromptTemplate("settlement_explanation", """
You are a sportsbook customer support specialist. Explain the settlement of the bet below to the customer in plain, friendly language (at most 3 sentences). Do not change the settlement status. Respond only with JSON matching the schema.

Bet ID: ${bet_id}
Selection: ${selection_details}
Final outcome: ${final_outcome}
Settlement status: ${settlement_status}
Special circumstances: ${special_circumstances}

audit_json must repeat bet_id and settlement_status exactly as given, name the settlement rule applied, and state the effect on stake and returns (e.g. "stake refunded").
""")

LIVE_COMMENTARY_PROMPT = PromptTemplate("live_commentary", """
You are a live cricket commentator writing micro-copy for a betting app. Turn the raw feed item below into one punchy line (at most 80 characters, no hashtags, no betting advice). Respond only with JSON matching the schema.

Over: ${over}
Score: ${score}
Raw event: "${raw_event_text}"
""")

PROMOTION_PROMPT = PromptTemplate("promotion", """
Based on the following user betting history, generate a single personalized promotion.
The user's history is: "${betting_history}".

Analyze the user's preferences (favorite sports, teams, bet types) and generate a compelling, relevant, and personalized promotion.
The promotion must be one of the following types: 'Free Bet', 'Odds Boost', or 'Cashback'.
Ensure the description is exciting and mentions why this offer is tailored for them.
The promo code should be catchy and related to the user's preferences.
bonus_amount: percentage for Odds Boost (5-50), amount in account currency for the others (5-50), whole numbers.
""")

BETTING_ADVICE_PROMPT = PromptTemplate("betting_advice", """
You are BettCoach, a responsible-gambling assistant. Answer the user's question about their betslip. Respond only with JSON matching the schema. Never encourage chasing losses or staking more than the user can afford.

Question: ${question}
Betslip: ${context}
Bet type: ${bet_type}
Total odds: ${total_odds}
Implied probability of the betslip winning: ${implied_probability}%
Proposed stake: ${stake}

User profile:
- risk_appetite: ${risk_appetite}
- favorite_sports: ${favorite_sports}
- favorite_teams: ${favorite_teams}
- balance: ${balance} ${currency}

Constraints:
- recommended_stake.percent is the suggested stake as a percent of balance, in range 0-5, 1 decimal.
- Cap recommended_stake.percent at ${max_stake_percent} for this risk appetite.
- confidence is "low", "medium" or "high".
- reply at most 200 characters, rationale_short at most 120 characters.
""")
