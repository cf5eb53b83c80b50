"""
Data Models for Sportsbook AI Features

Pydantic models for the domain inputs each feature builder accepts, and
TypedDict records describing the JSON each feature gets back.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, TypedDict

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Input Models
# ============================================================================

PitchCharacter = Literal['batting-friendly', 'bowling-friendly', 'balanced']


class OddsSuggesterInputs(BaseModel):
    """Match facts entered in the admin odds suggester."""
    homeTeam: str
    awayTeam: str
    competition: str
    venue: str
    homeForm: str = ""  # e.g. "W,L,W,D,W"
    awayForm: str = ""
    h2h: str = ""  # home wins - draws - away wins, e.g. "12-0-8"
    homeAdvantage: float = Field(default=0.6, ge=0.0, le=1.0)
    keyInjuries: str = ""
    pitchCharacter: PitchCharacter = 'balanced'
    weather: str = ""
    startTime: Optional[datetime] = None


class Runner(BaseModel):
    name: str
    odds: float = Field(gt=1.0)


class Market(BaseModel):
    id: str
    name: str
    runners: List[Runner] = Field(default_factory=list)


class MatchEvent(BaseModel):
    """Listed sportsbook event."""
    id: str
    sportId: str
    teamA: str
    teamB: str
    time: str
    isLive: bool = False
    markets: List[Market] = Field(default_factory=list)
    competition: str
    venue: str
    form: str = ""
    h2h: str = ""
    keyInjuries: List[str] = Field(default_factory=list)
    pitchCharacter: PitchCharacter = 'balanced'
    weather: str = ""


class Selection(BaseModel):
    """One leg on the betslip."""
    eventId: str
    eventTitle: str
    marketId: str
    marketName: str
    runnerName: str
    odds: float = Field(gt=1.0)


class UserProfile(BaseModel):
    user_id: str
    risk_appetite: Literal['low', 'medium', 'high'] = 'medium'
    favorite_sports: List[str] = Field(default_factory=list)
    favorite_teams: List[str] = Field(default_factory=list)
    account_age_days: int = Field(default=0, ge=0)
    avg_stake: float = Field(default=0.0, ge=0.0)


class Account(BaseModel):
    balance: float
    currency: str = "USD"


class FraudCheckInputs(BaseModel):
    """Bet about to be placed, with the context fraud triage needs."""
    selections: List[Selection] = Field(min_length=1)
    stake: float = Field(gt=0)
    account: Account
    profile: UserProfile
    recent_activity: str = ""


class KycDocument(BaseModel):
    """Uploaded identity document image."""
    data: bytes = Field(min_length=1)
    mime_type: str

    @field_validator('mime_type')
    @classmethod
    def must_be_image(cls, v: str) -> str:
        if not v.startswith('image/'):
            raise ValueError(f"KYC documents must be images, got '{v}'")
        return v


class SettlementExplainerInputs(BaseModel):
    bet_id: str
    selection_details: str
    final_outcome: str
    settlement_status: Literal['Won', 'Lost', 'Void', 'Push', 'Half Won', 'Half Lost']
    special_circumstances: str = ""


class LiveUpdate(BaseModel):
    """Raw ball-by-ball feed item."""
    id: str
    eventId: str = ""
    over: str
    raw_event_text: str
    score: str = ""
    micro_summary: Optional[str] = None


class BettingAdviceInputs(BaseModel):
    selections: List[Selection] = Field(min_length=1)
    profile: UserProfile
    account: Account
    question: Optional[str] = None
    stake: Optional[float] = Field(default=None, gt=0)


class PromotionInputs(BaseModel):
    betting_history: str = Field(min_length=1)


class ChatMessageInputs(BaseModel):
    text: str = Field(min_length=1)


# ============================================================================
# Output Records
# ============================================================================

class OddsOutcome(TypedDict):
    odds: Optional[float]
    implied_prob: Optional[float]


class OddsAnalysis(TypedDict):
    home: OddsOutcome
    draw: OddsOutcome
    away: OddsOutcome
    book_margin_percent: float
    rationale_short: str
    notes: Optional[str]


class FraudCheck(TypedDict):
    risk_score: float
    risk_level: str  # low | medium | high
    flags: List[str]
    recommended_action: str  # allow | review | block
    rationale_short: str


class KycCheck(TypedDict):
    id_type: Optional[str]
    extracted_name: Optional[str]
    extracted_dob: Optional[str]
    is_clear: bool
    all_corners_visible: bool
    quality_notes: str


class ModerationResult(TypedDict):
    is_approved: bool
    rejection_reason: Optional[str]
    violation_category: Optional[str]


class SettlementExplanation(TypedDict):
    human_explanation: str
    audit_json: Dict[str, Any]


class LiveCommentary(TypedDict):
    micro_summary: str
    event_type: str


class Promotion(TypedDict):
    offer_type: str
    bonus_amount: float
    promo_code: str
    description: str


class RecommendedStake(TypedDict):
    percent: float


class BettingAdvice(TypedDict):
    reply: str
    confidence: str  # low | medium | high
    rationale_short: str
    recommended_stake: RecommendedStake
