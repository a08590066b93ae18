from pydantic import BaseModel, ConfigDict
from typing import Dict, List, Optional
from datetime import datetime

class TournamentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    year: int
    is_active: bool
    created_at: Optional[datetime] = None
    is_locked_manual: bool
    lock_at: Optional[datetime] = None

class LockStatusResponse(BaseModel):
    state: str  # OPEN | LOCKED
    is_locked: bool
    message: str

class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    name: str
    seed: Optional[int] = None

class MatchupResponse(BaseModel):
    """A matchup row as stored (round > 1 rows have no team names)."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    region: str
    round: int
    match_order: int
    team1_name: Optional[str] = None
    team2_name: Optional[str] = None
    team1_seed: Optional[int] = None
    team2_seed: Optional[int] = None
    winner: Optional[str] = None

class CompetitorView(BaseModel):
    name: str
    seed: Optional[int] = None

class ResolvedMatchup(BaseModel):
    """A matchup with its competitors derived for one reading of the bracket."""
    id: int
    region: str
    round: int
    round_label: str
    match_order: int
    team1: Optional[CompetitorView] = None  # None renders as TBD
    team2: Optional[CompetitorView] = None
    winner: Optional[str] = None  # official outcome
    pick: Optional[str] = None  # the viewed user's pick, if any
    is_correct: Optional[bool] = None  # None until decided and picked

class BracketView(BaseModel):
    tournament_id: int
    user_id: Optional[str] = None  # None = official bracket
    lock: LockStatusResponse
    champions: Dict[str, Optional[CompetitorView]]
    matchups: List[ResolvedMatchup]

class PickResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    matchup_id: int
    chosen_winner: str
    updated_at: Optional[datetime] = None

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    display_name: str
    avatar_url: Optional[str] = None
    role: str

class PublicUserResponse(BaseModel):
    """Other users' profiles are shown without e-mail."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    display_name: str
    avatar_url: Optional[str] = None

class AdminPickView(BaseModel):
    """A pick with its matchup slot, for the admin pick editor."""
    id: int
    user_id: str
    display_name: str
    matchup_id: int
    region: str
    round: int
    match_order: int
    team1_name: Optional[str] = None  # stored teams; later rounds are derived
    team2_name: Optional[str] = None
    winner: Optional[str] = None
    chosen_winner: str
    updated_at: Optional[datetime] = None
