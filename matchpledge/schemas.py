from pydantic import BaseModel, ConfigDict
from datetime import datetime

# --- auth ------------------------------------------------------------

class UserCreate(BaseModel):
    username: str
    phone: str
    password: str

class LoginIn(BaseModel):
    username: str
    password: str

class PhoneLoginIn(BaseModel):
    phone: str
    password: str

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    phone: str
    balance: float

class AuthOut(BaseModel):
    user: UserOut
    token: str

# --- pledges ---------------------------------------------------------

class PledgeCreate(BaseModel):
    username: str
    phone: str
    selection: str
    amount: float
    fan: str = ""
    home_team: str = ""
    away_team: str = ""

class PledgeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    phone: str
    selection: str
    amount: float
    time: datetime
    fan: str
    home_team: str
    away_team: str
    created_at: datetime
    updated_at: datetime

class SelectionBreakdown(BaseModel):
    home_team: int
    away_team: int
    draw: int

class MatchRef(BaseModel):
    home_team: str
    away_team: str

class PledgeStatsOut(BaseModel):
    total_pledges: int
    total_amount: float
    selection_breakdown: SelectionBreakdown
    match: MatchRef

# --- games -----------------------------------------------------------

class GameCreate(BaseModel):
    home_team: str
    away_team: str
    league: str = ""
    home_win: str = ""
    away_win: str = ""
    draw: str = ""
    date: str = ""

class GameOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    home_team: str
    away_team: str
    league: str
    home_win: str
    away_win: str
    draw: str
    date: str
    status: str
    created_at: datetime

# --- posts -----------------------------------------------------------

class PostOut(BaseModel):
    """Public view of a post; the on-disk path stays server-side."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    user_name: str
    caption: str
    image_url: str
    created_at: datetime

class PostCreated(BaseModel):
    id: str
    image_url: str
    caption: str
    user_name: str
