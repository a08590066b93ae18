from pydantic import BaseModel

class LeaderboardEntry(BaseModel):
    user_id: str
    display_name: str
    total_score: int
    correct_count: int
