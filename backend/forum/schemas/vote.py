"""
Pydantic schemas for the vote ledger.
"""
from pydantic import BaseModel

class VoteIn(BaseModel):
    """
    "up" or "down" records a vote; any other value retracts the caller's vote.
    """
    type: str

class VoteTally(BaseModel):
    up: int = 0
    down: int = 0

    @property
    def net(self) -> int:
        return self.up - self.down

    def as_dict(self) -> dict:
        return {"up": self.up, "down": self.down, "net": self.net}
