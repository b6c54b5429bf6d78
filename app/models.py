# app/models.py

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

# --- Leaderboard Models ---
class ScoreSubmission(BaseModel):
    playerName: str = Field(min_length=1, max_length=50)
    score: int = Field(ge=0, strict=True)
    country: Optional[str] = Field(default=None, min_length=2, max_length=2)

class LeaderboardEntry(BaseModel):
    id: str
    playerName: str
    score: int
    country: str
    createdAt: datetime
    updatedAt: datetime

class TotalScore(BaseModel):
    totalScore: int

# --- Account Models ---
class CreateAccount(BaseModel):
    username: str = Field(min_length=3, max_length=20)
    email: EmailStr

class SetPassword(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=6)

class Login(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

class EmailToken(BaseModel):
    email: str
    username: str
    token: str
    expiresAt: datetime
    createdAt: datetime

class TokenInfo(BaseModel):
    email: str
    username: str
    expiresAt: datetime

# --- User Model for Database/Frontend (never carries the password hash) ---
class User(BaseModel):
    id: str
    username: str
    email: str
    emailVerified: Optional[datetime] = None
    createdAt: datetime
