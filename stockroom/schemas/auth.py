from pydantic import BaseModel, EmailStr, Field
from typing import Dict, List, Optional
from datetime import datetime

class Token(BaseModel):
    access_token: str
    token_type: str

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    full_name: Optional[str] = None
    role: str = "Staff"

class UserResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str]
    is_active: bool
    role_id: str
    role_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class PermissionsResponse(BaseModel):
    user_id: str
    email: str
    role: str
    permissions: Dict[str, List[str]]
