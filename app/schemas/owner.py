from pydantic import BaseModel, EmailStr, field_validator
import re


# ─── Request ──────────────────────────────────────────────────────────────────
class OwnerCreateRequest(BaseModel):
    firstName:   str
    lastName:    str
    email:       EmailStr
    phoneNumber: str
    nationalId:  str

    @field_validator("firstName", "lastName")
    @classmethod
    def not_empty(cls, v):
        if not v.strip(): raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("phoneNumber")
    @classmethod
    def check_phone(cls, v):
        v = v.strip()
        if not re.fullmatch(r"\d{10}", v): raise ValueError("Phone number must be 10 digits")
        return v

    @field_validator("nationalId")
    @classmethod
    def check_national_id(cls, v):
        v = v.strip()
        if not re.fullmatch(r"\d{16}", v): raise ValueError("National ID must be 16 digits")
        return v
