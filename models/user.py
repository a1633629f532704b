# models/user.py
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator


class Role(str, Enum):
    """
    使用者角色 (封閉集合)。
    UNASSIGNED 對應資料庫中的 NULL：剛註冊、還沒被管理員指派角色的使用者。
    """

    ADMIN = "admin"
    PROJECT_MANAGER = "project_manager"
    TEAM_LEAD = "team_lead"
    DEVELOPER = "developer"
    UNASSIGNED = "unassigned"

    @classmethod
    def from_db(cls, value: str | None) -> "Role":
        if value is None:
            return cls.UNASSIGNED
        return cls(value)

    @classmethod
    def parse_assignable(cls, value) -> "Role | None":
        """只接受四種可指派的角色，其他值 (包含 'unassigned') 一律回傳 None"""
        try:
            role = cls(value)
        except ValueError:
            return None
        return role if role in ASSIGNABLE_ROLES else None

    def to_db(self) -> str | None:
        return None if self is Role.UNASSIGNED else self.value


ASSIGNABLE_ROLES = (Role.ADMIN, Role.PROJECT_MANAGER, Role.TEAM_LEAD, Role.DEVELOPER)


@dataclass(frozen=True)
class Actor:
    """目前發出請求的已登入使用者"""

    id: int
    role: Role
    name: str = ""
    email: str = ""
    token_id: int | None = None

    @classmethod
    def from_row(cls, user: dict, token_id: int | None = None) -> "Actor":
        return cls(
            id=user["id"],
            role=Role.from_db(user.get("role")),
            name=user.get("name") or "",
            email=user.get("email") or "",
            token_id=token_id,
        )


def public_user(user: dict) -> dict:
    """對外公開的使用者資料 (絕對不能帶出密碼雜湊)"""
    return {
        "id": user["id"],
        "name": user["name"],
        "email": user["email"],
        "role": user.get("role"),
        "created_at": user.get("created_at"),
        "updated_at": user.get("updated_at"),
    }


# --- 請求格式 (Request Schemas) ---

class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        # 格式已經由 EmailStr 檢查過，這裡只統一成小寫
        if len(value) > 255:
            raise ValueError("The email field must not be greater than 255 characters.")
        return value.lower()

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, value: str) -> str:
        # bcrypt 只看前 72 bytes，超過的直接擋掉
        if len(value.encode("utf-8")) > 72:
            raise ValueError("The password field must not be greater than 72 bytes.")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class AssignRoleRequest(BaseModel):
    user_id: int
    role: str
