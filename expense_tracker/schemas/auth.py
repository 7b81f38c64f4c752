from uuid import UUID

from pydantic import AliasChoices, EmailStr, Field

from expense_tracker.schemas.base import BaseSchema


class UserPrincipal(BaseSchema):
    user_id: UUID = Field(validation_alias=AliasChoices("user_id", "id"))


class UserRetrieveSchema(UserPrincipal):
    email: EmailStr
    name: str


class AuthenticationResponseSchema(BaseSchema):
    access_token: str
    user: UserRetrieveSchema


class RegisterSchema(BaseSchema):
    email: EmailStr
    name: str = Field(min_length=1)
    password: str = Field(min_length=3)


class LoginSchema(BaseSchema):
    email: EmailStr = Field(validation_alias=AliasChoices("email", "username"))
    password: str
