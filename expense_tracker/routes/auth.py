from typing import Annotated

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter
from fastapi.params import Body
from starlette import status

from expense_tracker.deps.auth import CurrentUser
from expense_tracker.schemas.auth import (
    AuthenticationResponseSchema,
    LoginSchema,
    RegisterSchema,
    UserRetrieveSchema,
)
from expense_tracker.services.auth import UserLoginInteractor, UserRegisterInteractor
from expense_tracker.services.providers.protocols.token_provider import ITokenProvider

router = APIRouter(prefix="/auth", tags=["auth"], route_class=DishkaRoute)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterSchema,
    service: FromDishka[UserRegisterInteractor],
    token_encoder: FromDishka[ITokenProvider],
) -> AuthenticationResponseSchema:
    user = UserRetrieveSchema.model_validate(await service(data))
    return AuthenticationResponseSchema(
        user=user,
        access_token=token_encoder.encode_token(user),
    )


@router.post("/login")
async def login(
    data: Annotated[LoginSchema, Body()],
    service: FromDishka[UserLoginInteractor],
    token_encoder: FromDishka[ITokenProvider],
) -> AuthenticationResponseSchema:
    user = UserRetrieveSchema.model_validate(await service(data))
    return AuthenticationResponseSchema(
        user=user,
        access_token=token_encoder.encode_token(user),
    )


@router.get("/me")
async def get_me(user: CurrentUser) -> UserRetrieveSchema:
    return UserRetrieveSchema.model_validate(user)
