import logging
from typing import Annotated, NewType

from dishka import FromDishka, Provider, Scope, provide
from dishka.integrations.fastapi import inject
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from expense_tracker.models import User
from expense_tracker.services.auth import UserLoginInteractor, UserRegisterInteractor
from expense_tracker.services.auth.errors import AuthenticationError
from expense_tracker.services.providers.protocols.token_provider import ITokenProvider
from expense_tracker.services.users import RetrieveUserInteractor


oauth2_scheme = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


class CurrentUserFinder:
    def __init__(
        self,
        token_encoder: ITokenProvider,
        retrieve_user_interactor: RetrieveUserInteractor,
    ):
        self.token_encoder = token_encoder
        self.retrieve_user_interactor = retrieve_user_interactor

    async def __call__(self, token: HTTPAuthorizationCredentials | None) -> User:
        if not token or not token.credentials:
            raise AuthenticationError()
        try:
            principal = self.token_encoder.decode_token(token.credentials)
        except Exception:
            logger.debug("Failed to decode token", exc_info=True)
            raise AuthenticationError()
        db_user = await self.retrieve_user_interactor.get(User.id == principal.user_id)
        if not db_user:
            logger.debug("Token refers to unknown user %s", principal.user_id)
            raise AuthenticationError()
        return db_user


@inject
async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(oauth2_scheme)],
    get_user: FromDishka[CurrentUserFinder],
) -> User:
    return await get_user(credentials)


_CurrentUser = NewType("_CurrentUser", User)
CurrentUserDependency = Depends(get_current_user)
CurrentUser = Annotated[_CurrentUser, CurrentUserDependency]


class AuthServicesProvider(Provider):
    scope = Scope.REQUEST

    register = provide(UserRegisterInteractor)
    login = provide(UserLoginInteractor)
    current_user = provide(CurrentUserFinder)

