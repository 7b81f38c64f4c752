import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.models import User
from expense_tracker.schemas.auth import LoginSchema, RegisterSchema
from expense_tracker.services.auth.errors import UserAlreadyExists, WrongPasswordError
from expense_tracker.services.providers.protocols.password_encoder import IPasswordEncoder
from expense_tracker.services.users import RetrieveUserInteractor

logger = logging.getLogger(__name__)


class UserRegisterInteractor:
    def __init__(
        self,
        session: AsyncSession,
        password_encoder: IPasswordEncoder,
        retrieve_user_interactor: RetrieveUserInteractor,
    ):
        self.session = session
        self.password_encoder = password_encoder
        self.retrieve_user_interactor = retrieve_user_interactor

    async def __call__(self, data: RegisterSchema) -> User:
        email = str(data.email).lower()
        if await self.retrieve_user_interactor.exists(User.email == email):
            raise UserAlreadyExists()

        user = User(
            id=uuid.uuid4(),
            email=email,
            name=data.name,
            password=self.password_encoder.hash_password(data.password),
        )

        try:
            self.session.add(user)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise UserAlreadyExists()

        logger.info("New user registered (user_id=%s)", user.id)
        return user


class UserLoginInteractor:
    def __init__(
        self,
        session: AsyncSession,
        password_encoder: IPasswordEncoder,
        retrieve_user_interactor: RetrieveUserInteractor,
    ):
        self.session = session
        self.password_encoder = password_encoder
        self.retrieve_user_interactor = retrieve_user_interactor

    async def __call__(self, data: LoginSchema) -> User:
        user = await self.retrieve_user_interactor.get(
            User.email == str(data.email).lower()
        )
        if not user or not self.password_encoder.verify(data.password, user.password):
            raise WrongPasswordError()
        if self.password_encoder.needs_rehash(user.password):
            user.password = self.password_encoder.hash_password(data.password)
            await self.session.commit()
            logger.info("Password hash upgraded (user_id=%s)", user.id)
        logger.info("User logged in (user_id=%s)", user.id)
        return user
