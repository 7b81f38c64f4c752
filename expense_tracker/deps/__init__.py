from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.schedulers.base import BaseScheduler
from dishka import AsyncContainer, Provider, Scope, make_async_container
from dishka.integrations.fastapi import FastapiProvider
from pydantic_settings import BaseSettings

from expense_tracker.deps.auth import AuthServicesProvider
from expense_tracker.deps.db import DbConnectionProvider
from expense_tracker.services.analytics import AnalyticsServicesProvider
from expense_tracker.services.limits import LimitServicesProvider
from expense_tracker.services.notifications import NotificationServicesProvider
from expense_tracker.services.providers.category_classifier import KeywordCategoryClassifier
from expense_tracker.services.providers.clock import SystemClock
from expense_tracker.services.providers.password_encoder import BcryptPasswordEncoder
from expense_tracker.services.providers.protocols.category_classifier import ICategoryClassifier
from expense_tracker.services.providers.protocols.clock import IClock
from expense_tracker.services.providers.protocols.password_encoder import IPasswordEncoder
from expense_tracker.services.providers.protocols.token_provider import ITokenProvider
from expense_tracker.services.providers.token_provider import JwtTokenProvider
from expense_tracker.services.transactions import TransactionServicesProvider
from expense_tracker.services.users import UserServicesProvider
from expense_tracker.settings.app import AppSettings
from expense_tracker.settings.db import DatabaseSettings
from expense_tracker.settings.limits import LimitSettings
from expense_tracker.settings.notifications import NotificationSettings


class AppProvider(Provider):
    def register_settings(self, settings: type[BaseSettings]):
        self.provide(lambda: settings(), scope=Scope.APP, provides=settings)


def new_scheduler(clock: IClock) -> BaseScheduler:
    return AsyncIOScheduler(timezone=clock.tz)


def create_container(*extra_providers: Provider) -> AsyncContainer:
    provider = AppProvider()
    provider.register_settings(DatabaseSettings)
    provider.register_settings(AppSettings)
    provider.register_settings(LimitSettings)
    provider.register_settings(NotificationSettings)

    provider.provide(SystemClock, provides=IClock, scope=Scope.APP)
    provider.provide(BcryptPasswordEncoder, provides=IPasswordEncoder, scope=Scope.APP)
    provider.provide(JwtTokenProvider, provides=ITokenProvider, scope=Scope.APP)
    provider.provide(
        KeywordCategoryClassifier, provides=ICategoryClassifier, scope=Scope.APP
    )
    provider.provide(new_scheduler, provides=BaseScheduler, scope=Scope.APP)

    container = make_async_container(
        provider,
        DbConnectionProvider(),
        AuthServicesProvider(),
        UserServicesProvider(),
        TransactionServicesProvider(),
        AnalyticsServicesProvider(),
        LimitServicesProvider(),
        NotificationServicesProvider(),
        FastapiProvider(),
        *extra_providers,
    )
    return container
