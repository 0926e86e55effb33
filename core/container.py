from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from core.environment.providers import EnvironmentProvider
from explorer.providers import ExplorerProvider
from core.logging.providers import LoggerProvider


def create_container() -> AsyncContainer:
    return make_async_container(
        FastapiProvider(),
        EnvironmentProvider(),
        LoggerProvider(),
        ExplorerProvider()
    )


container = create_container()
