from dishka import Provider, Scope, provide, FromComponent
from explorer.networks import Network, NETWORK_CONFIGS
from explorer.services import ExplorerService
from explorer.usecases import (
    CallToolUseCase,
    CheckBalanceUseCase,
    GetContractABIUseCase,
    GetENSNameUseCase,
    GetGasPricesUseCase,
    GetTokenTransfersUseCase,
    GetTransactionsUseCase,
    ListSupportedNetworksUseCase,
    ListToolsUseCase
)
from typing import Annotated
from web3 import AsyncWeb3
from core.environment.config import Settings, ExplorerCredentials
import logging


class ExplorerProvider(Provider):
    """
    Provider for explorer-related dependencies.
    """

    component = "explorer"

    check_balance = provide(CheckBalanceUseCase, scope=Scope.REQUEST)
    get_transactions = provide(GetTransactionsUseCase, scope=Scope.REQUEST)
    get_token_transfers = provide(GetTokenTransfersUseCase, scope=Scope.REQUEST)
    get_contract_abi = provide(GetContractABIUseCase, scope=Scope.REQUEST)
    get_gas_prices = provide(GetGasPricesUseCase, scope=Scope.REQUEST)
    get_ens_name = provide(GetENSNameUseCase, scope=Scope.REQUEST)
    list_supported_networks = provide(ListSupportedNetworksUseCase, scope=Scope.REQUEST)
    list_tools = provide(ListToolsUseCase, scope=Scope.REQUEST)
    call_tool = provide(CallToolUseCase, scope=Scope.REQUEST)

    @provide(scope=Scope.APP)
    def get_ens_clients(
        self,
        settings: Annotated[Settings, FromComponent("environment")]
    ) -> dict[Network, AsyncWeb3]:
        """
        Provide Web3 clients for networks with ENS support.

        Parameters
        ----------
        settings : Settings
            Application settings

        Returns
        -------
        dict[Network, AsyncWeb3]
            Dictionary of Web3 clients
        """
        return {
            network: AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(settings.get_rpc_url(network)))
            for network, config in NETWORK_CONFIGS.items()
            if config.supports_ens
        }

    @provide(scope=Scope.APP)
    def get_explorer_service(
        self,
        ens_clients: Annotated[
            dict[Network, AsyncWeb3], FromComponent("explorer")
        ],
        credentials: Annotated[ExplorerCredentials, FromComponent("environment")],
        settings: Annotated[Settings, FromComponent("environment")],
        logger: Annotated[logging.Logger, FromComponent("logger")]
    ) -> ExplorerService:
        """
        Provide explorer service.

        Parameters
        ----------
        ens_clients : dict[Network, AsyncWeb3]
            Web3 clients for ENS lookups
        credentials : ExplorerCredentials
            Per-network API keys
        settings : Settings
            Application settings
        logger : logging.Logger
            Logger instance

        Returns
        -------
        ExplorerService
            Explorer service instance
        """
        return ExplorerService(
            credentials=credentials,
            default_network=settings.default_explorer_network,
            logger=logger,
            ens_clients=ens_clients,
            timeout=settings.request_timeout
        )
