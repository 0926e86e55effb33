import os
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.exceptions import ConfigurationException
from explorer.networks import Network


class Settings(BaseSettings):
    """
    Application settings using Pydantic Settings.

    Attributes
    ----------
    etherscan_api_key : str
        Shared explorer API key used when a network has no key of its own
    ethereum_api_key : str
        Etherscan API key
    sonic_api_key : str
        Sonic explorer API key
    base_api_key : str
        Basescan API key
    default_explorer_network : Network
        Network used when a tool call does not name one
    rpc_base_url : str
        Base RPC URL (network path will be added automatically)
    ankr_api_key : str
        Ankr API key for RPC access (optional)
    request_timeout : float
        Explorer request timeout in seconds
    log_level : str
        Root logging level
    """

    etherscan_api_key: str = ""
    ethereum_api_key: str = ""
    sonic_api_key: str = ""
    base_api_key: str = ""

    default_explorer_network: Network = Network.ETHEREUM

    rpc_base_url: str = "https://rpc.ankr.com"
    ankr_api_key: str = ""

    request_timeout: float = 30.0
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_rpc_url(self, network: Network) -> str:
        """
        Get RPC URL for specific network.

        Parameters
        ----------
        network : Network
            Network identifier

        Returns
        -------
        str
            Full RPC URL, with API key when one is configured
        """
        network_paths = {
            Network.ETHEREUM: "eth",
            Network.SONIC: "sonic_mainnet",
            Network.BASE: "base"
        }
        network_path = network_paths.get(network, network.value)
        if self.ankr_api_key:
            return f"{self.rpc_base_url}/{network_path}/{self.ankr_api_key}"
        return f"{self.rpc_base_url}/{network_path}"


class ExplorerCredentials(BaseModel):
    """
    Explorer API keys resolved per network.

    Attributes
    ----------
    api_keys : dict[Network, str]
        API key for each supported network, empty when unusable
    """
    api_keys: dict[Network, str]

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExplorerCredentials":
        """
        Build credentials: network specific key, else shared key, else empty.

        Parameters
        ----------
        settings : Settings
            Application settings

        Returns
        -------
        ExplorerCredentials
            Resolved credentials

        Raises
        ------
        ConfigurationException
            If no network ends up with an API key
        """
        network_keys = {
            Network.ETHEREUM: settings.ethereum_api_key,
            Network.SONIC: settings.sonic_api_key,
            Network.BASE: settings.base_api_key
        }
        credentials = cls(api_keys={
            network: network_keys[network] or settings.etherscan_api_key or ""
            for network in Network
        })

        if not credentials.usable_networks():
            raise ConfigurationException(
                "At least one API key is required "
                "(ETHEREUM_API_KEY, SONIC_API_KEY, BASE_API_KEY, or ETHERSCAN_API_KEY)"
            )
        return credentials

    def api_key_for(self, network: Network) -> str:
        return self.api_keys.get(network, "")

    def is_usable(self, network: Network) -> bool:
        return bool(self.api_key_for(network))

    def usable_networks(self) -> list[Network]:
        """
        List networks with an API key, in registry order.

        Returns
        -------
        list[Network]
            Usable networks
        """
        return [network for network in Network if self.is_usable(network)]
