from enum import Enum
from pydantic import BaseModel, ConfigDict

from core.exceptions import NetworkNotSupportedException


class Network(str, Enum):
    """
    Supported explorer networks.
    """
    ETHEREUM = "ethereum"
    SONIC = "sonic"
    BASE = "base"


class NetworkConfig(BaseModel):
    """
    Explorer configuration of a single network.

    Attributes
    ----------
    api_url : str
        Etherscan-compatible explorer API endpoint
    network_name : str
        Display name of the network
    currency_symbol : str
        Native currency symbol
    supports_ens : bool
        Whether ENS reverse lookup is available on this network
    """
    api_url: str
    network_name: str
    currency_symbol: str
    supports_ens: bool = False

    model_config = ConfigDict(frozen=True)


NETWORK_CONFIGS: dict[Network, NetworkConfig] = {
    Network.ETHEREUM: NetworkConfig(
        api_url="https://api.etherscan.io/api",
        network_name="mainnet",
        currency_symbol="ETH",
        supports_ens=True
    ),
    Network.SONIC: NetworkConfig(
        api_url="https://explorer.sonic.onerpc.com/api",
        network_name="sonic",
        currency_symbol="SONIC"
    ),
    Network.BASE: NetworkConfig(
        api_url="https://api.basescan.org/api",
        network_name="base",
        currency_symbol="ETH"
    ),
}


def config_for(network: Network | str) -> NetworkConfig:
    """
    Get explorer configuration for a network.

    Parameters
    ----------
    network : Network | str
        Network identifier

    Returns
    -------
    NetworkConfig
        Network configuration

    Raises
    ------
    NetworkNotSupportedException
        If the identifier is not a supported network
    """
    try:
        return NETWORK_CONFIGS[Network(network)]
    except ValueError:
        raise NetworkNotSupportedException(f"Network {network} is not supported")
