from enum import Enum
from pydantic import BaseModel, ConfigDict

from explorer.networks import Network


CONTRACT_CREATION = "Contract Creation"


class BalanceEntity(BaseModel):
    """
    Entity representing the native currency balance of an address.

    Attributes
    ----------
    address : str
        Checksummed address
    balance_wei : int
        The balance in Wei (smallest unit)
    balance : str
        The balance as a decimal string in native currency
    currency_symbol : str
        Native currency symbol (ETH, SONIC)
    network : Network
        The network queried
    """
    address: str
    balance_wei: int
    balance: str
    currency_symbol: str
    network: Network

    model_config = ConfigDict(from_attributes=True)


class TransactionEntity(BaseModel):
    """
    Entity representing a normal transaction of an address.

    Attributes
    ----------
    hash : str
        Transaction hash
    from_address : str
        Sender address
    to_address : str
        Recipient address, or ``CONTRACT_CREATION`` when the recipient is empty
    value : str
        Transferred value in native currency
    timestamp : int
        Unix timestamp of the block
    block_number : int
        Block number of the transaction
    """
    hash: str
    from_address: str
    to_address: str
    value: str
    timestamp: int
    block_number: int

    model_config = ConfigDict(from_attributes=True)


class TokenTransferEntity(BaseModel):
    """
    Entity representing an ERC-20 token transfer.

    Attributes
    ----------
    token_address : str
        Token contract address
    token_name : str
        Token name
    token_symbol : str
        Token symbol
    from_address : str
        Sender address
    to_address : str
        Recipient address
    value : str
        Transferred amount scaled by the token decimals
    timestamp : int
        Unix timestamp of the block
    block_number : int
        Block number of the transfer
    """
    token_address: str
    token_name: str
    token_symbol: str
    from_address: str
    to_address: str
    value: str
    timestamp: int
    block_number: int

    model_config = ConfigDict(from_attributes=True)


class GasPriceEntity(BaseModel):
    """
    Entity representing a gas oracle snapshot, prices in Gwei.
    """
    safe_gwei: str
    propose_gwei: str
    fast_gwei: str
    last_block: int | None = None
    suggest_base_fee: str | None = None
    network: Network

    model_config = ConfigDict(from_attributes=True)


class ENSLookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    NOT_SUPPORTED = "not_supported"


class ENSNameEntity(BaseModel):
    """
    Entity representing the outcome of an ENS reverse lookup.

    Attributes
    ----------
    status : ENSLookupStatus
        Whether a name was found, not found, or ENS is unavailable on the network
    address : str
        Address that was looked up
    network : Network
        The network queried
    name : str | None
        Resolved ENS name, set only when status is ``found``
    """
    status: ENSLookupStatus
    address: str
    network: Network
    name: str | None = None

    model_config = ConfigDict(from_attributes=True)
