"""Base interface for chain signers.

Signing flow:
1. Load the held key for the chain family
2. Refresh chain-dependent fields of the transaction
3. Sign locally with the held key
4. Broadcast the signed transaction
5. Wait for confirmation and return the transaction id
"""

from abc import ABC, abstractmethod

from swingswap.chains import ChainFamily
from swingswap.models import TransactionDescriptor


class ChainSigner(ABC):
    """Abstract base class for chain-family signers.

    A signer holds exactly one key and never exposes it.
    """

    family: ChainFamily

    def __init__(self, rpc_url: str):
        self.rpc_url = rpc_url

    @abstractmethod
    async def sign_and_send(self, descriptor: TransactionDescriptor) -> str:
        """Sign, broadcast and confirm a transaction.

        Args:
            descriptor: Transaction produced by the aggregator

        Returns:
            Transaction id (hash or signature)
        """
        pass

    @property
    @abstractmethod
    def address(self) -> str:
        """Address of the held key."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(family={self.family.value}, rpc={self.rpc_url})"
