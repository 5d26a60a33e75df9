"""Request/response contracts for the swap endpoint."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from swingswap.models import SwapParams


class SwapRequest(BaseModel):
    """Inbound swap/bridge request (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True)

    from_chain: str = Field(..., alias="fromChain", min_length=1, description="Source chain slug")
    from_token_address: str = Field(..., alias="fromTokenAddress", description="Source token address")
    from_user_address: str = Field(..., alias="fromUserAddress", description="Sender wallet address")
    token_symbol: str = Field(..., alias="tokenSymbol", description="Source token symbol")
    to_token_address: str = Field(..., alias="toTokenAddress", description="Destination token address")
    to_chain: str = Field(..., alias="toChain", min_length=1, description="Destination chain slug")
    token_amount: str = Field(
        ...,
        alias="tokenAmount",
        pattern=r"^(0x[0-9a-fA-F]+|\d+)$",
        description="Amount in base units",
    )
    to_token_symbol: str = Field(..., alias="toTokenSymbol", description="Destination token symbol")
    to_user_address: str = Field(..., alias="toUserAddress", description="Recipient wallet address")
    project_id: Optional[str] = Field(None, alias="projectId", description="Swing project id")

    def to_params(self) -> SwapParams:
        return SwapParams(
            from_chain=self.from_chain,
            from_token_address=self.from_token_address,
            from_user_address=self.from_user_address,
            token_symbol=self.token_symbol,
            to_token_address=self.to_token_address,
            to_chain=self.to_chain,
            token_amount=self.token_amount,
            to_token_symbol=self.to_token_symbol,
            to_user_address=self.to_user_address,
            project_id=self.project_id,
        )


class SwapResponse(BaseModel):
    """Swap outcome."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(..., description="Whether the swap settled")
    tx_hash: Optional[str] = Field(None, alias="txHash", description="Settlement transaction id")
    message: Optional[str] = Field(None, description="Non-error outcome message")
    error: Optional[str] = Field(None, description="Failure description")
