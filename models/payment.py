from pydantic import BaseModel, Field


class ChargeRequestDTO(BaseModel):
    """Form body for the gateway's create-charge call."""
    amount: int = Field(..., ge=0, description="Amount in minor currency units")
    currency: str
    source: str = Field(..., description="Opaque token from client-side tokenization")
    description: str | None = None


class ChargeDTO(BaseModel):
    """Charge as confirmed by the gateway."""
    id: str
    amount: int
    currency: str | None = None
    status: str | None = None
    paid: bool | None = None
