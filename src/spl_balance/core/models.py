"""
Data models for SPL token balances.
Raw amounts are integers in the token's smallest unit; display amounts are
strings so no precision is lost for large supplies or high decimal counts.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

MAX_DECIMALS = 255


def format_ui_amount(amount: int, decimals: int) -> str:
    """
    Render a raw token amount scaled by its decimals, trailing zeros trimmed.

    format_ui_amount(1_500_000, 6) -> "1.5"
    format_ui_amount(1, 9)         -> "0.000000001"
    """
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
    if not 0 <= decimals <= MAX_DECIMALS:
        raise ValueError(f"decimals must be in 0..{MAX_DECIMALS}, got {decimals}")
    if decimals == 0:
        return str(amount)

    digits = str(amount).rjust(decimals + 1, "0")
    whole, fraction = digits[:-decimals], digits[-decimals:].rstrip("0")
    return f"{whole}.{fraction}" if fraction else whole


class TokenBalance(BaseModel):
    """Balance of a single SPL token account."""
    amount: int = Field(ge=0)
    decimals: int = Field(ge=0, le=MAX_DECIMALS)
    ui_amount_string: str
    ui_amount: float | None = None
    context_slot: int | None = None

    @classmethod
    def from_raw(
        cls, amount: int, decimals: int, context_slot: int | None = None
    ) -> TokenBalance:
        """Build a balance from raw values, deriving the display fields."""
        ui_amount_string = format_ui_amount(amount, decimals)
        return cls(
            amount=amount,
            decimals=decimals,
            ui_amount_string=ui_amount_string,
            ui_amount=float(ui_amount_string),
            context_slot=context_slot,
        )

    def to_display(self) -> str:
        return f"Token Balance: {self.ui_amount_string}"
