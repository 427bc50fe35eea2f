from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from mockpay.domain.payments.entities import RefundRecord, TransactionRecord


class ChargeRequestDTO(BaseModel):
    # Amount sign and card fields are deliberately unchecked: any input is "processed".
    amount: Decimal = Field(allow_inf_nan=False)
    card_number: str | None = Field(None, alias="cardNumber")
    expiration_date: str | None = Field(None, alias="expirationDate")
    cvv: str | None = None
    cardholder_name: str | None = Field(None, alias="cardholderName")

    model_config = ConfigDict(validate_by_name=True)


class RefundRequestDTO(BaseModel):
    transaction_id: str = Field(min_length=1, alias="transactionId")
    amount: Decimal = Field(allow_inf_nan=False)
    reason: str | None = None

    model_config = ConfigDict(validate_by_name=True)


class ChargeResponseDTO(BaseModel):
    transaction_id: str = Field(serialization_alias="transactionId")
    status: str
    amount: float
    message: str

    @classmethod
    def from_domain(cls, record: TransactionRecord) -> ChargeResponseDTO:
        return cls(
            transaction_id=record.transaction_id,
            status=record.outcome.value,
            amount=float(record.amount),
            message=record.message,
        )


class RefundResponseDTO(BaseModel):
    refund_id: str = Field(serialization_alias="refundId")
    original_transaction_id: str = Field(serialization_alias="originalTransactionId")
    status: str
    amount: float
    message: str

    @classmethod
    def from_domain(cls, record: RefundRecord) -> RefundResponseDTO:
        return cls(
            refund_id=record.refund_id,
            original_transaction_id=record.original_transaction_id,
            status=record.outcome.value,
            amount=float(record.amount),
            message=record.message,
        )
