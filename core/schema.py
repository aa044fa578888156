"""
Pydantic models for batch headers, transactions and parse results.
Defines the JSON shape of the consolidated balance output.
"""
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class TransactionKind(str, Enum):
    """Direction of a transaction as written on its Type line."""
    CREDIT = "Credit"
    DEBIT = "Debit"

    @classmethod
    def from_type(cls, value: str) -> "TransactionKind":
        """
        Map a raw Type literal to a kind.

        Only the exact literal "Debit" selects debit semantics; every other
        value, including typos, is treated as a credit.
        """
        if value == cls.DEBIT.value:
            return cls.DEBIT
        return cls.CREDIT


class BatchHeader(BaseModel):
    """Header section of a batch file."""
    model_config = ConfigDict(frozen=True)

    batch_id: int = Field(..., ge=0)
    description: str = ""


class PartyReference(BaseModel):
    """
    Ledger account identity: a (routing number, account number) pair.
    Frozen so that it can be used as a dictionary key.
    """
    model_config = ConfigDict(frozen=True)

    routing_number: int = Field(..., ge=0)
    account_number: int = Field(..., ge=0)

    def __str__(self) -> str:
        return f"{self.routing_number} / {self.account_number}"


class TransactionRecord(BaseModel):
    """A fully read transaction group."""
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=0)
    originator: PartyReference
    recipient: PartyReference
    type: str
    amount: int = Field(..., ge=0)

    @property
    def kind(self) -> TransactionKind:
        return TransactionKind.from_type(self.type)

    @property
    def payer(self) -> PartyReference:
        """Account whose balance decreases. Debits pay from the recipient."""
        if self.kind is TransactionKind.DEBIT:
            return self.recipient
        return self.originator

    @property
    def payee(self) -> PartyReference:
        """Account whose balance increases. Debits pay into the originator."""
        if self.kind is TransactionKind.DEBIT:
            return self.originator
        return self.recipient


class AccountSummary(BaseModel):
    """Net effect of a batch on one account."""
    routing_number: int
    account_number: int
    net_transactions: int


class ParseResult(BaseModel):
    """Consolidated output of parsing one batch file."""
    batch: int = Field(..., description="Batch id from the header")
    description: str = Field(..., description="Batch description, verbatim")
    accounts: List[AccountSummary] = Field(
        default_factory=list,
        description="Account balances in order of first appearance"
    )
