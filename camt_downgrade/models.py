#!/usr/bin/env python3

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from camt_downgrade.schema import (
    CLOSING_BALANCE_CODES,
    CREDIT,
    OPENING_BALANCE_CODES,
)

CreditDebit = Literal["CRDT"] | Literal["DBIT"]
BalanceKind = Literal["opening"] | Literal["closing"] | Literal["interim"]


def signed(amount: Decimal, credit_debit: str) -> Decimal:
    return amount if credit_debit == CREDIT else -amount


@dataclass(frozen=True)
class Balance:
    code: str
    amount: Decimal
    currency: str
    credit_debit: CreditDebit
    date: date

    @property
    def kind(self) -> BalanceKind:
        if self.code in OPENING_BALANCE_CODES:
            return "opening"
        if self.code in CLOSING_BALANCE_CODES:
            return "closing"
        return "interim"

    @property
    def signed_amount(self) -> Decimal:
        return signed(self.amount, self.credit_debit)


@dataclass(frozen=True)
class BankTransactionCode:
    domain: str | None = None
    family: str | None = None
    sub_family: str | None = None
    proprietary: str | None = None
    issuer: str | None = None


@dataclass(frozen=True)
class Count:
    """Number of entries and their sum, either may be missing."""

    number: str | None = None
    total: Decimal | None = None


@dataclass(frozen=True)
class TransactionSummary:
    entries: Count | None = None
    net_amount: Decimal | None = None
    net_credit_debit: CreditDebit | None = None
    credit_entries: Count | None = None
    debit_entries: Count | None = None


@dataclass(frozen=True)
class Transaction:
    amount: Decimal
    currency: str
    credit_debit: CreditDebit
    status: str
    booking_date: date
    value_date: date | None = None
    reference: str | None = None
    entry_reference: str | None = None
    bank_transaction_code: BankTransactionCode = BankTransactionCode()
    charges: Decimal | None = None
    description: str | None = None
    remittance: tuple[str, ...] = ()
    counterparty_name: str | None = None
    counterparty_iban: str | None = None
    end_to_end_id: str | None = None

    @property
    def signed_amount(self) -> Decimal:
        return signed(self.amount, self.credit_debit)


@dataclass(frozen=True)
class Account:
    statement_id: str
    iban: str
    currency: str
    balances: tuple[Balance, ...]
    entries: tuple[Transaction, ...] = ()
    owner_name: str | None = None
    created: datetime | None = None
    from_datetime: datetime | None = None
    to_datetime: datetime | None = None
    electronic_sequence_number: str | None = None
    summary: TransactionSummary | None = None

    @property
    def opening_balance(self) -> Balance:
        return next(b for b in self.balances if b.kind == "opening")

    @property
    def closing_balance(self) -> Balance:
        return next(b for b in self.balances if b.kind == "closing")


@dataclass(frozen=True)
class Pagination:
    page_number: str
    last_page: str


@dataclass(frozen=True)
class Statement:
    message_id: str
    created: datetime
    accounts: tuple[Account, ...]
    pagination: Pagination | None = None
