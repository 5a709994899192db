#!/usr/bin/env python3

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from camt_downgrade.errors import (
    MalformedInput,
    MissingMandatoryField,
    UnsupportedValue,
)
from camt_downgrade.models import (
    Account,
    Balance,
    BankTransactionCode,
    Count,
    CreditDebit,
    Pagination,
    Statement,
    Transaction,
    TransactionSummary,
)
from camt_downgrade.schema import CREDIT, DEBIT, SOURCE_NAMESPACE, SOURCE_VERSION
from camt_downgrade.utils import (
    parse_amount,
    parse_currency,
    parse_date,
    parse_datetime,
)

logger = logging.getLogger(__name__)

NAMESPACES = {"c": SOURCE_NAMESPACE}


def _qualify(tag_path: str) -> str:
    return "/".join(f"c:{tag}" for tag in tag_path.split("/"))


@dataclass(frozen=True)
class Node:
    """An element of the source document together with its path for errors."""

    element: ET.Element
    path: str

    def find(self, tag_path: str) -> Node | None:
        element = self.element.find(_qualify(tag_path), NAMESPACES)
        if element is None:
            return None
        return Node(element=element, path=f"{self.path}/{tag_path}")

    def findall(self, tag_path: str) -> list[Node]:
        return [
            Node(element=element, path=f"{self.path}/{tag_path}[{i}]")
            for i, element in enumerate(
                self.element.findall(_qualify(tag_path), NAMESPACES), start=1
            )
        ]

    def require(self, tag_path: str) -> Node:
        node = self.find(tag_path)
        if node is None:
            raise MissingMandatoryField(
                f"Missing mandatory element {tag_path}", f"{self.path}/{tag_path}"
            )
        return node

    def text(self, tag_path: str) -> str | None:
        node = self.find(tag_path)
        if node is None or node.element.text is None:
            return None
        return node.element.text.strip() or None

    def require_text(self, tag_path: str) -> str:
        node = self.require(tag_path)
        value = (node.element.text or "").strip()
        if not value:
            raise MissingMandatoryField(f"Element {tag_path} is empty", node.path)
        return value

    @property
    def value(self) -> str:
        return (self.element.text or "").strip()


def parse_camt_10(data: bytes) -> Statement:
    """Reads a camt.053.001.10 document into a statement.

    Args:
      data: The raw bytes of the XML document.
    Returns:
      The fully populated statement.
    Raises:
      MalformedInput: If the input is not well-formed XML.
      MissingMandatoryField: If a required element is absent.
      UnsupportedValue: If the document is of another kind or a value cannot
        be interpreted.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise MalformedInput(f"Input is not well-formed XML: {e}") from e

    if root.tag != f"{{{SOURCE_NAMESPACE}}}Document":
        raise UnsupportedValue(
            f"Expected a {SOURCE_VERSION} Document, found root element {root.tag!r}",
            "Document",
        )

    report = Node(element=root, path="Document").require("BkToCstmrStmt")
    header = report.require("GrpHdr")
    message_id = header.require_text("MsgId")
    created = parse_datetime(header.require_text("CreDtTm"), f"{header.path}/CreDtTm")

    pagination = None
    pagination_node = header.find("MsgPgntn")
    if pagination_node is not None:
        pagination = Pagination(
            page_number=pagination_node.require_text("PgNb"),
            last_page=pagination_node.require_text("LastPgInd"),
        )

    statement_nodes = report.findall("Stmt")
    if not statement_nodes:
        raise MissingMandatoryField(
            "Document contains no account statement", f"{report.path}/Stmt"
        )

    accounts = tuple(parse_account(node) for node in statement_nodes)
    statement = Statement(
        message_id=message_id,
        created=created,
        accounts=accounts,
        pagination=pagination,
    )
    logger.info(
        f"Parsed {SOURCE_VERSION} message {message_id} with "
        f"{len(accounts)} account(s) and "
        f"{sum(len(a.entries) for a in accounts)} entries"
    )
    return statement


def parse_account(stmt: Node) -> Account:
    statement_id = stmt.require_text("Id")
    acct = stmt.require("Acct")
    iban = acct.require_text("Id/IBAN")

    balance_nodes = stmt.findall("Bal")
    balances = tuple(parse_balance(node) for node in balance_nodes)

    currency_text = acct.text("Ccy")
    if currency_text is not None:
        currency = parse_currency(currency_text, f"{acct.path}/Ccy")
    elif balances:
        currency = balances[0].currency
    else:
        raise MissingMandatoryField(
            "Account has neither a currency nor a balance", f"{stmt.path}/Bal"
        )

    kinds = {balance.kind for balance in balances}
    if "opening" not in kinds:
        raise MissingMandatoryField(
            "No opening balance (OPBD or PRCD)", f"{stmt.path}/Bal"
        )
    if "closing" not in kinds:
        raise MissingMandatoryField("No closing balance (CLBD)", f"{stmt.path}/Bal")
    for node, balance in zip(balance_nodes, balances):
        check_currency(balance.currency, currency, f"{node.path}/Amt")

    entries = []
    for position, node in enumerate(stmt.findall("Ntry"), start=1):
        entry = parse_entry(node)
        check_currency(entry.currency, currency, f"{node.path}/Amt")
        logger.debug(f"Entry {position} of {iban}: {entry=}")
        entries.append(entry)

    from_to = stmt.find("FrToDt")
    created = stmt.text("CreDtTm")
    summary = stmt.find("TxsSummry")
    return Account(
        statement_id=statement_id,
        iban=iban,
        currency=currency,
        balances=balances,
        entries=tuple(entries),
        owner_name=acct.text("Ownr/Nm"),
        created=(
            parse_datetime(created, f"{stmt.path}/CreDtTm")
            if created is not None
            else None
        ),
        from_datetime=(
            parse_datetime(from_to.require_text("FrDtTm"), f"{from_to.path}/FrDtTm")
            if from_to is not None
            else None
        ),
        to_datetime=(
            parse_datetime(from_to.require_text("ToDtTm"), f"{from_to.path}/ToDtTm")
            if from_to is not None
            else None
        ),
        electronic_sequence_number=stmt.text("ElctrncSeqNb"),
        summary=parse_summary(summary) if summary is not None else None,
    )


def parse_balance(bal: Node) -> Balance:
    amount, currency = parse_amount_node(bal.require("Amt"))
    return Balance(
        code=bal.require_text("Tp/CdOrPrtry/Cd"),
        amount=amount,
        currency=currency,
        credit_debit=parse_credit_debit(bal.require("CdtDbtInd")),
        date=parse_date_choice(bal.require("Dt")),
    )


def parse_entry(ntry: Node) -> Transaction:
    amount, currency = parse_amount_node(ntry.require("Amt"))
    credit_debit = parse_credit_debit(ntry.require("CdtDbtInd"))

    value_date_node = ntry.find("ValDt")
    charges = None
    charges_node = ntry.find("Chrgs/TtlChrgsAndTaxAmt")
    if charges_node is not None:
        charges, charges_currency = parse_amount_node(charges_node)
        check_currency(charges_currency, currency, charges_node.path)

    details = ntry.findall("NtryDtls/TxDtls")
    first = details[0] if details else None
    remittance = tuple(
        line.value
        for detail in details
        for line in detail.findall("RmtInf/Ustrd")
        if line.value
    )

    reference = ntry.text("AcctSvcrRef")
    counterparty_name = counterparty_iban = end_to_end_id = None
    if first is not None:
        reference = reference or first.text("Refs/AcctSvcrRef")
        end_to_end_id = first.text("Refs/EndToEndId")
        # The counterparty is whoever is on the other side of the booking.
        party = "Cdtr" if credit_debit == DEBIT else "Dbtr"
        counterparty_name = first.text(f"RltdPties/{party}/Pty/Nm") or first.text(
            f"RltdPties/{party}/Nm"
        )
        counterparty_iban = first.text(f"RltdPties/{party}Acct/Id/IBAN")

    return Transaction(
        amount=amount,
        currency=currency,
        credit_debit=credit_debit,
        status=ntry.require_text("Sts/Cd"),
        booking_date=parse_date_choice(ntry.require("BookgDt")),
        value_date=(
            parse_date_choice(value_date_node) if value_date_node is not None else None
        ),
        reference=reference,
        entry_reference=ntry.text("NtryRef"),
        bank_transaction_code=parse_bank_transaction_code(ntry.find("BkTxCd")),
        charges=charges,
        description=ntry.text("AddtlNtryInf"),
        remittance=remittance,
        counterparty_name=counterparty_name,
        counterparty_iban=counterparty_iban,
        end_to_end_id=end_to_end_id,
    )


def parse_bank_transaction_code(node: Node | None) -> BankTransactionCode:
    if node is None:
        return BankTransactionCode()
    domain = node.find("Domn")
    return BankTransactionCode(
        domain=domain.require_text("Cd") if domain is not None else None,
        family=domain.require_text("Fmly/Cd") if domain is not None else None,
        sub_family=(
            domain.require_text("Fmly/SubFmlyCd") if domain is not None else None
        ),
        proprietary=node.text("Prtry/Cd"),
        issuer=node.text("Prtry/Issr"),
    )


def parse_summary(node: Node) -> TransactionSummary:
    def count(tag: str) -> Count | None:
        count_node = node.find(tag)
        if count_node is None:
            return None
        total = count_node.text("Sum")
        return Count(
            number=count_node.text("NbOfNtries"),
            total=(
                parse_amount(total, f"{count_node.path}/Sum")
                if total is not None
                else None
            ),
        )

    net_amount = net_credit_debit = None
    net = node.find("TtlNtries/TtlNetNtry")
    if net is not None:
        net_amount = parse_amount(net.require_text("Amt"), f"{net.path}/Amt")
        net_credit_debit = parse_credit_debit(net.require("CdtDbtInd"))

    return TransactionSummary(
        entries=count("TtlNtries"),
        net_amount=net_amount,
        net_credit_debit=net_credit_debit,
        credit_entries=count("TtlCdtNtries"),
        debit_entries=count("TtlDbtNtries"),
    )


def parse_amount_node(node: Node) -> tuple[Decimal, str]:
    """Returns the amount of an ``Amt`` like element and its ``Ccy`` attribute."""
    currency = node.element.get("Ccy")
    if currency is None:
        raise MissingMandatoryField("Amount without Ccy attribute", f"{node.path}/@Ccy")
    return (
        parse_amount(node.value, node.path),
        parse_currency(currency, f"{node.path}/@Ccy"),
    )


def parse_credit_debit(node: Node) -> CreditDebit:
    if node.value not in (CREDIT, DEBIT):
        raise UnsupportedValue(
            f"Credit/debit indicator must be {CREDIT} or {DEBIT}, got {node.value!r}",
            node.path,
        )
    return node.value  # type: ignore


def parse_date_choice(node: Node) -> date:
    """Reads a date from a ``Dt`` or ``DtTm`` child, dropping any time of day."""
    if (text := node.text("Dt")) is not None:
        return parse_date(text, f"{node.path}/Dt")
    if (text := node.text("DtTm")) is not None:
        moment: datetime = parse_datetime(text, f"{node.path}/DtTm")
        return moment.date()
    raise MissingMandatoryField("Expected a Dt or DtTm element", node.path)


def check_currency(currency: str, expected: str, path: str) -> None:
    if currency != expected:
        raise UnsupportedValue(
            f"Currency {currency} does not match account currency {expected}", path
        )
