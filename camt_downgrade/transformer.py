#!/usr/bin/env python3

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from xml.etree.ElementTree import Element, ElementTree, SubElement, indent, tostring

from camt_downgrade.errors import EmissionFailure
from camt_downgrade.models import (
    Account,
    Balance,
    BankTransactionCode,
    Count,
    Statement,
    Transaction,
    TransactionSummary,
)
from camt_downgrade.schema import (
    DEBIT,
    MAX_UNSTRUCTURED_REMITTANCE,
    PLACEHOLDER_ADDITIONAL_INFO,
    PLACEHOLDER_LAST_PAGE,
    PLACEHOLDER_PAGE_NUMBER,
    PLACEHOLDER_RECIPIENT_BIC,
    PLACEHOLDER_SERVICER_BIC,
    PLACEHOLDER_SERVICER_NAME,
    PLACEHOLDER_SERVICER_OTHER_ID,
    PLACEHOLDER_SERVICER_OTHER_ISSUER,
    TARGET_NAMESPACE,
    TARGET_SCHEMA_LOCATION,
    TARGET_VERSION,
    XSI_NAMESPACE,
)
from camt_downgrade.utils import format_amount, format_datetime, synthetic_reference

logger = logging.getLogger(__name__)


def to_camt_08(statement: Statement) -> Element:
    """Builds the camt.053.001.08 element tree for a statement.

    Elements are appended in the order the target schema sequences demand.
    """
    root = Element("Document")
    root.set("xmlns", TARGET_NAMESPACE)
    root.set("xmlns:xsi", XSI_NAMESPACE)
    root.set("xsi:schemaLocation", TARGET_SCHEMA_LOCATION)

    report = SubElement(root, "BkToCstmrStmt")
    add_group_header(report, statement)
    for account in statement.accounts:
        add_statement(report, account, statement.created)
    return root


def serialize(root: Element, indent_width: int = 4) -> bytes:
    """Serializes a target tree to UTF-8 bytes with an XML declaration."""
    try:
        if indent_width:
            indent(ElementTree(root), space=" " * indent_width)
        return tostring(root, encoding="UTF-8", xml_declaration=True)
    except (TypeError, ValueError) as e:
        raise EmissionFailure(f"Cannot serialize {TARGET_VERSION} tree: {e}") from e


def add_group_header(report: Element, statement: Statement) -> None:
    header = SubElement(report, "GrpHdr")
    _text(header, "MsgId", statement.message_id)
    _text(header, "CreDtTm", format_datetime(statement.created))

    org_id = SubElement(SubElement(SubElement(header, "MsgRcpt"), "Id"), "OrgId")
    _text(org_id, "AnyBIC", PLACEHOLDER_RECIPIENT_BIC)

    pagination = SubElement(header, "MsgPgntn")
    if statement.pagination is not None:
        _text(pagination, "PgNb", statement.pagination.page_number)
        _text(pagination, "LastPgInd", statement.pagination.last_page)
    else:
        _text(pagination, "PgNb", PLACEHOLDER_PAGE_NUMBER)
        _text(pagination, "LastPgInd", PLACEHOLDER_LAST_PAGE)

    _text(header, "AddtlInf", PLACEHOLDER_ADDITIONAL_INFO)


def add_statement(report: Element, account: Account, created: datetime) -> None:
    stmt = SubElement(report, "Stmt")
    _text(stmt, "Id", account.statement_id)
    if account.electronic_sequence_number is not None:
        _text(stmt, "ElctrncSeqNb", account.electronic_sequence_number)
    _text(stmt, "CreDtTm", format_datetime(account.created or created))
    if account.from_datetime is not None and account.to_datetime is not None:
        from_to = SubElement(stmt, "FrToDt")
        _text(from_to, "FrDtTm", format_datetime(account.from_datetime))
        _text(from_to, "ToDtTm", format_datetime(account.to_datetime))

    add_account(stmt, account)
    for balance in account.balances:
        add_balance(stmt, balance)
    if account.summary is not None:
        add_summary(stmt, account.summary)
    for position, entry in enumerate(account.entries, start=1):
        add_entry(stmt, entry, position)

    logger.debug(
        f"Emitted statement {account.statement_id} for {account.iban} "
        f"with {len(account.entries)} entries"
    )


def add_account(stmt: Element, account: Account) -> None:
    acct = SubElement(stmt, "Acct")
    _text(SubElement(acct, "Id"), "IBAN", account.iban)
    _text(acct, "Ccy", account.currency)
    if account.owner_name is not None:
        _text(SubElement(acct, "Ownr"), "Nm", account.owner_name)

    institution = SubElement(SubElement(acct, "Svcr"), "FinInstnId")
    _text(institution, "BICFI", PLACEHOLDER_SERVICER_BIC)
    _text(institution, "Nm", PLACEHOLDER_SERVICER_NAME)
    other = SubElement(institution, "Othr")
    _text(other, "Id", PLACEHOLDER_SERVICER_OTHER_ID)
    _text(other, "Issr", PLACEHOLDER_SERVICER_OTHER_ISSUER)


def add_balance(stmt: Element, balance: Balance) -> None:
    bal = SubElement(stmt, "Bal")
    _text(SubElement(SubElement(bal, "Tp"), "CdOrPrtry"), "Cd", balance.code)
    _amount(bal, "Amt", balance.amount, balance.currency)
    _text(bal, "CdtDbtInd", balance.credit_debit)
    _date(bal, "Dt", balance.date)


def add_summary(stmt: Element, summary: TransactionSummary) -> None:
    totals = SubElement(stmt, "TxsSummry")
    if summary.entries is not None or summary.net_amount is not None:
        entries = SubElement(totals, "TtlNtries")
        _count(entries, summary.entries)
        if summary.net_amount is not None and summary.net_credit_debit is not None:
            net = SubElement(entries, "TtlNetNtry")
            _text(net, "Amt", format_amount(summary.net_amount))
            _text(net, "CdtDbtInd", summary.net_credit_debit)
    if summary.credit_entries is not None:
        _count(SubElement(totals, "TtlCdtNtries"), summary.credit_entries)
    if summary.debit_entries is not None:
        _count(SubElement(totals, "TtlDbtNtries"), summary.debit_entries)


def add_entry(stmt: Element, entry: Transaction, position: int) -> None:
    reference = entry.reference or synthetic_reference(
        entry.booking_date, entry.signed_amount, position
    )

    ntry = SubElement(stmt, "Ntry")
    if entry.entry_reference is not None:
        _text(ntry, "NtryRef", entry.entry_reference)
    _amount(ntry, "Amt", entry.amount, entry.currency)
    _text(ntry, "CdtDbtInd", entry.credit_debit)
    _text(SubElement(ntry, "Sts"), "Cd", entry.status)
    _date(ntry, "BookgDt", entry.booking_date)
    if entry.value_date is not None:
        _date(ntry, "ValDt", entry.value_date)
    _text(ntry, "AcctSvcrRef", reference)
    add_bank_transaction_code(ntry, entry.bank_transaction_code)
    if entry.charges is not None:
        charges = SubElement(ntry, "Chrgs")
        _amount(charges, "TtlChrgsAndTaxAmt", entry.charges, entry.currency)
    add_transaction_details(ntry, entry, reference)
    if entry.description is not None:
        _text(ntry, "AddtlNtryInf", entry.description)


def add_bank_transaction_code(ntry: Element, code: BankTransactionCode) -> None:
    bk_tx_cd = SubElement(ntry, "BkTxCd")
    if code.domain is not None:
        domain = SubElement(bk_tx_cd, "Domn")
        _text(domain, "Cd", code.domain)
        family = SubElement(domain, "Fmly")
        _text(family, "Cd", code.family)
        _text(family, "SubFmlyCd", code.sub_family)
    if code.proprietary is not None:
        proprietary = SubElement(bk_tx_cd, "Prtry")
        _text(proprietary, "Cd", code.proprietary)
        if code.issuer is not None:
            _text(proprietary, "Issr", code.issuer)


def add_transaction_details(ntry: Element, entry: Transaction, reference: str) -> None:
    details = SubElement(SubElement(ntry, "NtryDtls"), "TxDtls")

    refs = SubElement(details, "Refs")
    _text(refs, "AcctSvcrRef", reference)
    if entry.end_to_end_id is not None:
        _text(refs, "EndToEndId", entry.end_to_end_id)

    _amount(details, "Amt", entry.amount, entry.currency)
    _text(details, "CdtDbtInd", entry.credit_debit)

    if entry.counterparty_name is not None or entry.counterparty_iban is not None:
        party = "Cdtr" if entry.credit_debit == DEBIT else "Dbtr"
        parties = SubElement(details, "RltdPties")
        if entry.counterparty_name is not None:
            name = SubElement(SubElement(parties, party), "Pty")
            _text(name, "Nm", entry.counterparty_name)
        if entry.counterparty_iban is not None:
            iban = SubElement(SubElement(parties, f"{party}Acct"), "Id")
            _text(iban, "IBAN", entry.counterparty_iban)

    lines = entry.remittance
    if (
        not lines
        and entry.description is not None
        and len(entry.description) <= MAX_UNSTRUCTURED_REMITTANCE
    ):
        lines = (entry.description,)
    if lines:
        remittance = SubElement(details, "RmtInf")
        for line in lines:
            _text(remittance, "Ustrd", line)


def _text(parent: Element, tag: str, text: str | None) -> Element:
    element = SubElement(parent, tag)
    element.text = text
    return element


def _amount(parent: Element, tag: str, amount: Decimal, currency: str) -> None:
    element = _text(parent, tag, format_amount(amount))
    element.set("Ccy", currency)


def _date(parent: Element, tag: str, value: date) -> None:
    _text(SubElement(parent, tag), "Dt", value.isoformat())


def _count(parent: Element, count: Count | None) -> None:
    if count is None:
        return
    if count.number is not None:
        _text(parent, "NbOfNtries", count.number)
    if count.total is not None:
        _text(parent, "Sum", format_amount(count.total))
