#!/usr/bin/env python3

import random
import string
import xml.etree.ElementTree as ET

SOURCE_NS = "urn:iso:std:iso:20022:tech:xsd:camt.053.001.10"
TARGET_NS = "urn:iso:std:iso:20022:tech:xsd:camt.053.001.08"


def random_string(size: int, letters: bool = False, digits: bool = False):
    population = ""
    if letters:
        population += string.ascii_letters
    if digits:
        population += string.digits
    return "".join(random.choices(population=population, k=size))


def fake_iban(country: str = "CH"):
    return country + random_string(size=19, digits=True)


def make_balance(
    code: str = "OPBD",
    amount: str = "100.00",
    currency: str = "CHF",
    credit_debit: str = "CRDT",
    date: str = "<Dt>2025-01-01</Dt>",
) -> str:
    return f"""
    <Bal>
      <Tp><CdOrPrtry><Cd>{code}</Cd></CdOrPrtry></Tp>
      <Amt Ccy="{currency}">{amount}</Amt>
      <CdtDbtInd>{credit_debit}</CdtDbtInd>
      <Dt>{date}</Dt>
    </Bal>"""


def make_entry(
    amount: str = "25.50",
    currency: str = "CHF",
    credit_debit: str = "DBIT",
    booking_date: str = "<DtTm>2025-01-10T09:15:00+01:00</DtTm>",
    value_date: str | None = "<Dt>2025-01-10</Dt>",
    description: str | None = "Coffee shop",
    reference: str | None = None,
    details: str = "",
    bank_transaction_code: str = "<Prtry><Cd>CARD_PAYMENT</Cd></Prtry>",
    extra: str = "",
) -> str:
    parts = [
        f'<Amt Ccy="{currency}">{amount}</Amt>',
        f"<CdtDbtInd>{credit_debit}</CdtDbtInd>",
        "<Sts><Cd>BOOK</Cd></Sts>",
        f"<BookgDt>{booking_date}</BookgDt>",
    ]
    if value_date is not None:
        parts.append(f"<ValDt>{value_date}</ValDt>")
    if reference is not None:
        parts.append(f"<AcctSvcrRef>{reference}</AcctSvcrRef>")
    parts.append(f"<BkTxCd>{bank_transaction_code}</BkTxCd>")
    parts.append(extra)
    if details:
        parts.append(f"<NtryDtls>{details}</NtryDtls>")
    if description is not None:
        parts.append(f"<AddtlNtryInf>{description}</AddtlNtryInf>")
    return "<Ntry>" + "".join(parts) + "</Ntry>"


def make_statement(
    iban: str = "CH9300762011623852957",
    currency: str | None = "CHF",
    owner: str | None = "Jane Doe",
    balances: str | None = None,
    entries: tuple[str, ...] = (),
    statement_id: str = "STMT-1",
    extra: str = "",
) -> str:
    if balances is None:
        balances = make_balance(
            code="OPBD", amount="100.00", currency=currency or "CHF"
        ) + make_balance(
            code="CLBD",
            amount="74.50",
            currency=currency or "CHF",
            date="<Dt>2025-01-31</Dt>",
        )
    account = f"<Id><IBAN>{iban}</IBAN></Id>"
    if currency is not None:
        account += f"<Ccy>{currency}</Ccy>"
    if owner is not None:
        account += f"<Ownr><Nm>{owner}</Nm></Ownr>"
    body = "".join(entries)
    return f"""
  <Stmt>
    <Id>{statement_id}</Id>
    <ElctrncSeqNb>7</ElctrncSeqNb>
    <CreDtTm>2025-02-01T06:00:00.123456789Z</CreDtTm>
    <FrToDt>
      <FrDtTm>2025-01-01T00:00:00+01:00</FrDtTm>
      <ToDtTm>2025-01-31T23:59:59+01:00</ToDtTm>
    </FrToDt>
    {extra}
    <Acct>{account}</Acct>
    {balances}
    {body}
  </Stmt>"""


def make_document(
    statements: tuple[str, ...] | None = None,
    message_id: str = "MSG-20250201-1",
    created: str = "2025-02-01T06:00:00.291656435Z",
    namespace: str = SOURCE_NS,
    header_extra: str = "",
) -> bytes:
    if statements is None:
        statements = (make_statement(entries=(make_entry(),)),)
    body = "".join(statements)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<Document xmlns="{namespace}">
  <BkToCstmrStmt>
    <GrpHdr>
      <MsgId>{message_id}</MsgId>
      <CreDtTm>{created}</CreDtTm>
      {header_extra}
    </GrpHdr>
    {body}
  </BkToCstmrStmt>
</Document>
""".encode("utf-8")


def parse_output(data: bytes) -> ET.Element:
    return ET.fromstring(data)


def find(element: ET.Element, path: str) -> ET.Element:
    found = element.find(
        "/".join(f"t:{tag}" for tag in path.split("/")), {"t": TARGET_NS}
    )
    assert found is not None, f"{path} not found"
    return found


def findall(element: ET.Element, path: str) -> list[ET.Element]:
    return element.findall(
        "/".join(f"t:{tag}" for tag in path.split("/")), {"t": TARGET_NS}
    )


def children(element: ET.Element) -> list[str]:
    return [child.tag.split("}")[-1] for child in element]
