#!/usr/bin/env python3

SOURCE_VERSION = "camt.053.001.10"
TARGET_VERSION = "camt.053.001.08"

SOURCE_NAMESPACE = f"urn:iso:std:iso:20022:tech:xsd:{SOURCE_VERSION}"
TARGET_NAMESPACE = f"urn:iso:std:iso:20022:tech:xsd:{TARGET_VERSION}"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
TARGET_SCHEMA_LOCATION = f"{TARGET_NAMESPACE} {TARGET_VERSION}.xsd"

# Institutional data the newer schema does not carry, always written as is.
PLACEHOLDER_RECIPIENT_BIC = "XXXXXXXX"
PLACEHOLDER_SERVICER_BIC = "XXXXXXXX"
PLACEHOLDER_SERVICER_NAME = "Bank"
PLACEHOLDER_SERVICER_OTHER_ID = "XXX-000.000.000"
PLACEHOLDER_SERVICER_OTHER_ISSUER = "ID"
PLACEHOLDER_ADDITIONAL_INFO = "SPS/2.1"
PLACEHOLDER_PAGE_NUMBER = "1"
PLACEHOLDER_LAST_PAGE = "true"

OPENING_BALANCE_CODES = ("OPBD", "PRCD")
CLOSING_BALANCE_CODES = ("CLBD",)

CREDIT = "CRDT"
DEBIT = "DBIT"

MAX_UNSTRUCTURED_REMITTANCE = 140
