import pytest
import requests


def registry_xml(entries):
    """Build a list-one document from (country, name, code, num, minor_units) tuples; None omits a child."""
    tags = ["CtryNm", "CcyNm", "Ccy", "CcyNbr", "CcyMnrUnts"]
    parts = []
    for entry in entries:
        children = "".join(f"<{t}>{v}</{t}>" for t, v in zip(tags, entry) if v is not None)
        parts.append(f"<CcyNtry>{children}</CcyNtry>")
    body = "".join(parts)
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<ISO_4217 Pblshd="2025-01-01"><CcyTbl>{body}</CcyTbl></ISO_4217>'
    ).encode("utf-8")


SAMPLE_ENTRIES = [
    ("UNITED STATES OF AMERICA (THE)", "US Dollar", "USD", "840", "2"),
    ("JAPAN", "Yen", "JPY", "392", "0"),
    ("INTERNATIONAL MONETARY FUND (IMF)", "SDR (Special Drawing Right)", "XDR", "960", "N.A."),
    ("ZZ07_No_Currency", "The codes assigned for transactions where no currency is involved", "XXX", "999", "N.A."),
    ("ZZ06_Testing_Code", "Codes specifically reserved for testing purposes", "XTS", "963", "N.A."),
    ("ANTARCTICA", "No universal currency", None, None, None),
]


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code


@pytest.fixture
def fake_registry(monkeypatch):
    """Serve the given XML from requests.get; returns the list of requested URLs."""
    calls = []

    def install(content: bytes, status_code: int = 200):
        def fake_get(url, timeout=None):
            calls.append(url)
            return FakeResponse(content, status_code)

        monkeypatch.setattr(requests, "get", fake_get)
        return calls

    return install


@pytest.fixture
def offline_registry(monkeypatch):
    def fake_get(url, timeout=None):
        raise requests.ConnectionError("network unreachable")

    monkeypatch.setattr(requests, "get", fake_get)
