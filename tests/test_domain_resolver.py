import asyncio
from dataclasses import replace

from logofetch.workflows import domain_resolver
from logofetch.workflows.domain_resolver import (
    Confidence,
    parse_search_results,
    resolve_domain,
    resolve_offline,
)
from logofetch.workflows.logo_config import DEFAULT_CONFIG

OFFLINE = replace(DEFAULT_CONFIG, live_search=False)
LIVE = replace(DEFAULT_CONFIG, live_search=True)


def _no_live_search(calls):
    async def _search(text):
        calls.append(text)
        return None

    return _search


def test_resolve_exact_ignores_case_and_punctuation():
    resolved = asyncio.run(resolve_domain("  Next.JS ", config=OFFLINE))
    assert resolved.domain == "nextjs.org"
    assert resolved.confidence is Confidence.EXACT
    assert resolved.company == "nextjs"
    assert resolved.matched_name == "nextjs"
    assert resolved.category == "Framework"


def test_resolve_alias_reports_declared_alias():
    resolved = asyncio.run(resolve_domain("GH", config=OFFLINE))
    assert resolved.domain == "github.com"
    assert resolved.confidence is Confidence.ALIAS
    assert resolved.company == "github"
    assert resolved.matched_name == "gh"


def test_resolve_fuzzy_tolerates_typo():
    resolved = asyncio.run(resolve_domain("shoppify", config=OFFLINE))
    assert resolved.domain == "shopify.com"
    assert resolved.confidence is Confidence.FUZZY
    assert resolved.company == "shopify"


def test_curated_hit_never_calls_live_search():
    calls = []
    resolved = asyncio.run(resolve_domain("Stripe", config=LIVE, live_search=_no_live_search(calls)))
    assert resolved.confidence is Confidence.EXACT
    assert calls == []


def test_resolve_live_search_result():
    async def _search(text):
        return "acme-widgets.io"

    resolved = asyncio.run(resolve_domain("Acme Widgets Intl", config=LIVE, live_search=_search))
    assert resolved.domain == "acme-widgets.io"
    assert resolved.confidence is Confidence.LIVE_SEARCH
    assert resolved.company == "Acme Widgets Intl"
    assert resolved.matched_name == "Acme Widgets Intl"
    assert resolved.category == "Unknown (Live Search)"


def test_resolve_inferred_when_live_search_misses():
    calls = []
    resolved = asyncio.run(resolve_domain("zzznotreal999", config=LIVE, live_search=_no_live_search(calls)))
    assert calls == ["zzznotreal999"]
    assert resolved.domain == "zzznotreal999.com"
    assert resolved.confidence is Confidence.INFERRED
    assert resolved.category == "Unknown"


def test_resolve_inferred_strips_whitespace():
    resolved = asyncio.run(resolve_domain("Quux  Holdings Group", config=OFFLINE))
    assert resolved.domain == "quuxholdingsgroup.com"
    assert resolved.company == "quuxholdingsgroup"
    assert resolved.matched_name == "quuxholdingsgroup"


def test_disabled_live_search_is_not_called():
    calls = []
    resolved = asyncio.run(resolve_domain("zzznotreal999", config=OFFLINE, live_search=_no_live_search(calls)))
    assert calls == []
    assert resolved.confidence is Confidence.INFERRED


def test_empty_input_infers_bare_tld():
    calls = []
    resolved = asyncio.run(resolve_domain("", config=LIVE, live_search=_no_live_search(calls)))
    assert calls == []
    assert resolved.domain == ".com"
    assert resolved.confidence is Confidence.INFERRED


def test_fuzzy_ties_keep_first_entry_in_database_order():
    # "ets" is one edit from both the etsy key and typescript's "ts" alias.
    tied = resolve_offline("ets")
    assert tied.confidence is Confidence.FUZZY
    assert tied.company == "etsy"

    # "wo" is one edit from woocommerce's "woo" alias and later short names.
    tied = resolve_offline("wo")
    assert tied.confidence is Confidence.FUZZY
    assert tied.company == "woocommerce"
    assert tied.matched_name == "woo"


def test_resolve_offline_returns_none_for_unknown():
    assert resolve_offline("zzznotreal999") is None
    assert resolve_offline("hub spot").confidence is Confidence.ALIAS


def test_to_dict_serializes_confidence_value():
    payload = resolve_offline("shoppify").to_dict()
    assert payload["confidence"] == "fuzzy"
    assert payload["domain"] == "shopify.com"


SEARCH_PAGE = """
<html><body>
  <div class="result">
    <a class="result__url" href="/l/?u=1">en.wikipedia.org/wiki/Acme</a>
  </div>
  <div class="result">
    <a class="result__url" href="/l/?u=2"> https://www.LinkedIn.com/company/acme </a>
  </div>
  <div class="result">
    <a class="result__url" href="/l/?u=3">
      www.acme.example/about
    </a>
  </div>
  <div class="result">
    <a class="result__url" href="/l/?u=4">other.example</a>
  </div>
</body></html>
"""


def test_parse_search_results_skips_excluded_hosts():
    assert parse_search_results(SEARCH_PAGE) == "acme.example"


def test_parse_search_results_no_match():
    page = '<div><span class="result__url">github.com/acme</span></div>'
    assert parse_search_results(page) is None
    assert parse_search_results("<html></html>") is None


class _FakeResponse:
    def __init__(self, status, body):
        self.status = status
        self._body = body
        self.headers = {"content-type": "text/html; charset=utf-8"}

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def read(self):
        return self._body


class _FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def test_search_web_for_domain_sends_query_and_headers():
    session = _FakeSession(_FakeResponse(200, SEARCH_PAGE.encode("utf-8")))
    host = asyncio.run(domain_resolver.search_web_for_domain("Acme", session=session, config=LIVE))
    assert host == "acme.example"
    url, kwargs = session.calls[0]
    assert url.startswith("https://html.duckduckgo.com/html/?q=Acme+official+website")
    assert kwargs["headers"]["Cookie"] == "ah=wt"
    assert kwargs["headers"]["User-Agent"] == DEFAULT_CONFIG.search_user_agent
    assert kwargs["timeout"].total == DEFAULT_CONFIG.live_search_timeout


def test_search_web_for_domain_swallows_failures():
    bad_status = _FakeSession(_FakeResponse(503, b""))
    assert asyncio.run(domain_resolver.search_web_for_domain("Acme", session=bad_status)) is None

    timed_out = _FakeSession(error=asyncio.TimeoutError())
    assert asyncio.run(domain_resolver.search_web_for_domain("Acme", session=timed_out)) is None

    refused = _FakeSession(error=ConnectionRefusedError("refused"))
    assert asyncio.run(domain_resolver.search_web_for_domain("Acme", session=refused)) is None


def test_resolve_domain_uses_supplied_session_for_live_search():
    session = _FakeSession(_FakeResponse(200, SEARCH_PAGE.encode("utf-8")))
    resolved = asyncio.run(resolve_domain("Acme Widgets Intl", session=session, config=LIVE))
    assert resolved.domain == "acme.example"
    assert resolved.confidence is Confidence.LIVE_SEARCH
