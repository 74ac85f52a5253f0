from unittest.mock import MagicMock

import pytest
import requests

from headhunt.config import USER_AGENT, Settings
from headhunt.errors import FetchError, InvalidURLError
from headhunt.fetch import build_session, fetch_page, validate_url
from headhunt.pipeline import analyze_url

from conftest import E2E_HTML


def _response(text="<html></html>", status=200, url="https://example.com/", history=(),
              content_type="text/html; charset=utf-8", content=None):
    resp = MagicMock()
    resp.text = text
    resp.content = text.encode("utf-8") if content is None else content
    resp.headers = {"Content-Type": content_type} if content_type else {}
    resp.status_code = status
    resp.url = url
    resp.history = list(history)
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Client Error")
    else:
        resp.raise_for_status.return_value = None
    return resp


class TestValidateUrl:
    @pytest.mark.parametrize("url", ["https://example.com", "http://example.com/a?b=1", "https://127.0.0.1:8080/"])
    def test_accepts_http_urls(self, url):
        assert validate_url(url) == url

    @pytest.mark.parametrize("url", ["", None, "   ", "example.com", "ftp://example.com", "https://", "http://[::1"])
    def test_rejects_invalid(self, url):
        with pytest.raises(InvalidURLError):
            validate_url(url)


class TestBuildSession:
    def test_session_settings(self):
        s = build_session(Settings())

        assert s.headers["User-Agent"] == USER_AGENT
        assert "text/html" in s.headers["Accept"]
        assert s.max_redirects == 5
        assert s.verify is False

    def test_custom_settings(self):
        s = build_session(Settings(user_agent="Bot/1.0", max_redirects=2, verify_tls=True))

        assert s.headers["User-Agent"] == "Bot/1.0"
        assert s.max_redirects == 2
        assert s.verify is True


class TestFetchPage:
    def test_success(self):
        session = MagicMock()
        session.get.return_value = _response(text=E2E_HTML, url="https://example.com/final", history=[object()])

        page = fetch_page("https://example.com/", Settings(), session=session)

        session.get.assert_called_once_with("https://example.com/", allow_redirects=True, timeout=30.0)
        assert page.markup == E2E_HTML
        assert page.final_url == "https://example.com/final"
        assert page.redirects == 1
        session.close.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            requests.ConnectionError("refused"),
            requests.Timeout("timed out"),
            requests.exceptions.SSLError("bad cert"),
            requests.TooManyRedirects("Exceeded 5 redirects."),
        ],
    )
    def test_transport_errors_become_fetch_error(self, error):
        session = MagicMock()
        session.get.side_effect = error

        with pytest.raises(FetchError) as exc:
            fetch_page("https://example.com/", Settings(), session=session)

        assert exc.value.url == "https://example.com/"
        assert str(exc.value).startswith("Failed to fetch page:")

    def test_non_success_status_is_fetch_error(self):
        session = MagicMock()
        session.get.return_value = _response(status=404)

        with pytest.raises(FetchError) as exc:
            fetch_page("https://example.com/missing", Settings(), session=session)

        assert "404" in exc.value.reason


class TestBodyDecoding:
    UTF8_PAGE = "<html><head><title>Café Münster</title></head><body></body></html>"

    def _fetch(self, resp):
        session = MagicMock()
        session.get.return_value = resp
        return fetch_page("https://example.com/", Settings(), session=session)

    def test_missing_charset_decodes_utf8_bytes(self):
        body = self.UTF8_PAGE.encode("utf-8")
        # what requests would produce with its ISO-8859-1 fallback
        resp = _response(text=body.decode("iso-8859-1"), content_type="text/html", content=body)

        page = self._fetch(resp)

        assert "<title>Café Münster</title>" in page.markup
        assert len(page.markup.encode("utf-8")) == len(body)

    def test_missing_header_uses_declared_meta_charset(self):
        markup = '<html><head><meta charset="iso-8859-1"><title>Café</title></head></html>'
        body = markup.encode("iso-8859-1")
        resp = _response(text=markup, content_type=None, content=body)

        page = self._fetch(resp)

        assert page.markup == markup

    def test_header_charset_is_trusted(self):
        resp = _response(text="<title>déjà</title>", content_type="text/html; Charset=UTF-8", content=b"ignored")

        page = self._fetch(resp)

        assert page.markup == "<title>déjà</title>"

    def test_report_from_undeclared_charset_page(self, fixed_clock):
        body = self.UTF8_PAGE.encode("utf-8")
        session = MagicMock()
        session.get.return_value = _response(text=body.decode("iso-8859-1"), content_type="text/html", content=body)

        report = analyze_url("https://example.com/", Settings(), session=session, clock=fixed_clock)

        assert report.seo["basic"]["title"] == "Café Münster"
        assert report.seo["performance"]["htmlSize"] == len(body)


class TestAnalyzeUrl:
    def test_fetch_then_analyze(self, fixed_clock):
        session = MagicMock()
        session.get.return_value = _response(text=E2E_HTML)

        report = analyze_url("https://example.com/", Settings(), session=session, clock=fixed_clock)

        assert report.url == "https://example.com/"
        assert report.seo["basic"]["title"] == "Fixture Page"
        assert report.seo["headings"]["counts"]["h1"] == 2

    def test_invalid_url_never_fetches(self):
        session = MagicMock()

        with pytest.raises(InvalidURLError):
            analyze_url("not a url", Settings(), session=session)

        session.get.assert_not_called()
