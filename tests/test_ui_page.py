from __future__ import annotations

from ui.backend.page import render_page


def test_page_contains_header_form_and_footer() -> None:
    html = render_page(year=2024)
    assert "<title>CityLens</title>" in html
    assert 'class="logo-mark"' in html
    assert "&copy; 2024 CityLens. Help make your city better." in html
    assert "Analyze Image with AI" in html
    assert "Select Report Recipients" in html
    assert "__YEAR__" not in html


def test_page_title_is_escaped() -> None:
    html = render_page(title="<City>")
    assert "<title>&lt;City&gt;</title>" in html


def test_page_requests_location_with_ten_second_timeout() -> None:
    assert "{timeout: 10000}" in render_page()


def test_page_releases_draft_when_closed() -> None:
    html = render_page()
    assert 'addEventListener("pagehide"' in html
    assert 'method: "DELETE", keepalive: true' in html
