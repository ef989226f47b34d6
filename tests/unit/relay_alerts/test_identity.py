"""Tests for relay_alerts.identity and relay_alerts.format_alert modules."""

from relay_alerts.config import FormatConfig
from relay_alerts.format_alert import format_alert, obfuscate_domains
from relay_alerts.identity import compute_page_key
from relay_alerts.models import AlertRecord


def record(release_time: str = "2024-01-05 08:30:00", page_key: str = "123", text: str = "地震速報") -> AlertRecord:
    return AlertRecord(release_time=release_time, page_key=page_key, category="eq", body_text=text)


class TestComputePageKey:
    def test_short_key_gets_release_prefix(self) -> None:
        assert compute_page_key(record(), 10) == "2401123"

    def test_prefix_skips_century_of_compact_time(self) -> None:
        assert compute_page_key(record(release_time="202312312359", page_key="9"), 10) == "23129"

    def test_long_key_unchanged(self) -> None:
        assert compute_page_key(record(page_key="abcdefghij"), 10) == "abcdefghij"

    def test_same_bulletin_same_key_across_formats(self) -> None:
        a = compute_page_key(record(release_time="2024-01-05 08:30:00"), 10)
        b = compute_page_key(record(release_time="20240105083000"), 10)
        assert a == b


class TestObfuscateDomains:
    def test_breaks_domain(self) -> None:
        assert obfuscate_domains("詳見 cbs.tw 網站", ["cbs.tw"]) == "詳見 cbs[.]tw 網站"

    def test_no_domains(self) -> None:
        assert obfuscate_domains("text", []) == "text"


class TestFormatAlert:
    def test_body_separator_link(self) -> None:
        message = format_alert(record(text="請至 cbs.tw 查詢"), FormatConfig())
        assert message == "請至 cbs[.]tw 查詢\n---\nhttps://cbs.tw/2401123"

    def test_custom_base_url(self) -> None:
        config = FormatConfig(base_url="https://alerts.example/", obfuscate_domains=())
        assert format_alert(record(), config).endswith("https://alerts.example/2401123")
