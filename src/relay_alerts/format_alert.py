"""Render alerts as notification text."""

from relay_alerts.config import FormatConfig
from relay_alerts.identity import compute_page_key
from relay_alerts.models import AlertRecord


def obfuscate_domains(text: str, domains) -> str:
    """Break bare domain names so chat clients do not unfurl them ("cbs.tw" -> "cbs[.]tw")."""
    for domain in domains:
        text = text.replace(domain, domain.replace(".", "[.]"))
    return text


def reference_url(page_key: str, base_url: str) -> str:
    return base_url + page_key


def format_alert(record: AlertRecord, config: FormatConfig) -> str:
    """Body text, separator, then the canonical bulletin link."""
    page_key = compute_page_key(record, config.page_key_unique_length)
    body = obfuscate_domains(record.body_text, config.obfuscate_domains)
    return body + config.separator + reference_url(page_key, config.base_url)
