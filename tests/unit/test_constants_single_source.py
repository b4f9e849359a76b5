"""Test that constants are accessible from Settings and not duplicated."""

from pydantic import SecretStr

from backend.smartcite.citations.extract import MAX_STATEMENTS
from backend.smartcite.config import Settings, get_settings


def test_settings_accessible() -> None:
    """Test that Settings can be imported and accessed."""
    settings = get_settings()
    assert settings is not None


def test_document_limit_default() -> None:
    """Test the maximum stored document length."""
    assert Settings().max_document_chars == 12000


def test_temperature_defaults() -> None:
    """Test the sampling temperatures for each completion stage."""
    settings = Settings()
    assert settings.summary_temperature == 1.2
    assert settings.followup_temperature == 1.2
    assert settings.extraction_temperature == 0.7
    assert settings.citation_temperature == 0.2


def test_statement_cap_matches_filter_default() -> None:
    """Test that the configured cap and the filter default agree."""
    assert Settings().max_citation_statements == MAX_STATEMENTS == 10


def test_timeouts_positive() -> None:
    """Test that external call timeouts are bounded."""
    settings = Settings()
    assert settings.completion_timeout_s > 0
    assert settings.search_timeout_s > 0


def test_credential_flags() -> None:
    """Test configured flags treat blank keys as missing."""
    settings = Settings(openai_api_key=SecretStr(""), serpapi_api_key=None)
    assert settings.completion_configured is False
    assert settings.search_configured is False

    settings = Settings(openai_api_key=SecretStr("k"), serpapi_api_key=SecretStr("s"))
    assert settings.completion_configured is True
    assert settings.search_configured is True
