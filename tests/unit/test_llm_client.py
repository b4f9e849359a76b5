"""Tests for the completion client.

All tests are deterministic and do not make real network calls.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import SecretStr

from backend.smartcite.config import ConfigurationError
from backend.smartcite.llm.client import CompletionError, OpenAIClient, get_completion_client
from backend.smartcite.models.session import Turn


def make_response(content: str | None) -> MagicMock:
    """Helper to build a chat completions response."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture(autouse=True)
def clear_client_cache() -> None:
    """Reset the cached factory between tests."""
    get_completion_client.cache_clear()


@pytest.mark.asyncio
async def test_openai_client_sends_turns_and_returns_content() -> None:
    """Test that OpenAIClient forwards role-tagged turns (mocked)."""
    mock_openai_client = AsyncMock()
    mock_openai_client.chat.completions.create = AsyncMock(
        return_value=make_response("A summary.")
    )

    client = OpenAIClient(api_key="test_key", model="gpt-4o")
    client.client = mock_openai_client

    reply = await client.complete(
        [Turn.system("sys"), Turn.user("hello")], temperature=1.2
    )

    assert reply == "A summary."
    mock_openai_client.chat.completions.create.assert_called_once_with(
        model="gpt-4o",
        messages=[
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "hello"},
        ],
        temperature=1.2,
    )


@pytest.mark.asyncio
async def test_openai_client_model_override() -> None:
    """Test that a per-call model overrides the default."""
    mock_openai_client = AsyncMock()
    mock_openai_client.chat.completions.create = AsyncMock(return_value=make_response("ok"))

    client = OpenAIClient(api_key="test_key", model="default-model")
    client.client = mock_openai_client

    await client.complete([Turn.user("hi")], temperature=0.2, model="gpt-4o")

    kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"


@pytest.mark.asyncio
async def test_openai_client_raises_on_empty_content() -> None:
    """Test that a None content reply is an error, not an empty string."""
    mock_openai_client = AsyncMock()
    mock_openai_client.chat.completions.create = AsyncMock(return_value=make_response(None))

    client = OpenAIClient(api_key="test_key")
    client.client = mock_openai_client

    with pytest.raises(CompletionError):
        await client.complete([Turn.user("hi")], temperature=0.2)


@pytest.mark.asyncio
async def test_openai_client_propagates_api_errors() -> None:
    """Test that SDK errors are not swallowed."""
    mock_openai_client = AsyncMock()
    mock_openai_client.chat.completions.create = AsyncMock(side_effect=Exception("API error"))

    client = OpenAIClient(api_key="test_key")
    client.client = mock_openai_client

    with pytest.raises(Exception, match="API error"):
        await client.complete([Turn.user("hi")], temperature=0.2)


def test_get_completion_client_raises_when_no_api_key() -> None:
    """Test that a missing key is a configuration error."""
    with patch("backend.smartcite.llm.client.get_settings") as mock_get_settings:
        mock_get_settings.return_value.completion_configured = False

        with pytest.raises(ConfigurationError):
            get_completion_client()


def test_get_completion_client_returns_openai_when_api_key_present() -> None:
    """Test that get_completion_client builds an OpenAI client when key present."""
    with patch("backend.smartcite.llm.client.get_settings") as mock_get_settings:
        settings = mock_get_settings.return_value
        settings.completion_configured = True
        settings.openai_api_key = SecretStr("test_key")
        settings.openai_model = "gpt-4o"
        settings.openai_base_url = "https://models.github.ai/inference"

        client = get_completion_client()

        assert isinstance(client, OpenAIClient)
        assert client.model == "gpt-4o"
