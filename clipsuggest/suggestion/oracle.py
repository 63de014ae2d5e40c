"""Oracle clients: the external LLM that scores one transcript window against a prompt."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import anthropic
import openai
from anthropic import Anthropic
from openai import OpenAI

from clipsuggest.pipeline_config import OracleProvider
from clipsuggest.suggestion.prompts import MATCHES_SCHEMA, SYSTEM_PROMPT, USER_PROMPT_TEMPLATE

if TYPE_CHECKING:
    from clipsuggest.config import Settings

# Tool definition for Claude structured output
MATCH_TOOL: dict[str, Any] = {
    "name": "report_matches",
    "description": (
        "Report the transcript ranges that match the editor's request. "
        "Call this once with every match, or with an empty list."
    ),
    "input_schema": MATCHES_SCHEMA,
}


class OracleError(RuntimeError):
    """The oracle could not be reached or returned nothing usable."""


class OracleClient(Protocol):
    """Anything that can score a serialized window against a prompt.

    ``complete`` returns the raw structured payload (a dict, a list, or a JSON
    string) and raises on transport or API failure.  Implementations hold no
    per-call state and are shared across concurrent calls.
    """

    def complete(self, window_text: str, prompt: str) -> Any: ...


class AnthropicOracle:
    """Claude with a forced tool call so the reply is always structured.

    Retries are off and every request is capped at *timeout*, so a worker
    thread abandoned by the classifier's own timeout returns soon after it.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        max_output_tokens: int = 1024,
        timeout: float = 10.0,
        client: Anthropic | None = None,
    ) -> None:
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self._client = client or Anthropic(api_key=api_key, max_retries=0, timeout=timeout)

    def complete(self, window_text: str, prompt: str) -> Any:
        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=self.max_output_tokens,
                system=SYSTEM_PROMPT,
                tools=[MATCH_TOOL],
                tool_choice={"type": "tool", "name": "report_matches"},
                messages=[
                    {
                        "role": "user",
                        "content": USER_PROMPT_TEMPLATE.format(
                            prompt=prompt, window_text=window_text
                        ),
                    }
                ],
                timeout=self.timeout,
            )
        except anthropic.APIError as exc:
            raise OracleError(f"Claude request failed: {exc}") from exc

        for block in response.content:
            if block.type == "tool_use" and block.name == "report_matches":
                return block.input

        raise OracleError("Claude reply contained no report_matches tool call")


class OpenAIOracle:
    """OpenAI chat completions constrained by a strict JSON schema.

    Same retry and timeout policy as :class:`AnthropicOracle`.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        max_output_tokens: int = 1024,
        timeout: float = 10.0,
        client: OpenAI | None = None,
    ) -> None:
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self._client = client or OpenAI(api_key=api_key, max_retries=0, timeout=timeout)

    def complete(self, window_text: str, prompt: str) -> Any:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_output_tokens,
                temperature=0.0,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": USER_PROMPT_TEMPLATE.format(
                            prompt=prompt, window_text=window_text
                        ),
                    },
                ],
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "clip_matches",
                        "strict": True,
                        "schema": MATCHES_SCHEMA,
                    },
                },
                timeout=self.timeout,
            )
        except openai.OpenAIError as exc:
            raise OracleError(f"OpenAI request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise OracleError("OpenAI returned an empty response")
        return content


def build_oracle(settings: Settings) -> OracleClient:
    """Create the oracle client selected by ``settings.oracle_provider``.

    Raises:
        OracleError: If the provider is unknown or its API key is not configured.
    """
    try:
        provider = OracleProvider(settings.oracle_provider)
    except ValueError as exc:
        valid = ", ".join(p.value for p in OracleProvider)
        msg = f"Unknown oracle provider {settings.oracle_provider!r}. Expected one of: {valid}"
        raise OracleError(msg) from exc

    if provider is OracleProvider.ANTHROPIC:
        if not settings.anthropic_api_key:
            raise OracleError("Anthropic oracle requires ANTHROPIC_API_KEY to be set")
        return AnthropicOracle(
            api_key=settings.anthropic_api_key,
            model=settings.llm_model,
            max_output_tokens=settings.max_output_tokens,
            timeout=settings.oracle_timeout,
        )

    if not settings.openai_api_key:
        raise OracleError("OpenAI oracle requires OPENAI_API_KEY to be set")
    return OpenAIOracle(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        max_output_tokens=settings.max_output_tokens,
        timeout=settings.oracle_timeout,
    )
