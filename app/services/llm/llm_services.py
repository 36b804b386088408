# app/services/llm/llm_services.py
import asyncio
import logging
from typing import Callable, Dict, Sequence

from google import genai
from google.genai import errors, types

from app.core.exceptions import UpstreamExhausted
from app.models.llm_models import ModelCandidate, UpstreamResult
from app.services.llm.llm_utils import classify_upstream_error, extract_generated_text

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

# api_version -> client bound to that version
ClientFactory = Callable[[str], genai.Client]


def gemini_client_factory(api_key: str, timeout_seconds: float) -> ClientFactory:
    """Builds Gemini API clients for a single key, one per API version."""
    def build(api_version: str) -> genai.Client:
        return genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(api_version=api_version, timeout=int(timeout_seconds * 1000)),
        )
    return build


class GeminiGateway:
    """
    Sends prompts to the Gemini API, one candidate at a time.
    Clients are created lazily per API version and reused across requests.
    """

    def __init__(self, client_factory: ClientFactory, timeout_seconds: float):
        self._client_factory = client_factory
        self._clients: Dict[str, genai.Client] = {}
        self.timeout_seconds = timeout_seconds

    def _client_for(self, api_version: str) -> genai.Client:
        if api_version not in self._clients:
            self._clients[api_version] = self._client_factory(api_version)
        return self._clients[api_version]

    async def generate(self, candidate: ModelCandidate, prompt: str) -> UpstreamResult:
        """Single attempt against one candidate. Never raises for upstream failures."""
        logger.debug(f"Calling {candidate.endpoint}")
        try:
            client = self._client_for(candidate.api_version)
            response = await asyncio.wait_for(
                client.aio.models.generate_content(model=candidate.model_id, contents=prompt),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            return UpstreamResult(candidate=candidate, error=f"Timed out after {self.timeout_seconds}s")
        except errors.APIError as e:
            return UpstreamResult(candidate=candidate, error=classify_upstream_error(e.message or str(e)))
        except Exception as e:
            return UpstreamResult(candidate=candidate, error=classify_upstream_error(str(e)))

        text = extract_generated_text(response)
        if text is None:
            return UpstreamResult(candidate=candidate, error="Response contained no candidates")
        return UpstreamResult(candidate=candidate, text=text)

    async def generate_with_fallback(self, prompt: str, candidates: Sequence[ModelCandidate]) -> UpstreamResult:
        """
        Tries each candidate in order and returns the first successful result.
        Attempts are sequential; later candidates are not called once one succeeds.

        Raises:
            UpstreamExhausted: every candidate failed. Carries the last failure message.
        """
        last_error = "No model candidates configured"
        for candidate in candidates:
            result = await self.generate(candidate, prompt)
            if result.ok:
                logger.info(f"Model {candidate} answered")
                return result

            last_error = f"[{candidate.model_id}] {result.error}"
            logger.warning(f"Model {candidate} failed: {result.error}")

        raise UpstreamExhausted(last_error)
