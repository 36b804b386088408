# app/services/tarot_services.py
import json
import logging
import time
from typing import Optional, Sequence

from pydantic import ValidationError

from app.core.exceptions import ConfigurationError, MalformedRequest, UpstreamExhausted
from app.models.llm_models import ModelCandidate
from app.models.tarot_models import Reading, ReadingRequest
from app.services.llm.llm_services import GeminiGateway
from app.services.llm.llm_utils import MODEL_CANDIDATES, strip_code_fences, truncate_diagnostic

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

READING_JSON_SHAPE = '{"intro":"..","readings":["..","..",".."],"conclusion":".."}'

language_prompts = {
    "ko": {
        "question": "당신은 타로 마스터입니다. 사용자의 고민은 다음과 같습니다:",
        "cards_drawn": "사용자가 뽑은 카드:",
        "past_label": "과거",
        "present_label": "현재",
        "future_label": "미래",
        "upright_label": "정방향",
        "reversed_label": "역방향",
        "instruction": "각 카드를 위치(과거, 현재, 미래)와 방향에 맞게 해석하고 고민과 연결하세요. 반드시 한국어로, 아래 JSON 형식으로만 답하세요:",
        "diagnostic_label": "진단",
        "fallback_intro": "타로 마스터가 새로운 기운을 느끼고 있습니다.",
        "fallback_readings": [
            "과거의 흐름이 당신에게 지혜를 주고 있습니다.",
            "현재는 명확한 판단이 필요한 시기입니다.",
            "미래는 당신의 결단에 따라 변화할 것입니다.",
        ],
        "fallback_conclusion": "카드의 메시지를 마음에 새기고 스스로를 믿으세요.",
    },
    "en": {
        "question": "You are a tarot master. The user's concern is:",
        "cards_drawn": "The user has drawn the following cards:",
        "past_label": "Past",
        "present_label": "Present",
        "future_label": "Future",
        "upright_label": "Upright",
        "reversed_label": "Reversed",
        "instruction": "Interpret each card by its position (Past, Present, Future) and orientation, and connect it to the concern. Answer in English, using only this JSON format:",
        "diagnostic_label": "Diagnostic",
        "fallback_intro": "The tarot master senses a new energy around you.",
        "fallback_readings": [
            "The currents of your past are offering you wisdom.",
            "The present calls for a clear judgement.",
            "The future will change according to your decision.",
        ],
        "fallback_conclusion": "Keep the cards' message close and trust yourself.",
    },
}


def resolve_language(requested: Optional[str], default: str = "ko") -> str:
    if isinstance(requested, str) and requested in language_prompts:
        return requested
    return default if default in language_prompts else "ko"


def build_prompt(request: ReadingRequest, language: str) -> str:
    """Render the reading prompt. The concern is interpolated as-is."""
    prompt_data = language_prompts[language]
    card_positions = [
        prompt_data["past_label"],
        prompt_data["present_label"],
        prompt_data["future_label"],
    ]

    prompt = (
        f"{prompt_data['question']}\n"
        f"\"{request.concern}\"\n\n"
        f"{prompt_data['cards_drawn']}\n"
    )
    for index, card in enumerate(request.cards):
        orientation = prompt_data["reversed_label"] if card.is_reversed else prompt_data["upright_label"]
        prompt += f"{card_positions[index]}: {card.name} ({orientation})\n"
    prompt += f"\n{prompt_data['instruction']}\n{READING_JSON_SHAPE}"
    return prompt


def fallback_reading(language: str, diagnostic: str, max_length: int = 120) -> Reading:
    """The fixed offline reading, with the failure reason appended to the conclusion."""
    prompt_data = language_prompts[language]
    fragment = truncate_diagnostic(diagnostic, max_length)
    return Reading(
        intro=prompt_data["fallback_intro"],
        readings=list(prompt_data["fallback_readings"]),
        conclusion=f"{prompt_data['fallback_conclusion']} [{prompt_data['diagnostic_label']}: {fragment}]",
    )


class TarotReadingService:
    """
    Turns a reading request into a Reading, via the Gemini API when it answers
    and the fixed offline reading when it does not.
    """

    def __init__(
        self,
        api_key: Optional[str],
        gateway: GeminiGateway,
        candidates: Sequence[ModelCandidate] = MODEL_CANDIDATES,
        min_key_length: int = 20,
        diagnostic_max_length: int = 120,
        default_language: str = "ko",
    ):
        self._api_key = api_key
        self.gateway = gateway
        self.candidates = tuple(candidates)
        self.min_key_length = min_key_length
        self.diagnostic_max_length = diagnostic_max_length
        self.default_language = resolve_language(default_language)

    def check_credential(self) -> None:
        if not self._api_key:
            raise ConfigurationError("GEMINI_API_KEY is not configured.")
        if len(self._api_key) < self.min_key_length:
            raise ConfigurationError(
                f"GEMINI_API_KEY looks invalid: expected at least {self.min_key_length} characters."
            )

    def parse_request(self, body: bytes) -> ReadingRequest:
        try:
            return ReadingRequest.model_validate_json(body)
        except ValidationError as e:
            raise MalformedRequest(f"Invalid reading request: {e.error_count()} error(s), first: {e.errors()[0]['msg']}") from e

    def language_hint(self, body: bytes) -> str:
        """Best-effort language for a body that did not validate as a ReadingRequest."""
        try:
            payload = json.loads(body)
        except ValueError:
            return self.default_language
        requested = payload.get("language") if isinstance(payload, dict) else None
        return resolve_language(requested, self.default_language)

    def normalize(self, text: str, language: str, model_id: str) -> Reading:
        """Parse model output as a Reading, replacing anything unparseable with the fallback."""
        try:
            return Reading.model_validate_json(strip_code_fences(text))
        except ValidationError:
            logger.warning(f"Model {model_id} returned text that is not a reading")
            return fallback_reading(language, f"[{model_id}] response was not a valid reading", self.diagnostic_max_length)

    async def read(self, body: bytes) -> Reading:
        """
        Produce a reading for a raw request body.

        Raises:
            ConfigurationError: the credential is missing or too short. Checked before anything else.
        """
        self.check_credential()
        request_received_time = time.time()
        logger.info("Starting tarot reading")

        try:
            request = self.parse_request(body)
        except MalformedRequest as e:
            logger.warning(f"Falling back: {e}")
            return fallback_reading(self.language_hint(body), str(e), self.diagnostic_max_length)

        language = resolve_language(request.language, self.default_language)
        prompt = build_prompt(request, language)
        logger.debug(prompt)

        try:
            result = await self.gateway.generate_with_fallback(prompt, self.candidates)
        except UpstreamExhausted as e:
            logger.warning(f"All models failed, falling back: {e.last_error}")
            return fallback_reading(language, e.last_error, self.diagnostic_max_length)

        reading = self.normalize(result.text, language, result.candidate.model_id)
        logger.info(f"Total tarot reading time: {time.time() - request_received_time:.4f} seconds")
        return reading
