# toolroom/services/ai_gateway.py
"""
Client for the OpenAI compatible chat completions gateway.

Chat answers are streamed as server-sent events (``data: {...}`` lines
ending with ``data: [DONE]``). Quiz questions come back as a forced tool
call, forecasts as a JSON object inside the message text.
"""
import json
import re
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import Any

import httpx

from toolroom.core.config import Settings, get_settings
from toolroom.core.logging import get_logger

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Çok fazla istek gönderildi, lütfen biraz bekleyin."
CREDITS_MESSAGE = "AI kredisi tükendi."
GENERIC_MESSAGE = "AI servisi yanıt veremedi."
MISSING_KEY_MESSAGE = "AI_GATEWAY_API_KEY tanımlı değil."

SSE_DONE = "[DONE]"

CHAT_SYSTEM_PROMPT = """Sen, talaşlı imalat (CNC işleme) konusunda uzmanlaşmış bir yapay zeka asistanısın. Adın "GAGE AI Asistan".

Uzmanlık alanların:
- CNC torna, freze, taşlama, delme, diş açma işlemleri
- Kesme parametreleri (devir, ilerleme, kesme hızı, talaş derinliği)
- Takım ömrü hesaplamaları ve Taylor denklemi
- Malzeme özellikleri (çelik, alüminyum, titanyum, inconel, paslanmaz çelik vb.)
- Takım geometrisi ve kaplamaları (TiN, TiAlN, AlCrN, CVD, PVD)
- Toleranslar (ISO 286, IT sınıfları, geometrik toleranslar, GD&T)
- Diş standartları (Metrik, UNC, UNF, BSP, NPT, Trapez)
- Yüzey pürüzlülüğü (Ra, Rz değerleri)
- CNC programlama (G-code, M-code)
- Soğutma sıvıları ve yağlama
- Maliyet hesaplamaları ve verimlilik optimizasyonu

Kurallar:
1. Yanıtlarını Türkçe ver.
2. Teknik terimleri hem Türkçe hem İngilizce olarak belirt.
3. Mümkün olduğunca formüller, tablolar ve pratik örnekler ver.
4. Güvenlik uyarılarını her zaman belirt.
5. Yanıtlarını markdown formatında düzenle.
6. Emin olmadığın konularda bunu belirt, yanlış bilgi verme.
7. Kullanıcı görsel gönderirse ölçüleri, toleransları, malzemeyi ve işlem adımlarını analiz et."""

QUIZ_DIFFICULTY = {
    "easy": "Kolay seviye - temel kavramlar, basit formüller, genel bilgi soruları",
    "medium": "Orta seviye - parametre hesaplama, malzeme seçimi, tolerans bilgisi",
    "hard": "Zor seviye - ileri düzey Taylor denklemi, karmaşık optimizasyon, standart detayları",
}
QUIZ_LANGUAGES = {"tr": "Türkçe", "en": "İngilizce", "fr": "Fransızca"}
QUIZ_QUESTION_COUNT = 5

QUIZ_TOOL = {
    "type": "function",
    "function": {
        "name": "generate_questions",
        "description": "Generate quiz questions for CNC machining",
        "parameters": {
            "type": "object",
            "properties": {
                "questions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "question": {"type": "string"},
                            "options": {"type": "array", "items": {"type": "string"}},
                            "correct_index": {"type": "number"},
                            "explanation": {"type": "string"},
                        },
                        "required": ["question", "options", "correct_index", "explanation"],
                        "additionalProperties": False,
                    },
                },
            },
            "required": ["questions"],
            "additionalProperties": False,
        },
    },
}

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class AIGatewayError(Exception):
    """Gateway failure carrying the status and message shown to the user."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def error_for_status(status_code: int) -> AIGatewayError:
    if status_code == 429:
        return AIGatewayError(429, RATE_LIMIT_MESSAGE)
    if status_code == 402:
        return AIGatewayError(402, CREDITS_MESSAGE)
    return AIGatewayError(500, GENERIC_MESSAGE)


# -- server-sent events -------------------------------------------------------


def parse_sse_line(line: str) -> str | None:
    """
    Content delta of one SSE line, ``SSE_DONE`` for the end marker, None for
    anything to skip (comments, blank lines, other fields, broken JSON).
    """
    line = line.rstrip("\r")
    if not line or line.startswith(":") or not line.startswith("data: "):
        return None
    payload = line[6:].strip()
    if payload == SSE_DONE:
        return SSE_DONE
    try:
        parsed = json.loads(payload)
    except ValueError:
        return None
    try:
        content = parsed["choices"][0]["delta"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
    return content or None


def iter_sse_content(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        content = parse_sse_line(line)
        if content == SSE_DONE:
            return
        if content:
            yield content


async def aiter_sse_content(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    async for line in lines:
        content = parse_sse_line(line)
        if content == SSE_DONE:
            return
        if content:
            yield content


def transform_messages(messages: Iterable[dict]) -> list[dict]:
    """User messages carrying ``imageUrl`` become multimodal content."""
    out = []
    for msg in messages:
        role = msg.get("role", "user")
        image_url = msg.get("imageUrl") or msg.get("image_url")
        if image_url and role == "user":
            content: list[dict] = []
            if msg.get("content"):
                content.append({"type": "text", "text": msg["content"]})
            content.append({"type": "image_url", "image_url": {"url": image_url}})
            out.append({"role": role, "content": content})
        else:
            out.append({"role": role, "content": msg.get("content", "")})
    return out


class AIGateway:
    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.settings.AI_GATEWAY_API_KEY)

    def _client(self) -> httpx.AsyncClient:
        if not self.configured:
            raise AIGatewayError(500, MISSING_KEY_MESSAGE)
        return httpx.AsyncClient(
            timeout=self.settings.AI_TIMEOUT_SECONDS,
            transport=self.transport,
            headers={
                "Authorization": f"Bearer {self.settings.AI_GATEWAY_API_KEY}",
                "Content-Type": "application/json",
            },
        )

    async def _post_json(self, body: dict, operation: str) -> dict:
        async with self._client() as client:
            try:
                response = await client.post(self.settings.AI_GATEWAY_URL, json=body)
            except httpx.RequestError as exc:
                logger.error("ai_gateway_unreachable", operation=operation, error_type=type(exc).__name__)
                raise AIGatewayError(500, GENERIC_MESSAGE) from exc

        if response.status_code != 200:
            logger.warning(
                "ai_gateway_error",
                operation=operation,
                status_code=response.status_code,
                response_text=response.text[:500],
            )
            raise error_for_status(response.status_code)
        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("ai_gateway_invalid_json", operation=operation, response_text=response.text[:500])
            raise AIGatewayError(500, GENERIC_MESSAGE) from exc
        if not isinstance(data, dict):
            logger.warning("ai_gateway_invalid_body", operation=operation, body_type=type(data).__name__)
            raise AIGatewayError(500, GENERIC_MESSAGE)
        return data

    # -- chat ---------------------------------------------------------------

    def chat_body(self, messages: Iterable[dict]) -> dict:
        return {
            "model": self.settings.AI_CHAT_MODEL,
            "messages": [{"role": "system", "content": CHAT_SYSTEM_PROMPT}, *transform_messages(messages)],
            "stream": True,
        }

    async def open_chat_stream(self, messages: Iterable[dict]) -> AsyncIterator[bytes]:
        """
        Start a streaming chat completion. Gateway errors are raised here,
        before any byte is handed out; the returned iterator relays the raw
        event stream and closes the connection when exhausted.
        """
        client = self._client()
        request = client.build_request("POST", self.settings.AI_GATEWAY_URL, json=self.chat_body(messages))
        try:
            response = await client.send(request, stream=True)
        except httpx.RequestError as exc:
            await client.aclose()
            logger.error("ai_gateway_unreachable", operation="chat", error_type=type(exc).__name__)
            raise AIGatewayError(500, GENERIC_MESSAGE) from exc

        if response.status_code != 200:
            body = await response.aread()
            await response.aclose()
            await client.aclose()
            logger.warning("ai_gateway_error", operation="chat", status_code=response.status_code, response_text=body[:500])
            raise error_for_status(response.status_code)

        async def relay() -> AsyncIterator[bytes]:
            try:
                async for chunk in response.aiter_raw():
                    yield chunk
            finally:
                await response.aclose()
                await client.aclose()

        return relay()

    async def collect_chat(self, messages: Iterable[dict]) -> str:
        """Consume the stream server side and return the assembled answer."""
        client = self._client()
        parts: list[str] = []
        async with client:
            try:
                async with client.stream(
                    "POST", self.settings.AI_GATEWAY_URL, json=self.chat_body(messages)
                ) as response:
                    if response.status_code != 200:
                        await response.aread()
                        logger.warning("ai_gateway_error", operation="chat", status_code=response.status_code)
                        raise error_for_status(response.status_code)
                    async for delta in aiter_sse_content(response.aiter_lines()):
                        parts.append(delta)
            except httpx.RequestError as exc:
                logger.error("ai_gateway_unreachable", operation="chat", error_type=type(exc).__name__)
                raise AIGatewayError(500, GENERIC_MESSAGE) from exc
        return "".join(parts)

    # -- quiz ---------------------------------------------------------------

    async def generate_quiz(self, level: str = "easy", language: str = "tr", topic: str | None = None) -> dict:
        difficulty = QUIZ_DIFFICULTY.get(level, QUIZ_DIFFICULTY["easy"])
        lang = QUIZ_LANGUAGES.get(language, QUIZ_LANGUAGES["tr"])
        topic_hint = f"Konu odağı: {topic}. " if topic else ""

        system_prompt = (
            f"Sen bir talaşlı imalat ve CNC uzmanısın. {lang} dilinde quiz soruları üretiyorsun.\n"
            f"{topic_hint}Zorluk: {difficulty}.\n"
            "Her soru için 4 şık üret, doğru cevabı ve kısa bir açıklama belirt.\n"
            "Sorular pratik ve endüstriyel uygulamalara dayalı olsun.\n"
            "Konular: kesme parametreleri, takım ömrü, CNC programlama, malzeme bilgisi, toleranslar, "
            "yüzey pürüzlülüğü, diş açma, delme, taşlama, G-code, M-code, takım tezgahları."
        )
        body = {
            "model": self.settings.AI_QUIZ_MODEL,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": f"{level} seviyesinde {QUIZ_QUESTION_COUNT} adet çoktan seçmeli soru üret."},
            ],
            "tools": [QUIZ_TOOL],
            "tool_choice": {"type": "function", "function": {"name": "generate_questions"}},
        }
        data = await self._post_json(body, "quiz")
        try:
            tool_call = data["choices"][0]["message"]["tool_calls"][0]
            return json.loads(tool_call["function"]["arguments"])
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            logger.warning("ai_quiz_unstructured", error_type=type(exc).__name__)
            raise AIGatewayError(500, "AI yapılandırılmış yanıt döndürmedi.") from exc

    # -- currency forecast --------------------------------------------------

    async def request_forecast(self, prompt: str) -> dict[str, list[float]] | None:
        """JSON object found in the answer text, or None when there is none."""
        data = await self._post_json(
            {
                "model": self.settings.AI_FORECAST_MODEL,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": 0.3,
            },
            "forecast",
        )
        try:
            content = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as exc:
            logger.warning("ai_forecast_unstructured", error_type=type(exc).__name__)
            raise AIGatewayError(500, GENERIC_MESSAGE) from exc
        if not isinstance(content, str):
            raise AIGatewayError(500, GENERIC_MESSAGE)
        match = _JSON_OBJECT_RE.search(content)
        if not match:
            return None
        try:
            parsed: Any = json.loads(match.group(0))
        except ValueError:
            return None
        return parsed if isinstance(parsed, dict) else None


def get_ai_gateway() -> AIGateway:
    return AIGateway()
