# tests/test_ai_gateway.py
import asyncio
import json

import httpx
import pytest

from toolroom.core.config import Settings
from toolroom.services.ai_gateway import (
    CREDITS_MESSAGE,
    GENERIC_MESSAGE,
    MISSING_KEY_MESSAGE,
    RATE_LIMIT_MESSAGE,
    SSE_DONE,
    AIGateway,
    AIGatewayError,
    get_ai_gateway,
    iter_sse_content,
    parse_sse_line,
    transform_messages,
)


def sse_chunk(text: str) -> str:
    return "data: " + json.dumps({"choices": [{"delta": {"content": text}}]})


SSE_BODY = "\n".join(
    [
        ": keep-alive",
        sse_chunk("Kesme "),
        "",
        "data: {broken json",
        sse_chunk("hızı"),
        "data: [DONE]",
        sse_chunk(" sonrası"),
    ]
)


def make_gateway(handler) -> AIGateway:
    settings = Settings(SECRET_KEY="test", AI_GATEWAY_API_KEY="test-key")
    return AIGateway(settings=settings, transport=httpx.MockTransport(handler))


class TestSSEParsing:
    def test_content_line(self):
        assert parse_sse_line(sse_chunk("merhaba")) == "merhaba"

    def test_done_marker(self):
        assert parse_sse_line("data: [DONE]") == SSE_DONE

    @pytest.mark.parametrize("line", ["", ": comment", "event: ping", "data: {not json", 'data: {"choices": []}'])
    def test_skipped_lines(self, line):
        assert parse_sse_line(line) is None

    def test_stops_at_done(self):
        assert "".join(iter_sse_content(SSE_BODY.split("\n"))) == "Kesme hızı"


class TestMessages:
    def test_image_url_becomes_multimodal(self):
        out = transform_messages([{"role": "user", "content": "Bu parça nedir?", "imageUrl": "data:image/png;base64,AAA"}])
        assert out[0]["content"][0] == {"type": "text", "text": "Bu parça nedir?"}
        assert out[0]["content"][1]["image_url"]["url"] == "data:image/png;base64,AAA"

    def test_plain_messages_unchanged(self):
        out = transform_messages([{"role": "assistant", "content": "Merhaba"}])
        assert out == [{"role": "assistant", "content": "Merhaba"}]


class TestChat:
    def test_collect_chat_assembles_stream(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.content)
            captured["auth"] = request.headers["Authorization"]
            return httpx.Response(200, text=SSE_BODY, headers={"content-type": "text/event-stream"})

        gateway = make_gateway(handler)
        content = asyncio.run(gateway.collect_chat([{"role": "user", "content": "Vc nedir?"}]))

        assert content == "Kesme hızı"
        assert captured["auth"] == "Bearer test-key"
        assert captured["body"]["stream"] is True
        assert captured["body"]["messages"][0]["role"] == "system"

    @pytest.mark.parametrize(
        "status,expected_status,message",
        [(429, 429, RATE_LIMIT_MESSAGE), (402, 402, CREDITS_MESSAGE), (503, 500, GENERIC_MESSAGE)],
    )
    def test_gateway_errors_are_mapped(self, status, expected_status, message):
        gateway = make_gateway(lambda request: httpx.Response(status, text="upstream error"))

        with pytest.raises(AIGatewayError) as exc_info:
            asyncio.run(gateway.open_chat_stream([{"role": "user", "content": "selam"}]))

        assert exc_info.value.status_code == expected_status
        assert exc_info.value.message == message

    def test_missing_key(self):
        gateway = AIGateway(settings=Settings(SECRET_KEY="test", AI_GATEWAY_API_KEY=None))
        assert gateway.configured is False
        with pytest.raises(AIGatewayError) as exc_info:
            asyncio.run(gateway.collect_chat([]))
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == MISSING_KEY_MESSAGE


class TestQuiz:
    def test_tool_call_arguments_are_returned(self):
        questions = {
            "questions": [
                {"question": "Taylor denkleminde n neyi ifade eder?", "options": ["a", "b", "c", "d"], "correct_index": 1, "explanation": "..."}
            ]
        }

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            assert body["tool_choice"]["function"]["name"] == "generate_questions"
            return httpx.Response(
                200,
                json={"choices": [{"message": {"tool_calls": [{"function": {"arguments": json.dumps(questions)}}]}}]},
            )

        result = asyncio.run(make_gateway(handler).generate_quiz("medium", "tr", "Takım ömrü"))
        assert result == questions

    def test_missing_tool_call_is_an_error(self):
        gateway = make_gateway(lambda request: httpx.Response(200, json={"choices": [{"message": {"content": "metin"}}]}))
        with pytest.raises(AIGatewayError):
            asyncio.run(gateway.generate_quiz())

    def test_non_json_body_is_a_gateway_error(self):
        gateway = make_gateway(lambda request: httpx.Response(200, text="<html>proxy error</html>"))

        with pytest.raises(AIGatewayError) as exc_info:
            asyncio.run(gateway.generate_quiz())

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == GENERIC_MESSAGE


class TestForecastRequest:
    def test_json_object_is_extracted_from_text(self):
        answer = {"usd": [1.0], "eur": [2.0], "gold": [3.0]}
        gateway = make_gateway(
            lambda request: httpx.Response(
                200, json={"choices": [{"message": {"content": "Tahmin:\n" + json.dumps(answer)}}]}
            )
        )
        assert asyncio.run(gateway.request_forecast("...")) == answer

    def test_text_without_json_gives_none(self):
        gateway = make_gateway(lambda request: httpx.Response(200, json={"choices": [{"message": {"content": "yok"}}]}))
        assert asyncio.run(gateway.request_forecast("...")) is None

    @pytest.mark.parametrize("body", [{"choices": ["metin"]}, {"choices": []}, {"data": 1}])
    def test_unexpected_shape_is_a_gateway_error(self, body):
        gateway = make_gateway(lambda request: httpx.Response(200, json=body))
        with pytest.raises(AIGatewayError):
            asyncio.run(gateway.request_forecast("..."))


class TestFunctionRoutes:
    def test_chat_streams_event_stream(self, app, client):
        app.dependency_overrides[get_ai_gateway] = lambda: make_gateway(
            lambda request: httpx.Response(200, text=SSE_BODY, headers={"content-type": "text/event-stream"})
        )

        response = client.post("/functions/v1/cnc-ai-chat", json={"messages": [{"role": "user", "content": "selam"}]})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert "data: [DONE]" in response.text

    def test_chat_without_stream_returns_content(self, app, client):
        app.dependency_overrides[get_ai_gateway] = lambda: make_gateway(
            lambda request: httpx.Response(200, text=SSE_BODY)
        )

        response = client.post(
            "/functions/v1/cnc-ai-chat?stream=false",
            json={"messages": [{"role": "user", "content": "selam"}]},
        )

        assert response.status_code == 200
        assert response.json() == {"content": "Kesme hızı"}

    def test_chat_rate_limit_passes_through(self, app, client):
        app.dependency_overrides[get_ai_gateway] = lambda: make_gateway(lambda request: httpx.Response(429))

        response = client.post("/functions/v1/cnc-ai-chat", json={"messages": []})

        assert response.status_code == 429
        assert response.json() == {"error": RATE_LIMIT_MESSAGE}

    def test_chat_without_key_is_500(self, app, client):
        app.dependency_overrides[get_ai_gateway] = lambda: AIGateway(settings=Settings(SECRET_KEY="test"))

        response = client.post("/functions/v1/cnc-ai-chat", json={"messages": []})

        assert response.status_code == 500
        assert response.json() == {"error": MISSING_KEY_MESSAGE}

    def test_quiz_credit_error(self, app, client):
        app.dependency_overrides[get_ai_gateway] = lambda: make_gateway(lambda request: httpx.Response(402))

        response = client.post("/functions/v1/generate-quiz", json={"level": "easy", "language": "tr"})

        assert response.status_code == 402
        assert response.json() == {"error": CREDITS_MESSAGE}

    def test_forecast_route_survives_html_answer(self, app, client):
        app.dependency_overrides[get_ai_gateway] = lambda: make_gateway(
            lambda request: httpx.Response(200, text="<html>proxy error</html>")
        )

        response = client.post("/functions/v1/update-currency-forecasts")

        assert response.status_code == 200
        assert response.json()["source"] == "linear_extrapolation"
        assert response.json()["updated"] == 36
