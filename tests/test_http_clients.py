"""Tests for HTTP-based adapters."""

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from nutrition_ledger.adapters.ocr_space_client import HttpxOcrSpaceClient
from nutrition_ledger.adapters.openai_ocr_client import OpenAIOcrClient

DATA_URL = "data:image/jpeg;base64,ZmFrZQ=="


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str = "Calories 120") -> None:
        self.responses = _FakeResponses(output_text)


def test_openai_ocr_client_returns_text() -> None:
    fake = _FakeOpenAI()
    client = OpenAIOcrClient(client=fake, model="gpt-5.2", reasoning_effort="low")

    text = asyncio.run(client.recognize(image_data_url=DATA_URL, language="eng"))

    assert text == "Calories 120"
    payload = fake.responses.last_payload
    assert payload is not None
    assert payload["model"] == "gpt-5.2"
    assert payload["reasoning"] == {"effort": "low"}
    content = payload["input"][0]["content"]
    assert content[1] == {"type": "input_image", "image_url": DATA_URL}


def test_openai_ocr_client_rejects_empty_output() -> None:
    client = OpenAIOcrClient(client=_FakeOpenAI(output_text=""), model="gpt-5.2")

    with pytest.raises(RuntimeError):
        asyncio.run(client.recognize(image_data_url=DATA_URL, language="eng"))


def test_ocr_space_client_joins_parsed_results() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["apikey"] == "key"
        form = parse_qs(request.content.decode())
        assert form["base64Image"] == [DATA_URL]
        assert form["language"] == ["eng"]
        return httpx.Response(
            200,
            json={
                "IsErroredOnProcessing": False,
                "ParsedResults": [
                    {"ParsedText": "Calories 90"},
                    {"ParsedText": "Protein 3g"},
                ],
            },
        )

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxOcrSpaceClient(
        api_key="key",
        base_url="https://ocr.example/parse/image",
        http_client=async_client,
    )

    text = asyncio.run(client.recognize(image_data_url=DATA_URL, language="eng"))

    assert text == "Calories 90\nProtein 3g"


def test_ocr_space_client_raises_on_processing_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"IsErroredOnProcessing": True, "ErrorMessage": ["Bad image"]},
        )

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxOcrSpaceClient(
        api_key="key",
        base_url="https://ocr.example/parse/image",
        http_client=async_client,
    )

    with pytest.raises(RuntimeError):
        asyncio.run(client.recognize(image_data_url=DATA_URL, language="eng"))


def test_ocr_space_client_raises_on_http_error() -> None:
    async_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda _request: httpx.Response(500))
    )
    client = HttpxOcrSpaceClient(
        api_key="key",
        base_url="https://ocr.example/parse/image",
        http_client=async_client,
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.recognize(image_data_url=DATA_URL, language="eng"))
