"""OpenAI Responses API client for label transcription."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nutrition_ledger.services.labels import OcrClient

_PROMPT = (
    "Transcribe all text printed on this nutrition facts label exactly as it "
    "appears, one line per row, keeping numbers and units. "
    "Do not add, correct or summarize anything. Language hint: {language}."
)


@dataclass
class OpenAIOcrClient(OcrClient):
    """OCR client backed by an OpenAI vision model."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(
        cls,
        api_key: str,
        model: str,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> "OpenAIOcrClient":
        """Create an OpenAI OCR client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def recognize(self, *, image_data_url: str, language: str) -> str:
        """Call the Responses API and return the transcribed text."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "input_text",
                            "text": _PROMPT.format(language=language),
                        },
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
