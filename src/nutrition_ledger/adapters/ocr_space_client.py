"""OCR.space API client."""

from dataclasses import dataclass

import httpx

from nutrition_ledger.services.labels import OcrClient


@dataclass
class HttpxOcrSpaceClient(OcrClient):
    """OCR client using the OCR.space parse endpoint."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxOcrSpaceClient":
        """Create an OCR.space client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def recognize(self, *, image_data_url: str, language: str) -> str:
        """Upload the image and return the parsed text."""
        response = await self.http_client.post(
            self.base_url,
            headers={"apikey": self.api_key},
            data={
                "base64Image": image_data_url,
                "language": language,
                "scale": "true",
                "OCREngine": "2",
            },
            timeout=30,
        )
        response.raise_for_status()
        payload = response.json()
        if payload.get("IsErroredOnProcessing"):
            message = payload.get("ErrorMessage") or "unknown error"
            raise RuntimeError(f"OCR.space failed: {message}")
        results = payload.get("ParsedResults") or []
        return "\n".join(str(result.get("ParsedText") or "") for result in results)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
