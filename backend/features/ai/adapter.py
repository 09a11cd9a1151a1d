"""
backend/features/ai/adapter.py

Generative-call adapter over the google-genai SDK.

One PromptSpec -> one generate_content call. Media parts go out as inline
blobs with their MIME type (the SDK base64-encodes them on the wire). When
the PromptSpec carries a response schema the reply gets exactly one JSON parse
attempt; what happens on failure is decided by the ParseFailurePolicy of the
spec, optionally overridden per template name at construction time.

No retries, no timeouts: any SDK or transport error is wrapped in a
DownstreamError and is terminal for that request.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import UploadFile
from google import genai
from google.genai import types

from backend.core.config import GenerationConfig
from backend.core.errors import DownstreamError, GenerationError, ResponseShapeError
from backend.core.logging import log_event
from backend.features.ai.prompts import ParseFailurePolicy, Part, PromptSpec
from backend.models.generation import MediaInput

logger = logging.getLogger("codeprompt.ai")


@dataclass(frozen=True)
class GenerationOutput:
    text: str
    # Parsed JSON for structured replies; None for free text or a degraded parse
    data: Any = None
    degraded: bool = False


class GenerativeAdapter:
    def __init__(
        self,
        config: GenerationConfig,
        client: Optional[Any] = None,
        parse_policies: Optional[Dict[str, ParseFailurePolicy]] = None,
    ):
        self.config = config
        self._client = client
        self.parse_policies = dict(parse_policies or {})

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self.config.api_key)

    @property
    def client(self):
        if self._client is None:
            if not self.config.api_key:
                raise GenerationError(
                    "O serviço de geração não está configurado.",
                    code="generation_unconfigured",
                    status_code=503,
                )
            self._client = genai.Client(api_key=self.config.api_key)
        return self._client

    def policy_for(self, spec: PromptSpec) -> ParseFailurePolicy:
        return self.parse_policies.get(spec.name, spec.parse_policy)

    @staticmethod
    def _to_part(part: Part) -> types.Part:
        if isinstance(part, MediaInput):
            return types.Part(inline_data=types.Blob(data=part.data, mime_type=part.mime_type))
        return types.Part(text=part)

    @staticmethod
    def _build_config(spec: PromptSpec) -> types.GenerateContentConfig:
        config_kwargs: Dict[str, Any] = {}
        if spec.system_instruction:
            config_kwargs["system_instruction"] = spec.system_instruction
        if spec.temperature is not None:
            config_kwargs["temperature"] = spec.temperature
        if spec.response_schema is not None:
            config_kwargs["response_mime_type"] = "application/json"
            config_kwargs["response_schema"] = spec.response_schema
        return types.GenerateContentConfig(**config_kwargs)

    async def generate(self, spec: PromptSpec, *, failure_message: str) -> GenerationOutput:
        """Issue the call for `spec` and shape the reply.

        Raises:
            DownstreamError: the SDK or transport failed
            ResponseShapeError: structured reply unparseable under the FAIL policy
        """
        contents = [types.Content(role="user", parts=[self._to_part(p) for p in spec.parts])]
        try:
            response = await self.client.aio.models.generate_content(
                model=self.config.model,
                contents=contents,
                config=self._build_config(spec),
            )
        except GenerationError:
            raise
        except Exception as exc:
            log_event(
                "error",
                "generation.downstream_failed",
                feature=spec.name,
                event_type="generation.downstream_failed",
                error_code=DownstreamError.code,
                extra={"error": exc},
            )
            raise DownstreamError(f"{failure_message}: {exc}") from exc

        text = getattr(response, "text", None) or ""
        if not spec.structured:
            return GenerationOutput(text=text)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            if self.policy_for(spec) == ParseFailurePolicy.RAW_TEXT:
                logger.warning(
                    "[ai] structured reply not valid JSON; returning raw text",
                    extra={"feature": spec.name, "event_type": "generation.parse_degraded"},
                )
                return GenerationOutput(text=text, degraded=True)
            log_event(
                "warning",
                "generation.parse_failed",
                feature=spec.name,
                event_type="generation.parse_failed",
                error_code=ResponseShapeError.code,
            )
            raise ResponseShapeError(failure_message) from exc

        return GenerationOutput(text=json.dumps(data, indent=2, ensure_ascii=False), data=data)


async def media_from_upload(upload: Optional[UploadFile]) -> Optional[MediaInput]:
    """Read an uploaded file fully into a MediaInput; None passes through."""
    if upload is None:
        return None
    data = await upload.read()
    if not data:
        return None
    return MediaInput(
        data=data,
        mime_type=upload.content_type or "application/octet-stream",
        filename=upload.filename,
    )
