from typing import Dict, Any

import ollama

from adviser.infrastructure.llm.backends.base import LLMBackend
from adviser.infrastructure.llm.types import LLMMetadata


class OllamaBackend(LLMBackend):
    """
    Backend for Ollama.

    Characteristics:
    - chat-based, with a real system role
    - structured output via `format=<json schema>`
    - external daemon (stateless from our side)
    """

    def __init__(self, profile: Dict[str, Any], client: Any = None):
        self.profile = profile

        # --- metadata fields ---
        self.profile_name: str = profile.get("profile_name", "unknown")

        self.model_name: str = profile.get("name")
        if not self.model_name:
            raise ValueError("Ollama backend requires 'name' in model profile")

        params = profile.get("params", {})
        self.context_size = params.get("context_size")  # may be None

        # --- client ---
        self.client = client or ollama.Client(host=profile.get("host"))

        # --- default generation params ---
        self.default_generation_params: Dict[str, Any] = {
            "temperature": params.get("temperature", 0.1),
            "top_p": params.get("top_p", 0.9),
            "repeat_penalty": params.get("repeat_penalty", 1.1),
            "num_predict": params.get("num_predict", 4096),
        }
        if self.context_size:
            self.default_generation_params["num_ctx"] = self.context_size

    def generate(
        self,
        system_prompt: str,
        prompt: str,
        schema: Dict[str, Any],
        params: Dict[str, Any] | None = None,
    ) -> str:
        if params is None:
            params = {}

        generation_params = {
            **self.default_generation_params,
            **{k: v for k, v in params.items() if k in self.default_generation_params},
        }

        response = self.client.chat(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            format=schema,
            options=generation_params,
            stream=False,
        )

        return (response["message"]["content"] or "").strip()

    @property
    def meta(self) -> LLMMetadata:
        return {
            "backend": "ollama",
            "model": self.model_name,
            "profile": self.profile_name,
            "context_size": self.context_size,
            "supports_structured_output": True,
        }
