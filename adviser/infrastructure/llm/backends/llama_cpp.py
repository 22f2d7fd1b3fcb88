from typing import Dict, Any

from adviser.infrastructure.llm.backends.base import LLMBackend
from adviser.infrastructure.llm.types import LLMMetadata


class LlamaCppBackend(LLMBackend):
    """
    Backend for llama.cpp (optional `llama` extra).

    Characteristics:
    - local model, loaded into process
    - chat completion with a JSON-schema constrained response format
    """

    def __init__(self, profile: Dict[str, Any], llm: Any = None):
        self.profile = profile

        # --- metadata fields ---
        self.profile_name: str = profile.get("profile_name", "unknown")

        params = profile.get("params", {})
        self.context_size: int = params.get("n_ctx", 8192)

        # model identification
        self.model_path: str = profile.get("path")
        if not self.model_path:
            raise ValueError("llama_cpp backend requires 'path' in model profile")

        self.model_name: str = profile.get("model_id", self.model_path)

        # --- model init ---
        if llm is None:
            from llama_cpp import Llama

            llm = Llama(
                model_path=self.model_path,
                n_ctx=self.context_size,
                n_gpu_layers=params.get("n_gpu_layers", 0),
                n_batch=params.get("n_batch", 512),
                verbose=params.get("verbose", False),
            )
        self.llm = llm

        # --- default generation params ---
        self.default_generation_params: Dict[str, Any] = {
            "temperature": params.get("temperature", 0.1),
            "top_p": params.get("top_p", 0.9),
            "repeat_penalty": params.get("repeat_penalty", 1.1),
            "max_tokens": params.get("max_tokens", 4096),
        }

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

        result = self.llm.create_chat_completion(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object", "schema": schema},
            temperature=generation_params["temperature"],
            top_p=generation_params["top_p"],
            repeat_penalty=generation_params["repeat_penalty"],
            max_tokens=generation_params["max_tokens"],
        )

        return (result["choices"][0]["message"]["content"] or "").strip()

    @property
    def meta(self) -> LLMMetadata:
        return {
            "backend": "llama_cpp",
            "model": self.model_name,
            "profile": self.profile_name,
            "context_size": self.context_size,
            "supports_structured_output": True,
        }
