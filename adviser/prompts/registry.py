from pathlib import Path
from typing import List
import yaml

from adviser.contracts.analysis_result import Severity


class PromptNotFound(Exception):
    pass


PROMPTS_DIR = Path(__file__).resolve().parent


class PromptRegistry:
    """
    Loads and renders versioned prompts.
    """

    def __init__(self, base_dir: Path = PROMPTS_DIR):
        self.base_dir = Path(base_dir)

    def load(self, relative_path: str) -> dict:
        """
        Example: personas/design-review.yaml
        """
        path = self.base_dir / relative_path

        if not path.exists():
            raise PromptNotFound(f"Prompt not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)

    def render(self, relative_path: str, **variables) -> str:
        prompt = self.load(relative_path)

        template = prompt.get("template")
        if not template:
            raise ValueError("Prompt template missing")

        for key, value in variables.items():
            template = template.replace(f"{{{{ {key} }}}}", value)

        return template

    def personas(self) -> List[str]:
        return sorted(p.stem for p in (self.base_dir / "personas").glob("*.yaml"))

    def persona_prompt(self, name: str) -> str:
        if name not in self.personas():
            raise PromptNotFound(f"Unknown persona: {name}")
        return self.render(
            f"personas/{name}.yaml",
            severities=", ".join(s.value for s in Severity),
        )
