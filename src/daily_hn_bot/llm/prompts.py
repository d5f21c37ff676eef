import yaml
from pathlib import Path
from ..config import get_settings

settings = get_settings()

def load_prompt(name: str) -> str:
    prompts_dir = Path(settings.PROMPTS_DIR)

    # Prioritize .yaml for structured prompts
    yaml_path = prompts_dir / f"{name}.yaml"
    if yaml_path.exists():
        with open(yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
            return data.get("content", "")

    # Fallback to .md
    md_path = prompts_dir / f"{name}.md"
    if md_path.exists():
        with open(md_path, "r", encoding="utf-8") as f:
            return f.read()

    raise FileNotFoundError(f"Prompt {name} not found as .yaml or .md in {prompts_dir}")
