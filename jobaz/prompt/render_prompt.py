"""Render prompt templates in jobaz/prompt/promptFiles using pystache.

Templates may pull in partials (``{{> name}}``); each partial lives in
``promptFiles/<name>.md`` and may be wrapped in a Markdown code fence, which
is stripped before rendering.

User-supplied document text must be inserted with triple mustaches
(``{{{text}}}``) so pystache does not HTML-escape it.

Usage:
    python -m jobaz.prompt.render_prompt [template_filename] [context.json]
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pystache

PROMPTS_DIR = Path(__file__).parent / "promptFiles"

# Partials required by each template.
TEMPLATE_PARTIALS: dict[str, list[str]] = {
    "proofreader_system.md": [
        "proofreader_role",
        "issue_categories",
        "proofreader_output_format",
    ],
    "proofreader_user.md": [],
}


def _read_prompt(name: str) -> str:
    p = PROMPTS_DIR / name
    if not p.exists():
        raise FileNotFoundError(f"Prompt file not found: {p}")
    return p.read_text(encoding="utf-8")


def _strip_code_fences(s: str) -> str:
    """Strip a single leading and trailing code-fence line if present."""
    lines = s.splitlines()
    if not lines:
        return s
    if lines[0].lstrip().startswith("```"):
        lines = lines[1:]
    if lines and lines[-1].lstrip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _load_partials(template_names: list[str]) -> dict[str, str]:
    names: set[str] = set()
    for template_name in template_names:
        names.update(TEMPLATE_PARTIALS.get(template_name, []))
    return {name: _strip_code_fences(_read_prompt(f"{name}.md")) for name in names}


def render_template(template_name: str, context: dict | None = None) -> str:
    renderer = pystache.Renderer(partials=_load_partials([template_name]))
    return renderer.render(_read_prompt(template_name), context or {}).strip()


def render_prompts(
    system_template: str = "proofreader_system.md",
    user_template: str = "proofreader_user.md",
    context: dict | None = None,
) -> tuple[str, str]:
    """Render a system and user prompt pair from two templates.

    Returns:
        (system_prompt, user_prompt)
    """
    renderer = pystache.Renderer(partials=_load_partials([system_template, user_template]))
    rendered_system = renderer.render(_read_prompt(system_template), context or {})
    rendered_user = renderer.render(_read_prompt(user_template), context or {})
    return rendered_system.strip(), rendered_user.strip()


def _load_context(path: str) -> dict:
    return json.loads(Path(path).read_text(encoding="utf-8"))


if __name__ == "__main__":
    tpl = sys.argv[1] if len(sys.argv) > 1 else "proofreader_system.md"
    ctx = _load_context(sys.argv[2]) if len(sys.argv) > 2 else None
    print(render_template(tpl, ctx))
