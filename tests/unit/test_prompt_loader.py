"""Unit tests for the refinement prompt loader."""

from pathlib import Path

import pytest

from santra.services.prompt_loader import DEFAULT_PROMPTS_DIR, PromptLoader, PromptLoaderError


@pytest.fixture
def prompts_dir(tmp_path: Path) -> Path:
    """Create a temporary prompts directory with a test template."""
    prompts = tmp_path / "prompts"
    prompts.mkdir()
    (prompts / "refine_idea.md").write_text(
        "Raw: {{ raw_idea }}\n{% for idea in context_ideas %}* {{ idea.title }}\n{% endfor %}"
    )
    return prompts


def test_default_prompts_dir_ships_refine_template() -> None:
    assert (DEFAULT_PROMPTS_DIR / "refine_idea.md").is_file()


def test_renders_template_from_directory(prompts_dir: Path) -> None:
    loader = PromptLoader(prompts_dir=prompts_dir)

    result = loader.load("refine_idea.md", {"raw_idea": "bikes", "context_ideas": [{"title": "Maps"}]})

    assert result == "Raw: bikes\n* Maps\n"


def test_missing_directory_uses_inline_prompt(tmp_path: Path) -> None:
    loader = PromptLoader(prompts_dir=tmp_path / "nonexistent")

    result = loader.load("refine_idea.md", {"raw_idea": "solar kiosk", "context_ideas": []})

    assert loader.env is None
    assert "solar kiosk" in result
    assert "No existing ideas yet." in result


def test_unknown_template_raises(prompts_dir: Path) -> None:
    loader = PromptLoader(prompts_dir=prompts_dir)

    with pytest.raises(PromptLoaderError):
        loader.load("does_not_exist.md")


def test_broken_template_raises(prompts_dir: Path) -> None:
    (prompts_dir / "broken.md").write_text("{% for x in %}")
    loader = PromptLoader(prompts_dir=prompts_dir)

    with pytest.raises(PromptLoaderError):
        loader.load("broken.md")


def test_shipped_template_lists_context(tmp_path: Path) -> None:
    loader = PromptLoader()

    result = loader.load(
        "refine_idea.md",
        {
            "raw_idea": "cider",
            "context_ideas": [{"title": "Apple Orchard Plan", "tags": ["farming"], "excerpt": "Plant apples."}],
        },
    )

    assert "- Apple Orchard Plan [farming]: Plant apples." in result
    assert "No existing ideas yet." not in result
    assert result.rstrip().endswith("cider")
