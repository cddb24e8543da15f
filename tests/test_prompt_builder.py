"""Tests for prompt assembly."""

from readme_generator.domain.entities import DocumentStyle, FetchedFile, RepositorySnapshot
from readme_generator.services.prompt_builder import STYLE_INSTRUCTIONS, build_prompt

SNAPSHOT = RepositorySnapshot(
    owner="octo",
    repo="demo",
    description="A demo project",
    files=(
        FetchedFile(path="README.md", content="# Demo"),
        FetchedFile(path="src/app.py", content="print('hi')"),
    ),
)


def test_names_repository_and_description():
    prompt = build_prompt(SNAPSHOT)

    assert "GitHub repository: octo/demo." in prompt
    assert "Description: A demo project" in prompt


def test_files_are_fenced_in_order():
    prompt = build_prompt(SNAPSHOT)

    readme = prompt.index("File: README.md\n```\n# Demo\n```")
    app = prompt.index("File: src/app.py\n```\nprint('hi')\n```")
    assert readme < app


def test_style_instruction():
    prompt = build_prompt(SNAPSHOT, DocumentStyle.DEEP)

    assert "Generate a deep README.md" in prompt
    assert STYLE_INSTRUCTIONS[DocumentStyle.DEEP] in prompt


def test_project_details_only_when_given():
    assert "Additional project details" not in build_prompt(SNAPSHOT)

    prompt = build_prompt(SNAPSHOT, project_details="Used in production at ACME.")
    assert "Additional project details provided by the user:\nUsed in production at ACME." in prompt


def test_every_style_has_an_instruction():
    assert set(STYLE_INSTRUCTIONS) == set(DocumentStyle)
