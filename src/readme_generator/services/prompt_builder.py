"""Prompt assembly — turns a repository snapshot into the user prompt text."""

from __future__ import annotations

from readme_generator.domain.entities import DocumentStyle, RepositorySnapshot

STYLE_INSTRUCTIONS: dict[DocumentStyle, str] = {
    DocumentStyle.LIGHT: "Keep it brief and concise. Focus on what it does and how to run it.",
    DocumentStyle.SIMPLE: "Simple language, easy to understand. Good for beginners.",
    DocumentStyle.NORMAL: "Standard professional README. Installation, Usage, Features.",
    DocumentStyle.MEDIUM: (
        "Detailed. Include configuration, API reference if applicable, and contributing."
    ),
    DocumentStyle.DEEP: (
        "Extremely comprehensive. Deep dive into architecture, design choices, "
        "full API docs, testing, and deployment."
    ),
}


def render_file_context(snapshot: RepositorySnapshot) -> str:
    """Render every fetched file as a fenced block headed by its path."""
    return "\n\n".join(
        f"File: {f.path}\n```\n{f.content}\n```" for f in snapshot.files
    )


def build_prompt(
    snapshot: RepositorySnapshot,
    style: DocumentStyle = DocumentStyle.NORMAL,
    project_details: str = "",
) -> str:
    """Build the user prompt for a README in the requested *style*.

    *project_details* must already be sanitised; it is inserted verbatim.
    """
    sections = [
        f"Generate a {style.value} README.md for the following GitHub repository: "
        f"{snapshot.full_name}.",
        f"Description: {snapshot.description}",
    ]
    if project_details:
        sections.append(f"Additional project details provided by the user:\n{project_details}")

    sections.append(f"Here are the contents of some key files:\n{render_file_context(snapshot)}")
    sections.append(
        "Requirements:\n"
        f'- Use the "{style.value}" style: {STYLE_INSTRUCTIONS[style]}\n'
        "- Use proper Markdown formatting.\n"
        "- Include badges if possible.\n"
        "- Make it look professional and polished.\n"
        "- Use the file contents only for context; do not repeat them verbatim in the output."
    )
    return "\n\n".join(sections)
