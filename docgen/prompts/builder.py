"""
Prompt Builder - Turns transcripts into a document generation prompt.

Pure and deterministic: the same inputs always produce the same string,
and no storage or network is touched.
"""

from typing import Dict, List, Optional, Sequence

from .templates import PROMPTS
from ..core.errors import ConfigurationError
from ..models.documents import DocumentType


TRANSCRIPT_SEPARATOR = "\n\n---\n\n"

CLOSING_INSTRUCTION = (
    "Génère maintenant la documentation demandée en français, "
    "de manière complète et professionnelle."
)


def _daily_rate_note(daily_rate: float) -> str:
    rate = f"{daily_rate:g}"
    return (
        f"\n\nNote: Le TJM (Taux Journalier Moyen) est de {rate}€/jour. "
        "Les calculs de prix seront faits côté code, tu dois uniquement "
        "estimer les jours et la complexité."
    )


def build_prompt(
    document_type: DocumentType | str,
    project_name: str,
    transcripts: Sequence[str],
    options: Optional[Dict[str, object]] = None,
    templates: Optional[Dict[DocumentType, str]] = None,
    separator: str = TRANSCRIPT_SEPARATOR,
) -> str:
    """
    Build the instruction string for one document type.

    Args:
        document_type: Type of document to generate
        project_name: Project name, interpolated after the template
        transcripts: Transcript texts, joined with a visible separator
        options: Optional settings; ``daily_rate`` adds an effort-only
            note for cost estimates
        templates: Template table override (defaults to PROMPTS)
        separator: Separator placed between transcripts

    Returns:
        Complete prompt text

    Raises:
        ConfigurationError: If the type has no template
    """
    doc_type = DocumentType.resolve(document_type)
    table = templates if templates is not None else PROMPTS

    if doc_type not in table:
        raise ConfigurationError(f"No prompt template for document type: {doc_type.value}")

    options = options or {}
    transcripts_text = separator.join(transcripts)

    rate_note = ""
    daily_rate = options.get("daily_rate")
    if doc_type is DocumentType.CHIFFRAGE and daily_rate:
        rate_note = _daily_rate_note(float(daily_rate))

    parts: List[str] = [
        table[doc_type],
        "",
        "---",
        "",
        f"## Projet: {project_name}",
        "",
        "## Transcription(s) de réunion:",
        "",
        transcripts_text,
        "",
        "---",
        f"{rate_note}",
        CLOSING_INSTRUCTION,
    ]
    return "\n".join(parts)
