from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sop_studio.config.llm_client import ChatClient, build_chat_client, parse_json_payload
from sop_studio.config.prompts import get_industry, get_language, get_tone
from sop_studio.config.settings import SOP_MAX_TOKENS, SOP_TEMPERATURE
from sop_studio.errors import GenerationError, LLMClientError
from sop_studio.utils.sop_content import SOPContent

logger = logging.getLogger(__name__)

GENERATION_FAILED = "Failed to generate SOP. Please try again."

SOP_JSON_SCHEMA = """{
  "purpose": "Clear statement of why this SOP exists and what it accomplishes",
  "scope": "Who this applies to and in what situations",
  "responsibilities": ["Role: What they are responsible for", "Another role: Their responsibility"],
  "procedures": [
    {
      "step": 1,
      "action": "Clear action verb starting the step (e.g., 'Open', 'Verify', 'Complete')",
      "details": "Detailed explanation of how to perform this step",
      "warning": "Optional: Any safety or important notes for this step"
    }
  ],
  "safetyNotes": ["Important safety consideration 1", "Important safety consideration 2"],
  "references": ["Related documents, policies, or resources"],
  "acceptanceCriteria": ["How to verify this procedure was completed correctly"]
}"""


def normalize_frameworks(regulatory_framework: Optional[Sequence[str] | str]) -> List[str]:
    if not regulatory_framework:
        return []
    if isinstance(regulatory_framework, str):
        items = regulatory_framework.split(",")
    else:
        items = list(regulatory_framework)
    return [str(item).strip() for item in items if item and str(item).strip()]


def build_sop_system_prompt(
    *,
    industry: str = "general",
    tone: str = "formal",
    language: str = "en",
    regulatory_framework: Optional[Sequence[str] | str] = None,
) -> str:
    industry_template = get_industry(industry)
    tone_template = get_tone(tone)
    language_config = get_language(language)

    frameworks = normalize_frameworks(regulatory_framework)
    framework_context = ""
    if frameworks:
        framework_context = (
            "\nRegulatory Compliance: This SOP must comply with the following frameworks: "
            + ", ".join(frameworks)
        )

    lines: List[str] = [
        "You are an expert in creating Standard Operating Procedures (SOPs) following ISO 9001 "
        "standards and industry best practices.",
        "",
        f"INDUSTRY CONTEXT: {industry_template.name}",
        industry_template.context,
        "",
        f"REGULATORY FRAMEWORKS: {', '.join(industry_template.frameworks)}{framework_context}",
        "",
        "INDUSTRY-SPECIFIC GUIDELINES:",
        industry_template.specific_guidelines,
        "",
        "TONE AND STYLE:",
        tone_template.instructions,
        "",
        "LANGUAGE:",
        language_config.instructions,
        "",
        "Your task is to generate a comprehensive, professional SOP based on the title and description provided.",
        "",
        "Return ONLY a valid JSON object with the following structure:",
        SOP_JSON_SCHEMA,
        "",
        "Guidelines:",
        "- Follow the tone and style guidelines above",
        "- Start each procedure step with an action verb",
        f"- Be specific and detailed for the {industry_template.name} industry",
        "- Include 5-10 procedure steps typically",
        "- Include warnings for critical steps",
        "- Make it practical and actionable",
        "- Include industry-specific safety and compliance requirements",
        "- Reference relevant standards and regulations",
    ]
    return "\n".join(lines)


def build_sop_user_prompt(
    title: str,
    description: str,
    *,
    industry: str = "general",
    language: str = "en",
) -> str:
    industry_template = get_industry(industry)
    language_config = get_language(language)

    closing = "Generate a complete, detailed SOP following the JSON structure provided."
    if language_config.code != "en":
        closing += f" Generate all content in {language_config.native_name}."

    return "\n".join(
        [
            f"Create a professional SOP for the {industry_template.name} industry:",
            "",
            f"Title: {title}",
            f"Description: {description}",
            "",
            closing,
        ]
    )


def generate_sop(
    title: str,
    description: str,
    *,
    industry: str = "general",
    tone: str = "formal",
    language: str = "en",
    regulatory_framework: Optional[Sequence[str] | str] = None,
    client: Optional[ChatClient] = None,
) -> SOPContent:
    """Ask the model for a complete SOP and return the parsed document tree.

    ``client`` defaults to a client built from the environment; anything with a
    compatible ``complete(messages, temperature=..., max_tokens=...)`` method works.
    """
    title = (title or "").strip()
    description = (description or "").strip()
    if not title or not description:
        raise ValueError("Title and description are required")

    messages = [
        {
            "role": "system",
            "content": build_sop_system_prompt(
                industry=industry,
                tone=tone,
                language=language,
                regulatory_framework=regulatory_framework,
            ),
        },
        {
            "role": "user",
            "content": build_sop_user_prompt(title, description, industry=industry, language=language),
        },
    ]

    llm = client or build_chat_client()
    logger.info("Generating SOP %r (industry=%s, tone=%s, language=%s)", title, industry, tone, language)
    try:
        raw_output = llm.complete(messages, temperature=SOP_TEMPERATURE, max_tokens=SOP_MAX_TOKENS)
    except LLMClientError as exc:
        logger.error("Error generating SOP: %s", exc)
        raise GenerationError(GENERATION_FAILED) from exc

    if not raw_output or not raw_output.strip():
        logger.error("Error generating SOP: empty response from model")
        raise GenerationError(GENERATION_FAILED)

    parsed = parse_json_payload(raw_output)
    if not isinstance(parsed, dict):
        logger.error("Error generating SOP: response is not a JSON object: %.200s", raw_output)
        raise GenerationError(GENERATION_FAILED)

    content = SOPContent.from_dict(parsed)
    logger.info("Generated SOP %r with %d procedure steps", title, len(content.procedures))
    return content


__all__ = [
    "GENERATION_FAILED",
    "normalize_frameworks",
    "build_sop_system_prompt",
    "build_sop_user_prompt",
    "generate_sop",
]
