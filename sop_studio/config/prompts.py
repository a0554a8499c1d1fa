"""Static prompt fragments: industries, writing tones and output languages."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class IndustryTemplate:
    name: str
    context: str
    examples: str
    frameworks: List[str]
    specific_guidelines: str


@dataclass(frozen=True)
class ToneTemplate:
    name: str
    description: str
    instructions: str


@dataclass(frozen=True)
class LanguageConfig:
    code: str
    name: str
    native_name: str
    instructions: str
    flag: str


def _block(text: str) -> str:
    return textwrap.dedent(text).strip()


INDUSTRY_TEMPLATES: Dict[str, IndustryTemplate] = {
    "general": IndustryTemplate(
        name="General",
        context="General business operations",
        examples="standard procedures, process documentation, workflow guidelines",
        frameworks=["ISO 9001"],
        specific_guidelines="Follow standard business process documentation practices.",
    ),
    "healthcare": IndustryTemplate(
        name="Healthcare",
        context="Medical facility, patient safety, HIPAA compliance, clinical procedures",
        examples="medication administration, patient intake, sterilization procedures, infection control",
        frameworks=["ISO 13485", "FDA 21 CFR Part 11", "HIPAA", "Joint Commission"],
        specific_guidelines=_block(
            """
            - Emphasize patient safety and infection control
            - Include detailed safety precautions and contraindications
            - Reference medical standards and regulatory requirements
            - Include documentation requirements for patient records
            - Specify required certifications or training for personnel
            - Include emergency response procedures where applicable
            """
        ),
    ),
    "manufacturing": IndustryTemplate(
        name="Manufacturing",
        context="Production facility, quality control, GMP compliance, assembly operations",
        examples="assembly procedures, quality checks, equipment calibration, batch processing",
        frameworks=["ISO 9001", "GMP", "ISO 13485", "Six Sigma"],
        specific_guidelines=_block(
            """
            - Include quality control checkpoints and acceptance criteria
            - Specify required tools, equipment, and materials
            - Include calibration requirements and frequencies
            - Detail inspection procedures and tolerances
            - Reference work instructions and technical drawings
            - Include rework and non-conformance procedures
            """
        ),
    ),
    "it": IndustryTemplate(
        name="Information Technology",
        context="IT department, cybersecurity, data management, system administration",
        examples="server maintenance, backup procedures, incident response, software deployment",
        frameworks=["ISO 27001", "SOC 2", "NIST Cybersecurity Framework", "ITIL"],
        specific_guidelines=_block(
            """
            - Include security considerations and access controls
            - Specify required permissions and authentication methods
            - Detail rollback procedures for changes
            - Include monitoring and alerting requirements
            - Reference security policies and compliance requirements
            - Document system dependencies and prerequisites
            """
        ),
    ),
    "finance": IndustryTemplate(
        name="Financial Services",
        context="Financial institution, compliance, audit requirements, risk management",
        examples="transaction processing, KYC procedures, risk assessment, fraud detection",
        frameworks=["SOX", "PCI DSS", "FINRA", "Basel III", "GDPR"],
        specific_guidelines=_block(
            """
            - Emphasize internal controls and segregation of duties
            - Include audit trail and documentation requirements
            - Detail approval workflows and authorization levels
            - Reference regulatory compliance requirements
            - Include fraud detection and prevention measures
            - Specify data retention and privacy requirements
            """
        ),
    ),
    "laboratory": IndustryTemplate(
        name="Laboratory",
        context="Testing facility, sample handling, accuracy and precision, scientific procedures",
        examples="sample analysis, equipment maintenance, calibration procedures, quality assurance",
        frameworks=["ISO 17025", "CLIA", "GLP", "FDA 21 CFR Part 11"],
        specific_guidelines=_block(
            """
            - Include detailed methodology and validation procedures
            - Specify required equipment, reagents, and standards
            - Detail calibration and quality control procedures
            - Include acceptance criteria and measurement uncertainty
            - Reference test methods and analytical procedures
            - Document sample handling and chain of custody requirements
            """
        ),
    ),
    "food": IndustryTemplate(
        name="Food & Beverage",
        context="Food processing, safety standards, HACCP compliance, quality assurance",
        examples="food preparation, sanitation procedures, allergen control, temperature monitoring",
        frameworks=["HACCP", "ISO 22000", "FDA Food Safety", "GFSI"],
        specific_guidelines=_block(
            """
            - Emphasize food safety and allergen control
            - Include critical control points and monitoring requirements
            - Detail cleaning and sanitation procedures
            - Specify temperature controls and monitoring frequencies
            - Include corrective actions for deviations
            - Reference food safety regulations and standards
            """
        ),
    ),
    "construction": IndustryTemplate(
        name="Construction",
        context="Construction site, safety protocols, building standards, project management",
        examples="site preparation, safety procedures, equipment operation, quality inspection",
        frameworks=["OSHA", "ISO 45001", "Building Codes", "LEED"],
        specific_guidelines=_block(
            """
            - Prioritize worker safety and PPE requirements
            - Include environmental and site-specific hazards
            - Detail equipment safety checks and certifications
            - Specify inspection points and quality standards
            - Include emergency procedures and first aid
            - Reference applicable building codes and permits
            """
        ),
    ),
}


TONE_TEMPLATES: Dict[str, ToneTemplate] = {
    "formal": ToneTemplate(
        name="Formal",
        description="Professional and authoritative tone suitable for regulatory and compliance contexts",
        instructions=_block(
            """
            Use formal, professional language throughout.
            - Use third person and passive voice where appropriate (e.g., "The equipment shall be inspected")
            - Employ precise, unambiguous terminology
            - Maintain consistent formality in all sections
            - Use "shall" for mandatory requirements, "should" for recommendations
            - Avoid contractions, colloquialisms, and informal expressions
            - Use complete sentences with proper grammar and punctuation
            """
        ),
    ),
    "technical": ToneTemplate(
        name="Technical",
        description="Detailed and precise language with technical terminology for expert audiences",
        instructions=_block(
            """
            Use precise technical terminology and detailed specifications.
            - Include specific measurements, tolerances, and technical parameters
            - Reference technical standards, specifications, and part numbers
            - Use industry-standard acronyms and technical terms (define on first use)
            - Include detailed technical requirements and constraints
            - Specify exact tools, equipment models, and software versions
            - Provide technical rationale where appropriate
            """
        ),
    ),
    "simple": ToneTemplate(
        name="Simple",
        description="Clear and straightforward language accessible to all skill levels",
        instructions=_block(
            """
            Use clear, simple language that is easy to understand.
            - Write in active voice with short, direct sentences
            - Avoid jargon and technical terms when possible; if needed, provide clear definitions
            - Break complex processes into simple, numbered steps
            - Use everyday language and common words
            - Include helpful explanations for technical concepts
            - Organize information logically with clear headings
            - Suitable for training new employees or non-technical staff
            """
        ),
    ),
    "friendly": ToneTemplate(
        name="Friendly",
        description="Approachable and conversational while maintaining professionalism",
        instructions=_block(
            """
            Use a conversational but professional tone.
            - Write in second person ("you" statements) to engage the reader
            - Use positive, encouraging language
            - Include helpful tips and practical advice
            - Maintain professionalism while being approachable
            - Use analogies or examples to clarify concepts
            - Add context about why steps are important
            - Balance friendliness with clarity and precision
            """
        ),
    ),
}


def _language_instructions(label: str, register: List[str]) -> str:
    lines = [f"Generate the entire SOP in {label}."]
    lines.extend(f"- {item}" for item in register)
    return "\n".join(lines)


LANGUAGE_CONFIGS: Dict[str, LanguageConfig] = {
    "en": LanguageConfig(
        code="en",
        name="English",
        native_name="English",
        instructions="Generate the entire SOP in English.",
        flag="🇺🇸",
    ),
    "es": LanguageConfig(
        code="es",
        name="Spanish",
        native_name="Español",
        instructions=_language_instructions(
            "Spanish (Español)",
            [
                "Use formal Spanish appropriate for professional documentation",
                "Maintain technical accuracy in translations",
                "Use standard Spanish terminology for the industry",
                "Ensure proper grammar and regional neutrality (Latin American Spanish)",
            ],
        ),
        flag="🇪🇸",
    ),
    "fr": LanguageConfig(
        code="fr",
        name="French",
        native_name="Français",
        instructions=_language_instructions(
            "French (Français)",
            [
                "Use formal French appropriate for professional documentation",
                "Maintain technical accuracy in translations",
                "Use standard French terminology for the industry",
                "Ensure proper grammar and formal register",
            ],
        ),
        flag="🇫🇷",
    ),
    "de": LanguageConfig(
        code="de",
        name="German",
        native_name="Deutsch",
        instructions=_language_instructions(
            "German (Deutsch)",
            [
                "Use formal German appropriate for professional documentation",
                "Maintain technical accuracy in translations",
                "Use standard German terminology for the industry",
                "Ensure proper grammar and formal register",
                "Use appropriate compound words for technical terms",
            ],
        ),
        flag="🇩🇪",
    ),
    "zh": LanguageConfig(
        code="zh",
        name="Chinese",
        native_name="简体中文",
        instructions=_language_instructions(
            "Simplified Chinese (简体中文)",
            [
                "Use formal Chinese appropriate for professional documentation",
                "Maintain technical accuracy in translations",
                "Use standard Chinese terminology for the industry",
                "Ensure proper grammar and formal register",
                "Use simplified characters, not traditional",
            ],
        ),
        flag="🇨🇳",
    ),
    "ja": LanguageConfig(
        code="ja",
        name="Japanese",
        native_name="日本語",
        instructions=_language_instructions(
            "Japanese (日本語)",
            [
                "Use formal Japanese appropriate for professional documentation (keigo)",
                "Maintain technical accuracy in translations",
                "Use standard Japanese terminology for the industry",
                "Ensure proper grammar and respectful language",
            ],
        ),
        flag="🇯🇵",
    ),
    "pt": LanguageConfig(
        code="pt",
        name="Portuguese",
        native_name="Português",
        instructions=_language_instructions(
            "Portuguese (Português)",
            [
                "Use formal Portuguese appropriate for professional documentation",
                "Maintain technical accuracy in translations",
                "Use standard Portuguese terminology for the industry",
                "Ensure proper grammar (Brazilian Portuguese)",
            ],
        ),
        flag="🇧🇷",
    ),
}

SUPPORTED_LANGUAGES: List[str] = list(LANGUAGE_CONFIGS)


def get_industry(key: str | None) -> IndustryTemplate:
    return INDUSTRY_TEMPLATES.get(key or "", INDUSTRY_TEMPLATES["general"])


def get_tone(key: str | None) -> ToneTemplate:
    return TONE_TEMPLATES.get(key or "", TONE_TEMPLATES["formal"])


def get_language(key: str | None) -> LanguageConfig:
    return LANGUAGE_CONFIGS.get(key or "", LANGUAGE_CONFIGS["en"])


__all__ = [
    "IndustryTemplate",
    "ToneTemplate",
    "LanguageConfig",
    "INDUSTRY_TEMPLATES",
    "TONE_TEMPLATES",
    "LANGUAGE_CONFIGS",
    "SUPPORTED_LANGUAGES",
    "get_industry",
    "get_tone",
    "get_language",
]
