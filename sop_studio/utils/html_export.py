"""Standalone, print-friendly HTML rendering of a stored SOP."""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any, List

from sop_studio.errors import ExportError
from sop_studio.utils.exporter import metadata_rows, structured_content
from sop_studio.utils.sop_content import SECTION_ORDER, SOPContent

logger = logging.getLogger(__name__)

LIST_CLASSES = {
    "responsibilities": "responsibility-list",
    "safety_notes": "safety-list",
    "references": "reference-list",
    "acceptance_criteria": "criteria-list",
}

STYLESHEET = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
            line-height: 1.6;
            color: #333;
            max-width: 900px;
            margin: 0 auto;
            padding: 40px 20px;
            background-color: #f5f5f5;
        }
        .container { background-color: white; padding: 60px; box-shadow: 0 0 20px rgba(0,0,0,0.1); }
        .header { text-align: center; border-bottom: 3px solid #2c3e50; padding-bottom: 20px; margin-bottom: 30px; }
        h1 { color: #2c3e50; font-size: 32px; margin-bottom: 20px; }
        .metadata {
            display: grid;
            grid-template-columns: repeat(2, 1fr);
            gap: 10px;
            background-color: #f8f9fa;
            padding: 20px;
            border-radius: 5px;
            margin-bottom: 30px;
            font-size: 14px;
        }
        .metadata-item { display: flex; }
        .metadata-label { font-weight: bold; min-width: 140px; color: #555; }
        .metadata-value { color: #333; }
        .section { margin-bottom: 30px; }
        h2 {
            color: #2c3e50;
            font-size: 22px;
            border-bottom: 2px solid #3498db;
            padding-bottom: 10px;
            margin-bottom: 15px;
        }
        .section-content { padding-left: 20px; }
        .responsibility-list, .safety-list, .reference-list, .criteria-list { list-style-type: none; padding-left: 0; }
        .responsibility-list li, .safety-list li, .reference-list li, .criteria-list li {
            padding: 8px 0 8px 25px;
            position: relative;
        }
        .responsibility-list li:before, .safety-list li:before, .reference-list li:before, .criteria-list li:before {
            content: "•";
            color: #3498db;
            font-weight: bold;
            position: absolute;
            left: 0;
        }
        .procedure-step {
            margin-bottom: 25px;
            padding: 20px;
            background-color: #f8f9fa;
            border-left: 4px solid #3498db;
            border-radius: 4px;
        }
        .step-header { font-size: 18px; font-weight: bold; color: #2c3e50; margin-bottom: 10px; }
        .step-details { color: #555; line-height: 1.8; margin-bottom: 10px; }
        .step-warning {
            background-color: #fff3cd;
            border-left: 4px solid #ffc107;
            padding: 12px;
            margin-top: 10px;
            border-radius: 4px;
        }
        .step-warning strong { color: #856404; }
        .warning-icon { font-size: 18px; margin-right: 8px; }
        .safety-section { background-color: #fff3cd; padding: 20px; border-radius: 5px; border-left: 4px solid #ffc107; }
        .status-badge {
            display: inline-block;
            padding: 4px 12px;
            border-radius: 12px;
            font-size: 12px;
            font-weight: bold;
            text-transform: uppercase;
        }
        .status-draft { background-color: #e9ecef; color: #6c757d; }
        .status-approved { background-color: #d4edda; color: #155724; }
        .status-archived { background-color: #d1ecf1; color: #0c5460; }
        @media print {
            body { background-color: white; padding: 0; }
            .container { box-shadow: none; padding: 20px; }
            .procedure-step, .section { page-break-inside: avoid; }
        }
        @media (max-width: 768px) {
            .container { padding: 30px 20px; }
            .metadata { grid-template-columns: 1fr; }
        }
"""


def _section(number: int, title: str, body: str, extra_class: str = "") -> str:
    css = f"section-content {extra_class}".strip()
    return (
        f'\n        <div class="section">\n'
        f"            <h2>{number}. {title}</h2>\n"
        f'            <div class="{css}">\n{body}\n            </div>\n'
        f"        </div>"
    )


def _render_sections(content: SOPContent) -> str:
    parts: List[str] = []
    for number, (title, attr, _key) in enumerate(SECTION_ORDER, start=1):
        value = getattr(content, attr)
        if not value:
            continue

        if attr in ("purpose", "scope"):
            parts.append(_section(number, title, f"                <p>{escape(value)}</p>"))
        elif attr == "procedures":
            steps: List[str] = []
            for step in value:
                lines = [
                    '                <div class="procedure-step">',
                    f'                    <div class="step-header">Step {step.step}: {escape(step.action)}</div>',
                ]
                if step.details:
                    lines.append(f'                    <div class="step-details">{escape(step.details)}</div>')
                if step.warning:
                    lines.append(
                        '                    <div class="step-warning"><span class="warning-icon">⚠</span>'
                        f"<strong>WARNING:</strong> {escape(step.warning)}</div>"
                    )
                lines.append("                </div>")
                steps.append("\n".join(lines))
            parts.append(_section(number, title, "\n".join(steps)))
        else:
            items = "".join(f"<li>{escape(item)}</li>" for item in value)
            body = f'                <ul class="{LIST_CLASSES[attr]}">{items}</ul>'
            extra = "safety-section" if attr == "safety_notes" else ""
            parts.append(_section(number, title, body, extra))

    return "".join(parts)


def generate_html(sop: Any) -> str:
    try:
        content, raw = structured_content(sop)
        status = sop.status or "draft"
        title = escape(sop.title or "Standard Operating Procedure")

        meta = "\n".join(
            '            <div class="metadata-item">'
            f'<span class="metadata-label">{escape(label)}</span>'
            f'<span class="metadata-value">{escape(value)}</span></div>'
            # status is already shown as the header badge
            for label, value in metadata_rows(sop)
            if label != "Status:"
        )

        if content is not None:
            sections = _render_sections(content)
        else:
            pretty = escape(json.dumps(raw, indent=2, ensure_ascii=False))
            sections = _section(1, "CONTENT", f"                <pre>{pretty}</pre>")

        return f"""<!DOCTYPE html>
<html lang="{escape(sop.language or 'en')}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>{STYLESHEET}    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{title}</h1>
            <span class="status-badge status-{escape(status)}">{escape(status.upper())}</span>
        </div>

        <div class="metadata">
{meta}
        </div>
{sections}
    </div>
</body>
</html>"""
    except Exception as exc:
        logger.exception("Error generating HTML for SOP %s", getattr(sop, "id", "?"))
        raise ExportError("HTML", "Failed to generate HTML document") from exc


__all__ = ["generate_html"]
