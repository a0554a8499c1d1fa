import argparse
import json
import logging
import os
import subprocess
import sys
from typing import Callable, Dict, List, Optional, Tuple

from sop_studio.agents.sop_generator import generate_sop
from sop_studio.config.settings import configure_logging
from sop_studio.personas import prebuilt_profiles
from sop_studio.storage import repository
from sop_studio.storage.database import session_scope
from sop_studio.utils.exporter import export_filename, generate_docx, generate_pdf
from sop_studio.utils.html_export import generate_html
from sop_studio.utils.xlsx_export import generate_xlsx

logger = logging.getLogger(__name__)

# format -> (renderer, filename suffix)
EXPORTERS: Dict[str, Tuple[Callable, str]] = {
    "pdf": (generate_pdf, ""),
    "docx": (generate_docx, ""),
    "html": (generate_html, ""),
    "xlsx": (generate_xlsx, "_checklist"),
}


def cmd_generate(args: argparse.Namespace) -> int:
    content = generate_sop(
        args.title,
        args.description,
        industry=args.industry,
        tone=args.tone,
        language=args.language,
        regulatory_framework=args.framework,
    )
    payload = content.to_dict()

    if args.save:
        with session_scope() as session:
            sop = repository.create_sop(
                session,
                title=args.title,
                description=args.description,
                content=payload,
                category=args.category,
                industry=args.industry,
                tone=args.tone,
                language=args.language,
                regulatory_framework=args.framework,
            )
            print(f"Saved SOP {sop.id}", file=sys.stderr)

    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.out:
        out_dir = os.path.dirname(args.out)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as fh:
            fh.write(text + "\n")
        print(os.path.abspath(args.out))
    else:
        print(text)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    render, suffix = EXPORTERS[args.format]
    with session_scope() as session:
        sop = repository.get_sop(session, args.sop_id)
        data = render(sop)
        target = args.out or export_filename(sop, args.format, suffix)

    out_dir = os.path.dirname(target)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    if isinstance(data, str):
        with open(target, "w", encoding="utf-8") as fh:
            fh.write(data)
    else:
        with open(target, "wb") as fh:
            fh.write(data)
    print(os.path.abspath(target))
    return 0


def cmd_seed_personas(args: argparse.Namespace) -> int:
    with session_scope() as session:
        created = repository.seed_personas(session, prebuilt_profiles())
        names = [p.name for p in created]
    if names:
        print(f"Created {len(names)} personas: {', '.join(names)}")
    else:
        print("All pre-built personas are already installed")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("sop_studio.api.server:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def cmd_ui(args: argparse.Namespace) -> int:
    app_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app.py")
    command = [sys.executable, "-m", "streamlit", "run", app_path, "--server.port", str(args.port)]
    return subprocess.call(command)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="sop-studio", description="Generate, store and export SOPs")
    ap.add_argument("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, ...)")
    sub = ap.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate an SOP with the configured LLM")
    gen.add_argument("--title", required=True)
    gen.add_argument("--description", required=True)
    gen.add_argument("--industry", default="general")
    gen.add_argument("--tone", default="formal")
    gen.add_argument("--language", default="en")
    gen.add_argument("--framework", action="append", default=[], help="Regulatory framework. Repeatable.")
    gen.add_argument("--category", default=None)
    gen.add_argument("--save", action="store_true", help="Store the generated SOP in the database")
    gen.add_argument("--out", default=None, help="Write the SOP JSON to this file instead of stdout")
    gen.set_defaults(func=cmd_generate)

    exp = sub.add_parser("export", help="Export a stored SOP")
    exp.add_argument("sop_id")
    exp.add_argument("--format", choices=sorted(EXPORTERS), default="pdf")
    exp.add_argument("--out", default=None)
    exp.set_defaults(func=cmd_export)

    seed = sub.add_parser("seed-personas", help="Install the pre-built personas")
    seed.set_defaults(func=cmd_seed_personas)

    serve = sub.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=cmd_serve)

    ui = sub.add_parser("ui", help="Start the Streamlit interface")
    ui.add_argument("--port", type=int, default=8501)
    ui.set_defaults(func=cmd_ui)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.func(args)
    except (ValueError, LookupError) as exc:
        logger.error("%s", exc)
        return 2
    except RuntimeError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
