#!/usr/bin/env python3
# image_derivatives/cli.py
"""
Command-line interface for image derivatives.

Builds derivative sets for local image files and prints the validation rule
synthesized for an image field.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import Settings
from .enums import LogEmoji, LoggerName, LogSource
from .exceptions import DerivativeBuildError, DerivativesError
from .models import DerivativeSet, ModelIdentity, UploadHandle
from .services.derivative_pipeline import create_derivative_pipeline
from .services.logger import get_service_logger, initialize_global_logger

logger = get_service_logger(LoggerName.CLI, LogSource.CLI)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-derivatives",
        description="Thumbnail and retina derivative generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s build --fields fields.json --model app.models.Post --key 1 --field image photo.jpg
  %(prog)s rule --fields fields.json --model app.models.Post --field image --rule "required|image"
        """,
    )
    parser.add_argument("--fields", help="JSON image field configuration file")
    parser.add_argument("--upload-dir", help="Upload root directory")
    parser.add_argument("--log-level", help="Log level (TRACE..CRITICAL)")
    parser.add_argument("--json", action="store_true", help="Output results as JSON")

    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Generate the derivative set of an image")
    _add_model_arguments(build)
    build.add_argument("--field", required=True, help="Image field name")
    build.add_argument(
        "--move",
        action="store_true",
        help="Move the input file into the upload directory instead of copying it",
    )
    build.add_argument("image", help="Image file to process")

    rule = sub.add_parser("rule", help="Print the synthesized validation rule")
    _add_model_arguments(rule)
    rule.add_argument("--field", required=True, help="Image field name")
    rule.add_argument("--rule", default=None, help="Existing validation rule to merge into")

    return parser


def _add_model_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--model", required=True, help="Model type name")
    parser.add_argument("--key", default="0", help="Model primary key")
    parser.add_argument("--identifier", default=None, help="Field registry identifier")
    retina = parser.add_mutually_exclusive_group()
    retina.add_argument("--retina-factor", type=int, default=None, help="Retina override")
    retina.add_argument(
        "--no-retina", action="store_true", help="Disable retina derivatives"
    )


def _load_settings(args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.fields:
        overrides["image_fields_file"] = args.fields
    if args.upload_dir:
        overrides["upload_directory"] = args.upload_dir
    if args.log_level:
        overrides["log_level"] = args.log_level
    return Settings(**overrides)


def _identity(args: argparse.Namespace) -> ModelIdentity:
    retina_factor = False if args.no_retina else args.retina_factor
    return ModelIdentity(
        type_name=args.model,
        key=args.key,
        identifier=args.identifier,
        retina_factor=retina_factor,
    )


def _print_derivative_set(derivative_set: DerivativeSet) -> None:
    print(f"✅ Built {len(derivative_set)} derivative(s) for '{derivative_set.filename}'")
    for role, descriptor in derivative_set.descriptors.items():
        print(f"   {role}: {descriptor.path} ({descriptor.width}x{descriptor.height})")


def _run_build(pipeline, args: argparse.Namespace) -> dict:
    image_path = Path(args.image)
    if args.move:
        upload = UploadHandle.from_path(image_path)
    else:
        upload = UploadHandle.from_bytes(image_path.name, image_path.read_bytes())

    derivative_set = pipeline.build(_identity(args), args.field, upload)
    if not args.json:
        _print_derivative_set(derivative_set)
    return {
        "success": True,
        "record": derivative_set.to_image_record().model_dump(),
        "derivatives": {
            role: pipeline.settings.get_relative_path(descriptor.path)
            for role, descriptor in derivative_set.descriptors.items()
        },
    }


def _run_rule(pipeline, args: argparse.Namespace) -> dict:
    identity = _identity(args)
    field_spec = pipeline.ensure_image_type(identity, args.field)
    rule = pipeline.register_image_field(
        field_spec, existing_rule=args.rule, retina_factor=identity.retina_factor
    )
    if not args.json:
        print(rule)
    return {"success": True, "field": args.field, "rule": rule}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    try:
        app_settings = _load_settings(args)
        initialize_global_logger(
            level=app_settings.log_level, log_file=app_settings.log_file
        )
        pipeline = create_derivative_pipeline(app_settings)
        logger.debug(
            f"Running {args.command} command",
            emoji=LogEmoji.STARTUP,
            extra_context={"field_name": args.field, "model": args.model},
        )

        if args.command == "build":
            result = _run_build(pipeline, args)
        else:
            result = _run_rule(pipeline, args)
    except DerivativeBuildError as e:
        _print_error(args, str(e), written_paths=[str(p) for p in e.written_paths])
        return 1
    except (DerivativesError, ValueError, OSError) as e:
        _print_error(args, str(e))
        return 1

    if args.json:
        print(json.dumps(result, indent=2))
    return 0


def _print_error(args: argparse.Namespace, message: str, **details) -> None:
    if args.json:
        print(json.dumps({"error": message, "success": False, **details}))
    else:
        print(f"❌ {message}", file=sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
