"""
Teotlan Main Entry Point

Headless front end: place up to two images in the slots, submit the prompt,
print the outcome and save the generated image.

    python -m teotlan --prompt "Combine these into a surreal space scene" \
        --image-a cat.jpg --image-b nebula.png
"""

import sys
import argparse
import asyncio
from pathlib import Path

from teotlan.core.config import TeotlanConfig, load_config, set_config
from teotlan.core.constants import SlotId
from teotlan.core.exceptions import ConfigurationError
from teotlan.core.logging_config import LogLevel, create_session_log, setup_logging, get_logger
from teotlan.core.startup import validate_environment


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="teotlan",
        description="Teotlan Studio - Generate an image from a prompt and up to two reference images"
    )

    parser.add_argument(
        "--prompt", "-p",
        type=str,
        default="",
        help="Describe the image you want"
    )

    parser.add_argument(
        "--image-a", "-a",
        type=str,
        help="Reference image for slot A (path or data: URI)"
    )

    parser.add_argument(
        "--image-b", "-b",
        type=str,
        help="Reference image for slot B (path or data: URI)"
    )

    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        help="Directory for the generated image (default: from config)"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to configuration file"
    )

    parser.add_argument(
        "--model",
        type=str,
        help="Override the image model name"
    )

    parser.add_argument(
        "--save-log",
        action="store_true",
        help="Also write a timestamped session log into the configured logs directory"
    )

    parser.add_argument(
        "--log-dir",
        type=str,
        help="Write the session log into this directory instead (implies --save-log)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode"
    )

    parser.add_argument(
        "--skip-validation",
        action="store_true",
        help="Skip API key validation at startup"
    )

    return parser


def _source_image(value: str):
    from teotlan.studio.models import SourceImage

    if value.startswith("data:"):
        return SourceImage.from_data_uri(value)
    return SourceImage.from_path(value)


async def run(args, config: TeotlanConfig) -> int:
    """Run one submission. Returns the process exit code."""
    from teotlan.llm.image_service import create_image_service
    from teotlan.studio.artifacts import save_generated_image
    from teotlan.studio.encoder import ImageEncoder
    from teotlan.studio.orchestrator import GenerationOrchestrator
    from teotlan.studio.previews import ThumbnailPreviewProvider
    from teotlan.studio.slots import ImageSlotManager

    service = create_image_service(config.service)
    encoder = ImageEncoder.from_config(config.uploads)
    orchestrator = GenerationOrchestrator(service, encoder=encoder.encode)

    with ImageSlotManager(ThumbnailPreviewProvider.from_config(config.previews)) as slots:
        for slot_id, value in ((SlotId.A, args.image_a), (SlotId.B, args.image_b)):
            if value:
                slot = slots.set_slot(slot_id, _source_image(value))
                print(f"Slot {slot_id.value.upper()}: {slot.file.name} (preview: {slot.preview.location})")

        print("Generating... this can take a few moments.")
        outcome = await orchestrator.submit_slots(args.prompt, slots)

    if not outcome.is_success:
        print(f"\nGeneration Failed\n  {outcome.message}")
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else config.output.output_dir
    path = save_generated_image(outcome, output_dir, config.output.download_filename)
    print(f"\nImage saved to {path}")
    return 0


def main(argv=None) -> int:
    """Main entry point for the Teotlan CLI."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(Path(args.config) if args.config else None)
    except ConfigurationError as e:
        print(f"Could not load config: {e.message}")
        return 2

    log_level = LogLevel.DEBUG if args.debug else LogLevel.INFO
    verbose = args.debug or config.verbose_logging
    if args.log_dir or args.save_log:
        log_dir = Path(args.log_dir) if args.log_dir else config.logs_dir
        log_file = create_session_log(log_dir, prefix="teotlan", level=log_level, verbose=verbose)
        print(f"Session log: {log_file}")
    else:
        setup_logging(level=log_level, verbose=verbose)

    logger = get_logger("main")
    if args.model:
        config.service.model = args.model
    set_config(config)

    if not args.skip_validation:
        validation_result = validate_environment(config)
        for warning in validation_result.warnings:
            logger.warning(warning)
        if not validation_result.valid:
            print("\nEnvironment validation failed. Missing required configuration:")
            for error in validation_result.errors:
                print(f"  ✗ {error}")
            print("\nRun with --skip-validation to bypass (not recommended)")
            return 2

    try:
        return asyncio.run(run(args, config))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Configuration error: {e.message}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
