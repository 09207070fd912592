"""
Main CLI Entry Point

홍채 Zone 분석 CLI 프로그램.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from iridology.config.settings import AnalysisConfig, ConfigError, load_analysis_config, save_analysis_config
from iridology.core.zone_catalog import ZONE_CATALOG, EyeSide
from iridology.pipeline import IridologyPipeline
from iridology.utils.file_io import read_bytes, save_image, write_json
from iridology.utils.image_utils import ImageValidationError, decode_image
from iridology.visualizer import ZoneVisualizer


def setup_logging(debug: bool = False):
    """로깅 설정 (stdout 핸들러)"""
    level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )

    # force=True: 기존 핸들러 제거
    logging.basicConfig(level=level, handlers=[handler], force=True)


def cmd_analyze(args) -> int:
    """단일 이미지 분석"""
    logger = logging.getLogger(__name__)

    config = load_analysis_config(Path(args.config) if args.config else None)
    if args.parallel:
        config.parallel = True

    pipeline = IridologyPipeline(config)
    image = decode_image(read_bytes(Path(args.image)))
    result = pipeline.analyze_image(image, args.eye)

    # 결과 출력
    print("\n" + "=" * 60)
    print("  Iridology Zone Analysis")
    print("=" * 60)
    print(f"  Image:       {args.image}")
    print(f"  Eye:         {result.eye_side.value}")
    print(f"  Base color:  {result.overall_color_profile.description}")
    print(f"  Confidence:  {result.analysis_confidence:.2f}")
    print(f"  Timestamp:   {result.timestamp.strftime('%Y-%m-%d %H:%M:%S')}")

    print("\n  Zones:")
    for za in result.zone_analyses:
        marker = "[*]" if za.is_notable else "[ ]"
        print(f"    {marker} {za.zone.name:<24} significance={za.significance_score:.2f}  {za.primary_observation}")

    print("\n  Insights:")
    for insight in result.insights:
        print(f"    - {insight.title} ({insight.category.display_name}, {insight.confidence_level})")
        for prompt in insight.reflection_prompts:
            print(f"        ? {prompt}")
    print("=" * 60 + "\n")

    if args.output:
        write_json(result.to_dict(), Path(args.output))
        logger.info(f"Result saved to {args.output}")

    if args.overlay or args.chart:
        visualizer = ZoneVisualizer(segmenter=pipeline.zone_segmenter)
        if args.overlay:
            overlay = visualizer.draw_zone_centers(visualizer.visualize_zones(image, result.eye_side), result.eye_side)
            save_image(Path(args.overlay), overlay)
            logger.info(f"Zone overlay saved to {args.overlay}")
        if args.chart:
            visualizer.plot_significance(result, Path(args.chart))
            logger.info(f"Significance chart saved to {args.chart}")

    return 0


def cmd_catalog(args) -> int:
    """Zone 카탈로그 출력"""
    zones = ZONE_CATALOG.zones_for(args.eye)
    print(f"\n  {EyeSide.parse(args.eye).value} eye: {len(zones)} zones\n")
    print(f"  {'ID':<18} {'Name':<24} {'System':<16} {'Angle (rad)':<16} Radius")
    print("  " + "-" * 86)
    for zone in zones:
        angles = f"{zone.start_angle:.2f}-{zone.end_angle:.2f}"
        radii = f"{zone.inner_radius:.2f}-{zone.outer_radius:.2f}"
        print(f"  {zone.id:<18} {zone.name:<24} {zone.body_system.value:<16} {angles:<16} {radii}")
    print()
    return 0


def cmd_init_config(args) -> int:
    """기본 분석 설정 JSON 생성"""
    config = AnalysisConfig(parallel=args.parallel)
    path = save_analysis_config(config, Path(args.path))
    print(f"  Config written to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Iridology Zone Mapping and Wellness Reflection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # ========== analyze 명령어 ==========
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a single iris image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m iridology.main analyze data/left_eye.jpg --eye left
  python -m iridology.main analyze data/right_eye.png --eye right --output results/right.json --chart results/right.png
        """,
    )
    analyze_parser.add_argument("image", help="Image file path")
    analyze_parser.add_argument("--eye", required=True, choices=["left", "right"], help="Eye side")
    analyze_parser.add_argument("--config", help="Analysis config JSON path")
    analyze_parser.add_argument("--output", help="Output JSON file path")
    analyze_parser.add_argument("--overlay", help="Zone overlay image output path (PNG)")
    analyze_parser.add_argument("--chart", help="Significance chart output path (PNG or PDF)")
    analyze_parser.add_argument("--parallel", action="store_true", help="Analyze zones in parallel")
    analyze_parser.add_argument(
        "--debug", action="store_true", default=argparse.SUPPRESS, help="Enable debug logging"
    )

    # ========== catalog 명령어 ==========
    catalog_parser = subparsers.add_parser("catalog", help="List zones for one eye")
    catalog_parser.add_argument("--eye", required=True, choices=["left", "right"], help="Eye side")

    # ========== init-config 명령어 ==========
    init_parser = subparsers.add_parser("init-config", help="Write the default analysis config as JSON")
    init_parser.add_argument("path", help="Config JSON output path")
    init_parser.add_argument("--parallel", action="store_true", help="Enable parallel zone analysis")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """메인 함수"""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(getattr(args, "debug", False))
    logger = logging.getLogger(__name__)

    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "analyze":
            return cmd_analyze(args)
        elif args.command == "catalog":
            return cmd_catalog(args)
        elif args.command == "init-config":
            return cmd_init_config(args)

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1

    except ImageValidationError as e:
        logger.error(f"Invalid image: {e}")
        return 2

    except ConfigError as e:
        logger.error(f"Config error: {e}")
        return 2

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
