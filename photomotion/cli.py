"""
photomotion - framing and motion planning CLI.

Usage:
    photomotion plan photo1.jpg photo2.jpg ... [--aspect 16:9] [--seed 12345] [--json]
    photomotion curve LATERAL_DRIFT_L [--frames 48] [--width 1920] [--height 1080]
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .core.config import get_settings
from .motion_engine import (
    TransformParams,
    generate_seed,
    get_preset,
    list_presets,
    plan_sequence,
    sample_shot,
    to_motion_params,
)
from .reframe import BatchPlanInput, FramePlanCache, plan_frames_batch
from .schemas.frame_plan import FramePlanOptions

logger = logging.getLogger(__name__)


def parse_aspect(value: str) -> float:
    """Parse "16:9", "2.39:1" or "1.7778" into a width/height ratio."""
    try:
        if ":" in value:
            width, height = value.split(":", 1)
            aspect = float(width) / float(height)
        else:
            aspect = float(value)
    except (ValueError, ZeroDivisionError):
        raise argparse.ArgumentTypeError(f"invalid aspect ratio: {value!r}")
    if aspect <= 0:
        raise argparse.ArgumentTypeError(f"aspect ratio must be positive: {value!r}")
    return aspect


def cmd_plan(
    images: List[str],
    target_aspect: float,
    seed: int,
    frame_width: int,
    frame_height: int,
    options: FramePlanOptions,
    workers: int,
    cache_size: int,
    as_json: bool = False,
) -> int:
    """
    Plan crops and motion for an ordered list of photos.

    Prints one line per shot, or the full report as JSON. Returns 0 when
    every image was planned, 1 when any image failed.
    """
    logger.info(f"Planning {len(images)} images at aspect {target_aspect:.4f}, seed {seed}")
    results = plan_frames_batch(
        [BatchPlanInput(image=path, image_key=path) for path in images],
        default_target_aspect=target_aspect,
        options=options,
        cache=FramePlanCache(max_size=cache_size),
        max_workers=workers,
    )

    anchors = [
        (r.plan.anchor.x, r.plan.anchor.y) if r.ok else None
        for r in results
    ]
    presets = plan_sequence(
        len(images),
        frame_width=frame_width,
        frame_height=frame_height,
        seed=seed,
        anchors=anchors,
    )

    total = len(images)
    shots = []
    for result, preset in zip(results, presets):
        position = result.index / (total - 1) if total > 1 else 0.0
        anchor = anchors[result.index]
        params = TransformParams(
            frame_width=frame_width,
            frame_height=frame_height,
            seed=generate_seed(position, result.index, seed),
            anchor_x=anchor[0] if anchor else None,
            anchor_y=anchor[1] if anchor else None,
        )
        shots.append({
            "index": result.index,
            "image": result.image_key,
            "frame_plan": result.plan.model_dump() if result.ok else None,
            "error": result.error,
            "preset": preset.value,
            "motion": to_motion_params(preset, params).model_dump(),
        })

    report = {
        "seed": seed,
        "target_aspect": target_aspect,
        "frame": {"width": frame_width, "height": frame_height},
        "shots": shots,
    }
    if as_json:
        print(json.dumps(report, indent=2))
    else:
        for shot in shots:
            plan = shot["frame_plan"]
            if plan is None:
                framing = f"FAILED: {shot['error']}"
            else:
                crop = plan["crop"]
                framing = (
                    f"crop={crop['x']},{crop['y']} {crop['w']}x{crop['h']} "
                    f"confidence={plan['confidence']:.2f}"
                    + (" [review]" if plan["needs_review"] else "")
                )
            motion = shot["motion"]
            print(
                f"{shot['index']:>3}  {shot['preset']:<17} "
                f"zoom {motion['zoom_start']:.4f}->{motion['zoom_end']:.4f}  "
                f"{framing}  {shot['image']}"
            )

    failed = [r for r in results if not r.ok]
    if failed:
        print(f"ERROR: {len(failed)} of {total} images could not be planned", file=sys.stderr)
        return 1
    return 0


def cmd_curve(preset_name: str, frames: int, frame_width: int, frame_height: int, seed: int) -> int:
    """Print the per-frame transform curve of a preset as JSON."""
    preset = get_preset(preset_name)
    if preset is None:
        print(
            f"ERROR: unknown preset {preset_name!r} (choose from {', '.join(list_presets())})",
            file=sys.stderr,
        )
        return 2

    params = TransformParams(frame_width=frame_width, frame_height=frame_height, seed=seed)
    samples = sample_shot(preset, frames, params)
    print(json.dumps([s.to_dict() for s in samples], indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="photomotion - framing and motion planning CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    plan_parser = sub.add_parser("plan", help="Plan crops and camera motion for ordered photos")
    plan_parser.add_argument("images", nargs="+", help="Image files in sequence order")
    plan_parser.add_argument(
        "--aspect", type=parse_aspect, default=settings.target_aspect,
        help="Target aspect ratio, e.g. 16:9 (default: settings)",
    )
    plan_parser.add_argument("--seed", type=int, default=settings.job_seed, help="Job seed")
    plan_parser.add_argument("--width", type=int, default=settings.frame_width, help="Frame width")
    plan_parser.add_argument("--height", type=int, default=settings.frame_height, help="Frame height")
    plan_parser.add_argument(
        "--headroom", type=float, default=settings.headroom_bias,
        help="Headroom bias as a fraction of crop height",
    )
    plan_parser.add_argument(
        "--threshold", type=float, default=settings.confidence_threshold,
        help="Confidence below which plans are flagged for review",
    )
    plan_parser.add_argument(
        "--safe-mode-below", type=float, default=None,
        help="Force a centered crop below this confidence",
    )
    plan_parser.add_argument("--json", action="store_true", help="Print the full report as JSON")

    curve_parser = sub.add_parser("curve", help="Print a preset's per-frame transform curve")
    curve_parser.add_argument("preset", help=f"One of: {', '.join(list_presets())}")
    curve_parser.add_argument("--frames", type=int, default=24, help="Frames in the shot")
    curve_parser.add_argument("--width", type=int, default=settings.frame_width, help="Frame width")
    curve_parser.add_argument("--height", type=int, default=settings.frame_height, help="Frame height")
    curve_parser.add_argument("--seed", type=int, default=settings.job_seed, help="Shot seed")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    args = build_parser().parse_args(argv)

    if args.command in ("plan", "curve") and (args.width <= 0 or args.height <= 0):
        print(f"ERROR: frame size must be positive, got {args.width}x{args.height}", file=sys.stderr)
        return 2

    if args.command == "plan":
        if not 0.0 <= args.threshold <= 1.0:
            print("ERROR: --threshold must be within [0, 1]", file=sys.stderr)
            return 2
        if not 0.0 <= args.headroom < 1.0:
            print("ERROR: --headroom must be within [0, 1)", file=sys.stderr)
            return 2
        if args.safe_mode_below is not None and not 0.0 <= args.safe_mode_below <= 1.0:
            print("ERROR: --safe-mode-below must be within [0, 1]", file=sys.stderr)
            return 2
        options = FramePlanOptions(
            confidence_threshold=args.threshold,
            headroom_bias=args.headroom,
            max_score_dimension=settings.max_score_dimension,
            safe_mode_below=args.safe_mode_below,
        )
        return cmd_plan(
            args.images,
            target_aspect=args.aspect,
            seed=args.seed,
            frame_width=args.width,
            frame_height=args.height,
            options=options,
            workers=settings.batch_workers,
            cache_size=settings.plan_cache_size,
            as_json=args.json,
        )
    if args.command == "curve":
        if args.frames < 1:
            print("ERROR: --frames must be at least 1", file=sys.stderr)
            return 2
        return cmd_curve(args.preset, args.frames, args.width, args.height, args.seed)
    return 2


if __name__ == "__main__":
    sys.exit(main())
