"""
live2d-head-pose - drive a Live2D avatar's head from a webcam.

Usage:
    live2d-head-pose [options]

Example:
    live2d-head-pose --model haru/haru_greeter_t05.model3.json
    live2d-head-pose --source clip.mp4 --no-mirror --save-angles angles.json
    live2d-head-pose --detector mediapipe --preview
"""

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import List, Optional, Sequence

import cv2

from .core.base_channel import AvatarChannel, ParameterChannel
from .core.config import TrackerConfig
from .core.constants import PARAM_RANGES
from .core.errors import HeadPoseError
from .detectors import BACKENDS, create_detector
from .processors.camera_reader import CameraReader
from .processors.data_exporter import DataExporter
from .processors.overlay import draw_tracking_overlay, preview_size
from .processors.pipeline import HeadPosePipeline

logger = logging.getLogger(__name__)

PREVIEW_WINDOW = "live2d-head-pose tracking"


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="live2d-head-pose",
        description="Track a face from a camera and drive a Live2D model's head angles",
    )

    # Input
    parser.add_argument(
        "--source", "-s",
        type=str,
        default="0",
        help="Camera index or video file path"
    )
    parser.add_argument("--width", type=int, default=320, help="Requested capture width")
    parser.add_argument("--height", type=int, default=240, help="Requested capture height")
    parser.add_argument("--fps", type=float, default=30.0, help="Requested capture frame rate")
    parser.add_argument(
        "--mirror",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Mirror frames horizontally (front-facing cameras)"
    )

    # Tracking
    parser.add_argument(
        "--detector", "-d",
        choices=sorted(BACKENDS),
        default="dlib",
        help="Landmark detector backend"
    )
    parser.add_argument(
        "--predictor",
        type=str,
        help="Detector model file (downloaded when omitted)"
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Tracker config JSON file"
    )

    # Output
    parser.add_argument(
        "--model", "-m",
        type=str,
        help="Live2D model file path (.model3.json); headless when omitted"
    )
    parser.add_argument(
        "--render-resolution",
        type=int,
        nargs=2,
        default=[512, 512],
        metavar=("WIDTH", "HEIGHT"),
        help="Live2D render resolution"
    )
    parser.add_argument(
        "--record",
        type=str,
        help="Write the rendered avatar to a video file (requires --model)"
    )
    parser.add_argument(
        "--save-angles",
        type=str,
        help="Write per-frame head angles to a JSON file"
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the camera image with face box and landmarks"
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)
    if args.record and not args.model:
        parser.error("--record requires --model")
    return args


def headless_channels(config: TrackerConfig) -> List[AvatarChannel]:
    """In-memory channels for runs without a Live2D model."""
    names = (config.channel_x, config.channel_y, config.channel_z)
    return [ParameterChannel(name, *PARAM_RANGES.get(name, (-30.0, 30.0))) for name in names]


def run(args: argparse.Namespace) -> int:
    """Run the tracking loop until the source ends or the user quits."""
    config = TrackerConfig.from_json(args.config) if args.config else TrackerConfig()

    detector_kwargs = {}
    if args.predictor:
        detector_kwargs["predictor_path" if args.detector == "dlib" else "model_path"] = args.predictor

    with ExitStack() as stack:
        reader = stack.enter_context(CameraReader(
            args.source,
            width=args.width,
            height=args.height,
            fps=args.fps,
            mirror=args.mirror,
        ))
        if args.detector == "mediapipe":
            detector_kwargs["fps"] = reader.fps
        try:
            detector = create_detector(args.detector, **detector_kwargs)
        except ImportError as e:
            logger.error("Detector %s is not installed (%s). Install it with: pip install 'live2d-head-pose[%s]'",
                         args.detector, e, args.detector)
            return 1
        stack.enter_context(detector)

        renderer = None
        if args.model:
            from .renderers.live2d_renderer import Live2DRenderer

            model_path = Path(args.model)
            if not model_path.exists():
                raise FileNotFoundError(f"Live2D model not found: {args.model}")
            renderer = stack.enter_context(Live2DRenderer(
                str(model_path),
                canvas_size=tuple(args.render_resolution),
            ))
            channels = [renderer.channel(name) for name in (config.channel_x, config.channel_y, config.channel_z)]
        else:
            channels = headless_channels(config)

        recorder = None
        if args.record:
            recorder = cv2.VideoWriter(
                args.record,
                cv2.VideoWriter_fourcc(*"mp4v"),
                reader.fps,
                tuple(args.render_resolution),
            )
            stack.callback(recorder.release)

        exporter = None
        if args.save_angles:
            exporter = stack.enter_context(DataExporter(args.save_angles, {
                "source": args.source,
                "fps": reader.fps,
                "width": reader.width,
                "height": reader.height,
                "config": config.to_dict(),
            }))

        if args.preview:
            stack.callback(cv2.destroyAllWindows)

        pipeline = HeadPosePipeline(config, channels, detector)
        frames = reader.read_frames(show_progress=not args.no_progress)
        dt = 1.0 / reader.fps

        logger.info("Tracking started (detector=%s, model=%s)", args.detector, args.model or "none")
        for frame_data in pipeline.process(frames, dt):
            result = frame_data.result
            logger.debug("Frame %d: detected=%s angles=%s", result.frame_idx, result.detected, result.angles)

            if exporter is not None:
                exporter.write_result(result)

            if renderer is not None:
                if not renderer.draw():
                    break
                if recorder is not None:
                    recorder.write(renderer.read_pixels())

            if args.preview:
                canvas = draw_tracking_overlay(frame_data.image, frame_data.region, frame_data.landmarks, result.angles)
                canvas = cv2.resize(canvas, preview_size(canvas.shape[1], canvas.shape[0]))
                cv2.imshow(PREVIEW_WINDOW, canvas)
                if cv2.waitKey(1) & 0xFF == ord("q"):
                    break

        logger.info("Tracking stopped after %d frames", pipeline.state.frame_idx)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main execution function."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return run(args)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0
    except (HeadPoseError, RuntimeError, FileNotFoundError) as e:
        logger.error("%s", e)
        if args.verbose:
            logger.exception("Traceback")
        return 1


if __name__ == "__main__":
    sys.exit(main())
