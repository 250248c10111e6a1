import argparse
import sys
from pathlib import Path

from sprite_editor.core.errors import SpriteEditorError
from sprite_editor.core.exporter import ExportSnapshot, export_animation, export_frame_png, export_sheet
from sprite_editor.core.frames import FrameSequence
from sprite_editor.core.project_file import PROJECT_EXTENSION, load_project, save_project
from sprite_editor.utils.config import AppConfig
from sprite_editor.utils.helpers import human_readable_size
from sprite_editor.utils.logging_config import LoggingConfig


def _load_or_exit(path: Path) -> FrameSequence:
    if not path.exists():
        print(f"Error: Project file not found: {path}")
        sys.exit(1)
    try:
        return load_project(path)
    except SpriteEditorError as e:
        print(f"Error: Failed to load project: {e}")
        sys.exit(1)


def _print_info(path: Path, sequence: FrameSequence):
    print(f"Project:  {sequence.name}")
    print(f"File:     {path} ({human_readable_size(path.stat().st_size)})")
    print(f"Grid:     {sequence.grid_size} x {sequence.grid_size}")
    print(f"FPS:      {sequence.fps}")
    print(f"Frames:   {len(sequence)} / {sequence.max_frames}")
    for i, frame in enumerate(sequence):
        filled = sum(1 for _, _, c in frame.grid.iter_cells() if c is not None)
        print(f"  [{i:2d}] {filled} pixels set")


def run_cli_new(args, config: AppConfig):
    out = Path(args.new)
    if out.suffix == "":
        out = out.with_suffix(PROJECT_EXTENSION)
    sequence = FrameSequence(name=args.name or out.stem, fps=args.fps or config.default_fps)
    try:
        save_project(sequence, out)
    except SpriteEditorError as e:
        print(f"Error: {e}")
        sys.exit(1)
    config.add_recent(out)
    config.save()
    print(f"Created project: {out}")


def run_cli_single(args, config: AppConfig):
    input_path = Path(args.input)
    sequence = _load_or_exit(input_path)
    if args.fps:
        sequence.fps = args.fps

    if args.info:
        _print_info(input_path, sequence)

    if not (args.gif or args.sheet or args.png):
        if not args.info:
            print("Error: Nothing to do. Use --gif, --sheet, --png or --info.")
            sys.exit(1)
        return

    snapshot = ExportSnapshot.capture(sequence)
    try:
        if args.gif:
            out = export_animation(snapshot, args.gif)
            print(f"Exported GIF: {out} ({snapshot.frame_count} frames @ {snapshot.fps} fps)")
        if args.sheet:
            out = export_sheet(snapshot, args.sheet)
            print(f"Exported sheet: {out}")
        if args.png:
            frame = sequence.frame_at(args.frame)
            if frame is None:
                print(f"Error: No frame {args.frame} (project has {len(sequence)})")
                sys.exit(1)
            out = export_frame_png(frame.grid, args.png, scale=args.scale)
            print(f"Exported frame {args.frame}: {out}")
    except SpriteEditorError as e:
        print(f"Error: {e}")
        sys.exit(1)

    config.add_recent(input_path)
    config.save()


def run_cli_batch(args):
    in_dir = Path(args.input_dir)
    out_dir = Path(args.out_dir) if args.out_dir else in_dir / "sprite_output"
    pattern = args.pattern or f"*{PROJECT_EXTENSION}"
    if not in_dir.exists():
        print(f"Error: Input directory not found: {in_dir}")
        sys.exit(1)
    out_dir.mkdir(parents=True, exist_ok=True)

    count = 0
    for path in sorted(in_dir.rglob(pattern)):
        if not path.is_file():
            continue
        try:
            sequence = load_project(path)
        except SpriteEditorError as e:
            print(f"[SKIP] {path.name}: {e}")
            continue
        if args.fps:
            sequence.fps = args.fps

        snapshot = ExportSnapshot.capture(sequence)
        try:
            export_animation(snapshot, out_dir / f"{path.stem}.gif")
            export_sheet(snapshot, out_dir / f"{path.stem}_sheet.png")
            print(f"[OK] {path.name} -> {path.stem}.gif, {path.stem}_sheet.png")
            count += 1
        except SpriteEditorError as e:
            print(f"[FAIL] {path.name}: {e}")
    print(f"Batch complete. {count} projects exported to {out_dir}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pixel sprite animation tools")
    parser.add_argument("--input", type=str, help="Project file to read")
    parser.add_argument("--gif", type=str, help="Write an animated GIF here")
    parser.add_argument("--sheet", type=str, help="Write a horizontal PNG sprite sheet here")
    parser.add_argument("--png", type=str, help="Write a single frame as PNG here")
    parser.add_argument("--frame", type=int, default=0, help="Frame index for --png")
    parser.add_argument("--scale", type=int, default=1, help="Integer upscale for --png")
    parser.add_argument("--fps", type=int, choices=range(1, 25), metavar="1-24",
                        help="Override playback rate")
    parser.add_argument("--info", action="store_true", help="Print a project summary")

    parser.add_argument("--new", type=str, help="Create a blank project file")
    parser.add_argument("--name", type=str, help="Project name for --new")

    # Batch mode
    parser.add_argument("--input-dir", type=str, help="Directory of projects to export")
    parser.add_argument("--pattern", type=str, help=f"Glob pattern for projects (default '*{PROJECT_EXTENSION}')")
    parser.add_argument("--out-dir", type=str, help="Output directory for batch export")

    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-dir", type=str, help="Also write a log file into this directory")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    LoggingConfig.setup_logging(Path(args.log_dir) if args.log_dir else None, verbose=args.verbose)
    if args.log_dir:
        print(f"Log file: {LoggingConfig.get_log_file_path()}")
    config = AppConfig()

    if args.new:
        run_cli_new(args, config)
        return
    if args.input_dir:
        run_cli_batch(args)
        return
    if not args.input:
        parser.error("--input is required (or use --new / --input-dir)")
    run_cli_single(args, config)


if __name__ == "__main__":
    main()
