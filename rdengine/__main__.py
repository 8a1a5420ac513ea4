#!/usr/bin/env python3
"""
Reaction–diffusion pattern engine, command line.

  python -m rdengine live   --resolution 256 --model gray-scott --preset Coral
  python -m rdengine render --resolution 256 --preset Mitosis --ticks 600 --scale 2 --out mitosis.png
  python -m rdengine presets --model brusselator
"""
import argparse
import logging
import sys

from .config import EngineConfig, ColorConfig, COLOR_SCHEMES, BACKENDS
from .engine import Engine
from .errors import RDEngineError
from .kinetics import Model, get_presets
from .params import JourneyType
from . import colorize


def build_parser():
    ap = argparse.ArgumentParser(prog="rdengine", description="Reaction–diffusion pattern engine")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="-v info, -vv debug")
    sub = ap.add_subparsers(dest="command", required=True)

    def common(p):
        p.add_argument("--resolution", type=int, default=256, help="grid size (R x R)")
        p.add_argument("--model", type=str, default=Model.GRAY_SCOTT.value, choices=[m.value for m in Model])
        p.add_argument("--backend", type=str, default="numpy", choices=BACKENDS)
        p.add_argument("--speed", type=float, default=1.0, help="sub-steps per tick = ceil(speed*8)")
        p.add_argument("--preset", type=str, default=None, help="preset name or index")
        p.add_argument("--feed", type=float, default=None)
        p.add_argument("--kill", type=float, default=None)
        p.add_argument("--scheme", type=str, default="classic", choices=sorted(COLOR_SCHEMES))
        p.add_argument("--contrast", type=float, default=1.0)
        p.add_argument("--brightness", type=float, default=1.0)
        p.add_argument("--journey", type=str, default="none", choices=[j.value for j in JourneyType])
        p.add_argument("--journey-speed", type=float, default=1.0)
        p.add_argument("--seed", type=int, default=None, help="rng seed for the initial field and journeys")

    live = sub.add_parser("live", help="interactive matplotlib window")
    common(live)
    live.add_argument("--fps", type=float, default=30.0)
    live.add_argument("--brush", type=float, default=30.0, help="brush radius (cells)")

    render = sub.add_parser("render", help="run headless and write a PNG")
    common(render)
    render.add_argument("--ticks", type=int, default=500)
    render.add_argument("--tick-ms", type=float, default=1000.0 / 60.0, help="simulated frame time")
    render.add_argument("--scale", type=int, default=1, help="export at a multiple of the grid size")
    render.add_argument("--out", type=str, default="pattern.png")
    render.add_argument("--gif", type=str, default=None, help="also write an animated GIF")
    render.add_argument("--gif-every", type=int, default=10)

    presets = sub.add_parser("presets", help="list presets for a model")
    presets.add_argument("--model", type=str, default=Model.GRAY_SCOTT.value, choices=[m.value for m in Model])
    return ap


def make_engine(args):
    engine = Engine(EngineConfig(resolution=args.resolution, model=Model.parse(args.model),
                                 backend=args.backend, sim_speed=args.speed, rng_seed=args.seed))
    if args.preset is not None:
        key = int(args.preset) if args.preset.isdigit() else args.preset
        engine.apply_preset(key, duration_ms=0)
    if args.feed is not None or args.kill is not None:
        p = engine.get_parameters()
        engine.set_parameters(p.feed if args.feed is None else args.feed,
                              p.kill if args.kill is None else args.kill)
    if args.journey != JourneyType.NONE.value:
        engine.set_journey(args.journey, args.journey_speed)
    return engine


def make_color(args, scale=1):
    return ColorConfig.from_scheme(args.scheme, contrast=args.contrast, brightness=args.brightness, scale=scale)


def cmd_render(args):
    engine = make_engine(args)
    color = make_color(args)
    frames = []
    for i in range(args.ticks):
        engine.tick(args.tick_ms)
        if args.gif and i % max(1, args.gif_every) == 0:
            frames.append(engine.render_frame(color))
    out = colorize.save_png(args.out, engine.render_frame(color, scale=args.scale))
    p = engine.get_parameters()
    print(f"Saved {out}  ({engine.model.value}, F={p.feed:.4f}, k={p.kill:.4f}, {args.ticks} ticks)")
    if args.gif and frames:
        print("Saved", colorize.save_gif(frames, args.gif))
    return 0


def cmd_live(args):
    from . import viewer
    engine = make_engine(args)
    print("Running… (Space: pause, T: tool, J: journey, 1-9: presets, S: save, Q: quit)")
    viewer.run(engine, make_color(args), fps=args.fps, brush=args.brush)
    return 0


def cmd_presets(args):
    for i, p in enumerate(get_presets(args.model)):
        print(f"{i:2d}  {p.name:<12s} F={p.f:.4f}  k={p.k:.4f}")
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    level = logging.WARNING if args.verbose == 0 else logging.INFO if args.verbose == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    handlers = {"render": cmd_render, "live": cmd_live, "presets": cmd_presets}
    try:
        return handlers[args.command](args)
    except (RDEngineError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
