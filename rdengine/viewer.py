"""
viewer.py — live matplotlib front end for the engine.

Controls:
  • Click/drag: apply the current tool (brush / eraser / stamp)
  • Scroll: brush size
  • Sliders: F, k, Da, Db, speed
  • SPACE: pause/resume   N: single step   R: reseed   S: save PNG   Q/Esc: quit
  • T: cycle tool   X: toggle brush chemical (A/B)   C: cycle color scheme
  • J: cycle journey (none → linear → circular → figure8 → random)
  • 1..9, 0: ease to preset
"""
import time
from datetime import datetime

import matplotlib.pyplot as plt
from matplotlib.widgets import Slider

from .colorize import save_png
from .config import ColorConfig, COLOR_SCHEMES, F_RANGE, K_RANGE
from .forcing import Tool, Channel
from .params import JourneyType

SCHEMES = list(COLOR_SCHEMES)
TOOLS = list(Tool)
JOURNEYS = list(JourneyType)


def run(engine, color: ColorConfig = None, fps=30.0, brush=30.0, strength=1.0):
    color = color or ColorConfig()
    n = engine.grid.resolution
    ui = dict(tool=Tool.BRUSH, channel=Channel.B, radius=float(brush), strength=float(strength),
              scheme=None, mouse_down=False, pos=None)

    fig = plt.figure(figsize=(7.6, 8.6))
    ax_img = plt.axes([0.05, 0.30, 0.90, 0.66])
    im = ax_img.imshow(engine.render_frame(color), interpolation="nearest")
    ax_img.set_xticks([]); ax_img.set_yticks([])

    p = engine.get_parameters()
    s_F  = Slider(plt.axes([0.15, 0.22, 0.70, 0.025]), "F (feed)", *F_RANGE, valinit=p.feed, valstep=0.0001)
    s_k  = Slider(plt.axes([0.15, 0.18, 0.70, 0.025]), "k (kill)", *K_RANGE, valinit=p.kill, valstep=0.0001)
    s_Da = Slider(plt.axes([0.15, 0.14, 0.70, 0.025]), "Da", 0.0, 1.25, valinit=p.diffusion_a, valstep=0.005)
    s_Db = Slider(plt.axes([0.15, 0.10, 0.70, 0.025]), "Db", 0.0, 1.25, valinit=p.diffusion_b, valstep=0.005)
    s_sp = Slider(plt.axes([0.15, 0.06, 0.70, 0.025]), "speed", 0.0, 4.0, valinit=engine.sim_speed, valstep=0.125)

    syncing = [False]

    def on_slider(_):
        if syncing[0]:
            return
        engine.set_parameters(s_F.val, s_k.val, s_Da.val, s_Db.val)
    for s in (s_F, s_k, s_Da, s_Db):
        s.on_changed(on_slider)
    s_sp.on_changed(lambda v: engine.set_speed(v))

    def sync_sliders():
        # journeys and easing move F/k underneath the UI
        q = engine.get_parameters()
        syncing[0] = True
        try:
            if abs(s_F.val - q.feed) > 1e-9:
                s_F.set_val(q.feed)
            if abs(s_k.val - q.kill) > 1e-9:
                s_k.set_val(q.kill)
        finally:
            syncing[0] = False

    def to_grid(event):
        if event.inaxes != ax_img or event.xdata is None or event.ydata is None:
            return None
        return event.xdata, event.ydata

    def paint():
        if ui["pos"] is None:
            return
        x, y = ui["pos"]
        engine.submit_force(x, y, ui["radius"], ui["strength"], ui["channel"], tool=ui["tool"])

    def on_press(event):
        nonlocal color
        if getattr(event, "button", None) == 1:
            pos = to_grid(event)
            if pos is not None:
                ui["mouse_down"] = True
                ui["pos"] = pos
                paint()
        key = getattr(event, "key", None)
        if key == " ":
            print("Running" if engine.toggle_pause() else "Paused")
        elif key in ("n", "N"):
            engine.step()
        elif key in ("r", "R"):
            engine.seed()
        elif key in ("s", "S"):
            path = f"pattern_{engine.model.value}_{datetime.now().strftime('%H%M%S')}.png"
            save_png(path, engine.render_frame(color))
            print("Saved", path)
        elif key in ("q", "escape"):
            plt.close("all")
        elif key in ("t", "T"):
            ui["tool"] = TOOLS[(TOOLS.index(ui["tool"]) + 1) % len(TOOLS)]
            print("Tool:", ui["tool"].value)
        elif key in ("x", "X"):
            ui["channel"] = Channel.A if ui["channel"] is Channel.B else Channel.B
            print("Chemical:", ui["channel"].name)
        elif key in ("c", "C"):
            i = (SCHEMES.index(ui["scheme"]) + 1) % len(SCHEMES) if ui["scheme"] in SCHEMES else 0
            ui["scheme"] = SCHEMES[i]
            color = ColorConfig.from_scheme(SCHEMES[i], contrast=color.contrast, brightness=color.brightness)
            print("Colors:", SCHEMES[i])
        elif key in ("j", "J"):
            cur = engine.journey.type
            nxt = JOURNEYS[(JOURNEYS.index(cur) + 1) % len(JOURNEYS)]
            if nxt is JourneyType.NONE:
                engine.stop_journey()
            else:
                engine.set_journey(nxt)
            print("Journey:", nxt.value)
        elif key is not None and key.isdigit():
            idx = (int(key) - 1) % 10
            presets = engine.get_presets()
            if idx < len(presets):
                print("Preset:", engine.apply_preset(idx).name)

    def on_release(event):
        ui["mouse_down"] = False

    def on_motion(event):
        if ui["mouse_down"]:
            pos = to_grid(event)
            if pos is not None:
                ui["pos"] = pos
                paint()

    def on_scroll(event):
        ui["radius"] = max(5.0, min(100.0, ui["radius"] + (2.0 if event.button == "up" else -2.0)))

    fig.canvas.mpl_connect("key_press_event", on_press)
    fig.canvas.mpl_connect("button_press_event", on_press)
    fig.canvas.mpl_connect("button_release_event", on_release)
    fig.canvas.mpl_connect("motion_notify_event", on_motion)
    fig.canvas.mpl_connect("scroll_event", on_scroll)

    target_dt = 1.0 / fps
    last = time.perf_counter()
    while plt.fignum_exists(fig.number):
        now = time.perf_counter()
        if now - last < target_dt:
            plt.pause(0.001)
            continue
        dt_ms = (now - last) * 1000.0
        last = now

        engine.tick(dt_ms)
        sync_sliders()
        q = engine.get_parameters()
        ax_img.set_title(f"{engine.model.value} {n}x{n} | F={q.feed:.4f} k={q.kill:.4f} | "
                         f"{ui['tool'].value}:{ui['channel'].name} r={ui['radius']:.0f} | "
                         f"journey: {engine.journey.type.value}"
                         f"{'' if engine.running else ' | paused'}", fontsize=9)
        im.set_data(engine.render_frame(color))
        fig.canvas.draw_idle()
        plt.pause(0.001)
