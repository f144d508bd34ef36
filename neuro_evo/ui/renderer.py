# neuro_evo/ui/renderer.py
from __future__ import annotations
import math, pygame
from collections import Counter
from ..sim.config import TRAITS
from ..sim.models import MEAT
from ..sim.behaviors import SENSOR_DIRECTIONS

# ---------- Colors / Theme ----------
BG_COLOR       = (14,16,20)
GRID_COLOR     = (35,40,48)
PLANT_COLOR    = (60,200,90)
MEAT_COLOR     = (200,90,70)
HUNTED_COLOR   = (230,50,50)
OBSTACLE_COLOR = (70,72,80)
DEAD_COLOR     = (90,90,95)
ELITE_COLOR    = (250,210,80)
PANEL_BG       = (10,12,16)

# Top bar colors
TOPBAR_BG    = (24,26,32)
TOPBAR_LINE  = (54,58,66)

SPECIES_COLORS = {
    "predator": (220, 60, 60),
    "prey":     (60, 200, 120),
}

# Trait gradients (low -> high)
VISION_LOW, VISION_HIGH = (60, 60, 180), (240, 240, 100)
AGGR_LOW,   AGGR_HIGH   = (50, 200, 180), (240, 60, 60)

FOOD_SENSOR_COLOR     = (120, 230, 120)
CREATURE_SENSOR_COLOR = (240, 120, 120)

# ---------- Layout knobs ----------
TOPBAR_HEIGHT    = 100
HUD_PAD_X        = 12
HUD_PAD_Y        = 10

PANEL_PADDING    = 12
TITLE_GAP        = 6
SECTION_GAP      = 10
PLOT_SIDE_PAD    = 36
PLOT_TOP_PAD     = 8
PLOT_BOTTOM_PAD  = 36

def _clamp01(x: float) -> float:
    return 0.0 if x < 0 else (1.0 if x > 1.0 else x)

def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t

def _col_lerp(c0, c1, t):
    t = _clamp01(t)
    return (int(_lerp(c0[0], c1[0], t)),
            int(_lerp(c0[1], c1[1], t)),
            int(_lerp(c0[2], c1[2], t)))

def _trait_color(val, vmin, vmax, low_col, high_col):
    if vmax <= vmin:
        return low_col
    return _col_lerp(low_col, high_col, (val - vmin) / (vmax - vmin))

def _species_key(c) -> str:
    return "predator" if c.is_predator else "prey"

class Renderer:
    """
    Read-only view of a LiveSim. Nothing here mutates the simulation.
    """
    def __init__(self, screen, world_rect: pygame.Rect, panel_rect: pygame.Rect, font_name="Menlo"):
        self.screen = screen
        self.topbar_height = TOPBAR_HEIGHT
        self.font = pygame.font.SysFont(font_name, 14)
        self.bigfont = pygame.font.SysFont(font_name, 18, bold=True)

        self.panel_mode = "traits"  # "traits" | "history" | "log"
        self.show_sensors = False   # toggled by 'S'
        self.resize(world_rect, panel_rect)
        # world bounds, refreshed every draw_world
        self._bounds = (1.0, 1.0)

    def resize(self, world_rect: pygame.Rect, panel_rect: pygame.Rect):
        """Update layout rects after a window resize."""
        self.panel_rect_outer = panel_rect
        self.panel_content = self.panel_rect_outer.inflate(-2*PANEL_PADDING, -2*PANEL_PADDING)
        self.world_rect = pygame.Rect(
            world_rect.x,
            world_rect.y + self.topbar_height,
            world_rect.w,
            max(0, world_rect.h - self.topbar_height)
        )

    def cycle_panel(self):
        order = ("traits", "history", "log")
        self.panel_mode = order[(order.index(self.panel_mode) + 1) % len(order)]

    # ---------- coordinate helpers ----------
    def world_to_screen(self, x, y):
        rx, ry, rw, rh = self.world_rect
        ww, wh = self._bounds
        return int(rx + (x / ww) * rw), int(ry + (y / wh) * rh)

    def _scale(self) -> float:
        return self.world_rect.w / max(self._bounds[0], 1e-9)

    # ---------- top bar / grid ----------
    def _draw_topbar(self):
        scr = self.screen.get_rect()
        pygame.draw.rect(self.screen, TOPBAR_BG, pygame.Rect(0, 0, scr.w, self.topbar_height))
        pygame.draw.line(self.screen, TOPBAR_LINE, (0, self.topbar_height), (scr.w, self.topbar_height), 1)

    def _draw_grid(self, spacing=50.0):
        rx, ry, rw, rh = self.world_rect
        ww, wh = self._bounds
        for k in range(int(ww // spacing) + 1):
            sx, _ = self.world_to_screen(k * spacing, 0)
            pygame.draw.line(self.screen, GRID_COLOR, (sx, ry), (sx, ry+rh), 1)
        for k in range(int(wh // spacing) + 1):
            _, sy = self.world_to_screen(0, k * spacing)
            pygame.draw.line(self.screen, GRID_COLOR, (rx, sy), (rx+rw, sy), 1)
        pygame.draw.rect(self.screen, (70,75,85), self.world_rect, 2)

    # ---------- creature drawing ----------
    def _draw_creature(self, c):
        sx, sy = self.world_to_screen(c.x, c.y)
        r = max(3, int(c.radius * self._scale()))

        if not c.alive:
            pygame.draw.circle(self.screen, DEAD_COLOR, (sx, sy), r, 1)
            return

        body = SPECIES_COLORS[_species_key(c)]
        pygame.draw.circle(self.screen, body, (sx, sy), r)

        # inner dot: aggression for predators, vision for prey
        if c.is_predator:
            inner = _trait_color(c.traits.aggression, TRAITS.min_aggression, TRAITS.max_aggression, AGGR_LOW, AGGR_HIGH)
        else:
            inner = _trait_color(c.traits.vision, TRAITS.min_vision, TRAITS.max_vision, VISION_LOW, VISION_HIGH)
        pygame.draw.circle(self.screen, inner, (sx, sy), max(1, r // 2))

        if c.is_elite:
            pygame.draw.circle(self.screen, ELITE_COLOR, (sx, sy), r + 2, 1)

        # heading tick
        hx = int(sx + math.cos(c.heading) * (r + 4))
        hy = int(sy + math.sin(c.heading) * (r + 4))
        pygame.draw.line(self.screen, (230,230,235), (sx, sy), (hx, hy), 1)

        # energy bar
        frac = _clamp01(c.energy / max(c.max_energy, 1e-9))
        pygame.draw.rect(self.screen, (50,50,55), (sx - r, sy - r - 5, 2 * r, 3))
        pygame.draw.rect(self.screen, (220,220,90), (sx - r, sy - r - 5, int(2 * r * frac), 3))

        if self.show_sensors:
            self._draw_sensors(c, sx, sy)

    def _draw_sensors(self, c, sx, sy):
        """Sensor rays scaled by the last readings (food solid, creatures thin)."""
        reach = c.sensor_range * self._scale()
        for i, offset in enumerate(SENSOR_DIRECTIONS):
            ang = c.heading + offset
            for reading, col, width in ((c.food_sensors[i], FOOD_SENSOR_COLOR, 2),
                                        (c.creature_sensors[i], CREATURE_SENSOR_COLOR, 1)):
                if reading <= 0:
                    continue
                length = reach * reading
                end = (int(sx + math.cos(ang) * length), int(sy + math.sin(ang) * length))
                pygame.draw.line(self.screen, col, (sx, sy), end, width)

    # ---------- world ----------
    def draw_world(self, live):
        self._bounds = (live.world.width, live.world.height)
        self._draw_topbar()
        self._draw_grid()

        scale = self._scale()
        for ob in live.world.obstacles:
            pygame.draw.circle(self.screen, OBSTACLE_COLOR, self.world_to_screen(ob.x, ob.y),
                               max(2, int(ob.radius * scale)))
        for f in live.world.food:
            if f.consumed:
                continue
            if f.kind == MEAT:
                col = HUNTED_COLOR if f.hunted else MEAT_COLOR
            else:
                col = PLANT_COLOR
            pygame.draw.circle(self.screen, col, self.world_to_screen(f.x, f.y), max(2, int(f.radius * scale)))
        for c in live.population:
            self._draw_creature(c)

    # ---------- Trait panel ----------
    def _panel_chrome(self, title: str, subtitle: str) -> int:
        pr = self.panel_rect_outer
        pc = self.panel_content
        pygame.draw.rect(self.screen, PANEL_BG, pr)
        pygame.draw.rect(self.screen, (70,75,85), pr, 2)
        title_surf = self.bigfont.render(title, True, (220,220,230))
        subtitle_surf = self.font.render(subtitle, True, (160,165,175))
        self.screen.blit(title_surf, (pc.x, pc.y))
        sub_y = pc.y + title_surf.get_height() + TITLE_GAP
        self.screen.blit(subtitle_surf, (pc.x, sub_y))
        return sub_y + subtitle_surf.get_height() + SECTION_GAP

    def _plot_box(self, y0: int) -> pygame.Rect:
        pc = self.panel_content
        plot_left = pc.x + PLOT_SIDE_PAD
        plot_top = y0 + PLOT_TOP_PAD
        plot_right = pc.right - PLOT_SIDE_PAD
        max_plot_h = pc.bottom - plot_top - (PLOT_BOTTOM_PAD + SECTION_GAP + 100)
        plot_h = max(140, int(min(max_plot_h, pc.h * 0.55)))
        box = pygame.Rect(plot_left, plot_top, max(80, plot_right - plot_left), plot_h)
        pygame.draw.rect(self.screen, (25,30,36), box)
        return box

    def draw_trait_panel(self, live):
        y0 = self._panel_chrome("Traits (Size vs Aggression)", "Color = species | dot size ~ vision")
        box = self._plot_box(y0)
        pc = self.panel_content

        pop = [c for c in live.population if c.alive]
        if not pop:
            self.screen.blit(self.font.render("Everyone is dead", True, (220,80,80)), (box.x + 10, box.y + 10))
            return

        for c in pop:
            tx = (c.traits.size - TRAITS.min_size) / max(1e-9, TRAITS.max_size - TRAITS.min_size)
            ty = (c.traits.aggression - TRAITS.min_aggression) / max(1e-9, TRAITS.max_aggression - TRAITS.min_aggression)
            px = box.x + box.w * _clamp01(tx)
            py = box.bottom - box.h * _clamp01(ty)
            r = 2 + int(2.5 * c.traits.vision)
            pygame.draw.circle(self.screen, SPECIES_COLORS[_species_key(c)], (int(px), int(py)), r)

        self._draw_axes(box, (TRAITS.min_size, TRAITS.max_size), (TRAITS.min_aggression, TRAITS.max_aggression),
                        "Size", "Aggression")

        legend_top = box.bottom + PLOT_BOTTOM_PAD
        legend = pygame.Rect(pc.x, legend_top, pc.w, max(60, pc.bottom - legend_top))
        pygame.draw.rect(self.screen, (25,30,36), legend)
        counts = Counter(_species_key(c) for c in pop)
        x, y = legend.x + 10, legend.y + 8
        for key in ("predator", "prey"):
            pygame.draw.rect(self.screen, SPECIES_COLORS[key], (x, y+4, 16, 10))
            self.screen.blit(self.font.render(f"{key}: {counts.get(key, 0)}", True, (190,195,205)), (x+24, y))
            y += 18

    def _draw_axes(self, box: pygame.Rect, xr, yr, x_label: str, y_label: str):
        axis_color = (160,165,175)
        left, right = box.x, box.x + box.w
        bottom, top = box.y + box.h, box.y
        pygame.draw.line(self.screen, axis_color, (left, bottom), (right, bottom), 1)
        pygame.draw.line(self.screen, axis_color, (left, bottom), (left, top), 1)

        def ticks(vmin, vmax):
            mid = 0.5*(vmin+vmax)
            return [(vmin, f"{vmin:.1f}"), (mid, f"{mid:.1f}"), (vmax, f"{vmax:.1f}")]
        for xv, label in ticks(*xr):
            t = (xv - xr[0]) / max(1e-9, xr[1] - xr[0])
            xpix = int(left + t * box.w)
            pygame.draw.line(self.screen, axis_color, (xpix, bottom), (xpix, bottom-6), 1)
            txt = self.font.render(label, True, axis_color)
            self.screen.blit(txt, (xpix - txt.get_width()//2, bottom + 4))
        for yv, label in ticks(*yr):
            t = (yv - yr[0]) / max(1e-9, yr[1] - yr[0])
            ypix = int(bottom - t * box.h)
            pygame.draw.line(self.screen, axis_color, (left, ypix), (left+6, ypix), 1)
            txt = self.font.render(label, True, axis_color)
            self.screen.blit(txt, (left - txt.get_width() - 6, ypix - txt.get_height()//2))
        x_title = self.font.render(x_label, True, (220,220,230))
        self.screen.blit(x_title, (left + (box.w - x_title.get_width())//2, bottom + 22))
        y_surf = pygame.transform.rotate(self.font.render(y_label, True, (220,220,230)), 90)
        self.screen.blit(y_surf, (left - y_surf.get_width() - 12, top + (box.h - y_surf.get_height()) // 2))

    # ---------- History panel ----------
    def draw_history_panel(self, live):
        y0 = self._panel_chrome("Fitness per Generation", "yellow = max | white = avg")
        box = self._plot_box(y0)
        hist = live.history
        if len(hist) < 2:
            self.screen.blit(self.font.render("Waiting for generations...", True, (160,165,175)), (box.x + 10, box.y + 10))
            return
        top = max(h["max_fitness"] for h in hist) or 1.0
        for key, col in (("max_fitness", (240,220,90)), ("avg_fitness", (225,225,235))):
            pts = []
            for i, h in enumerate(hist):
                px = box.x + box.w * i / (len(hist) - 1)
                py = box.bottom - box.h * _clamp01(h[key] / top)
                pts.append((int(px), int(py)))
            pygame.draw.lines(self.screen, col, False, pts, 2)
        self._draw_axes(box, (hist[0]["generation"], hist[-1]["generation"]), (0.0, top), "Generation", "Fitness")

    # ---------- Event log panel ----------
    def draw_log_panel(self, live):
        y = self._panel_chrome("Evolution Log", "newest first")
        pc = self.panel_content
        lines = live.logger.formatted_entries(limit=30) if live.logger is not None else []
        for s in lines:
            if y > pc.bottom - 16:
                break
            self.screen.blit(self.font.render(s, True, (190,195,205)), (pc.x, y))
            y += 16

    def draw_panel(self, live):
        if self.panel_mode == "traits":
            self.draw_trait_panel(live)
        elif self.panel_mode == "history":
            self.draw_history_panel(live)
        else:
            self.draw_log_panel(live)

    def draw_hud(self, live, species_csv: bool):
        st = live.stats()
        lines = [
            f"Generation: {st['generation']}  Tick: {st['tick']}/{int(live.config.generation_length)}",
            f"Alive: {st['alive']} (predators {st['predators']}, prey {st['prey']})  Kills: {st['total_kills']}  "
            f"Avg fitness: {st['avg_fitness']:.1f}  Max: {st['max_fitness']:.1f}",
            f"Plants: {st['plant_quota']} (base {int(live.config.food_count)})  Speed: {live.speed}x  {'PAUSED' if live.paused else ''}",
            f"Panel: {self.panel_mode} (T)   Sensors: {'ON' if self.show_sensors else 'OFF'} (S)   Species CSV: {'ON' if species_csv else 'OFF'} (L)",
            "Controls:",
            " Space Pause   R Reset   +/- Food   [ ] Speed   S sensors   T panel   L species CSV   Esc quit",
        ]
        x, y = HUD_PAD_X, HUD_PAD_Y
        for i, s in enumerate(lines):
            col = (225,225,235) if i < 3 else (170,175,185)
            self.screen.blit(self.font.render(s, True, col), (x, y))
            y += 16
