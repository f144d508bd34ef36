# neuro_evo/ui/app.py
from __future__ import annotations
import random
from dataclasses import replace
import pygame
from .renderer import Renderer, BG_COLOR
from .csv_writer import GenerationCsvLogger
from ..sim.live import LiveSim
from ..sim.evolution_log import EvolutionLog
from ..sim.config import WORLD, SIM

def _new_live(seed: int, food_count: int | None = None) -> LiveSim:
    cfg = replace(WORLD)
    if food_count is not None:
        cfg.food_count = food_count
    live = LiveSim(cfg, seed=seed, logger=EvolutionLog())
    live.set_speed(SIM.speed)
    return live

def run_ui(seed: int = SIM.seed, food_count: int | None = None):
    pygame.init()
    pygame.display.set_caption("Neuro-Evolution: Predators & Prey")
    W, H = 1280, 760
    screen = pygame.display.set_mode((W, H), pygame.RESIZABLE)
    clock = pygame.time.Clock()

    def layout():
        w, h = screen.get_size()
        panel_w = int(w * 0.30)
        world_rect = pygame.Rect(10, 10, w - panel_w - 30, h - 20)
        panel_rect = pygame.Rect(w - panel_w - 10, 120, panel_w, h - 140)
        return world_rect, panel_rect

    world_rect, panel_rect = layout()
    renderer = Renderer(screen, world_rect, panel_rect)

    live = _new_live(seed, food_count)
    csv_logger = GenerationCsvLogger(overall_path="runs/ui_generations.csv",
                                     species_path="runs/ui_species_generations.csv",
                                     enable_species=True)

    running = True
    while running:
        clock.tick(60)

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode(e.size, pygame.RESIZABLE)
                renderer.screen = screen
                world_rect, panel_rect = layout()
                renderer.resize(world_rect, panel_rect)
                # arena follows the drawable area, one world unit per pixel
                live.resize(renderer.world_rect.w, renderer.world_rect.h)
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE: running = False
                elif e.key == pygame.K_SPACE: live.toggle_pause()
                elif e.key == pygame.K_r:
                    live = _new_live(random.randint(0, 1_000_000), int(live.config.food_count))
                    print(f"[ui] reset (session {csv_logger.session_id})")
                elif e.key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
                    live.config.food_count = min(500, int(live.config.food_count) + 5)
                elif e.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    live.config.food_count = max(0, int(live.config.food_count) - 5)
                elif e.key == pygame.K_LEFTBRACKET:
                    live.set_speed(live.speed - 1)
                elif e.key == pygame.K_RIGHTBRACKET:
                    live.set_speed(live.speed + 1)
                elif e.key == pygame.K_l:  # 'L' toggles species CSV
                    csv_logger.enable_species = not csv_logger.enable_species
                elif e.key == pygame.K_s:
                    renderer.show_sensors = not renderer.show_sensors
                elif e.key == pygame.K_t:
                    renderer.cycle_panel()

        if live.update():
            csv_logger.append_generation(
                generation=live.generation - 1,
                pop=live.last_population,
                food_count=int(live.config.food_count),
                generation_length=int(live.config.generation_length),
            )

        screen.fill(BG_COLOR)
        renderer.draw_world(live)
        renderer.draw_hud(live, csv_logger.enable_species)
        renderer.draw_panel(live)
        pygame.display.flip()

    pygame.quit()
