# dartline/game/render.py
from __future__ import annotations
from typing import Optional
import pygame

from .config import (
    COLOR_BG, COLOR_FG, COLOR_PLAYER, COLOR_OBSTACLE, COLOR_MESSAGE_BG,
)
from .session import Hud
from .simulation import Snapshot


def draw_particles(screen: pygame.Surface, snap: Snapshot):
    layer = pygame.Surface((snap.width, snap.height), pygame.SRCALPHA)
    r, g, b = COLOR_PLAYER
    for p in snap.particles:
        alpha = max(0, min(255, int(p.opacity * 255)))
        pygame.draw.circle(layer, (r, g, b, alpha), (int(p.x), int(p.y)), max(1, int(round(p.size))))
    screen.blit(layer, (0, 0))


def draw_player(screen: pygame.Surface, snap: Snapshot):
    pl = snap.player
    # arrow pointing right: tip at x+width, base on the fixed x
    points = [
        (pl.x + pl.width, pl.y),
        (pl.x, pl.y - pl.height / 2),
        (pl.x, pl.y + pl.height / 2),
    ]
    pygame.draw.polygon(screen, COLOR_PLAYER, points)


def draw_obstacles(screen: pygame.Surface, snap: Snapshot):
    for ob in snap.obstacles:
        pygame.draw.rect(screen, COLOR_OBSTACLE, ob.rect)


def draw_world(screen: pygame.Surface, snap: Snapshot):
    screen.fill(COLOR_BG)
    draw_particles(screen, snap)
    draw_player(screen, snap)
    draw_obstacles(screen, snap)


def draw_hud(screen: pygame.Surface, hud: Hud, font: pygame.font.Font):
    screen.blit(font.render(hud.score_text, True, COLOR_FG), (12, 10))
    speed = font.render(hud.speed_text, True, COLOR_FG)
    screen.blit(speed, (screen.get_width() - speed.get_width() - 12, 10))

    if hud.message:
        lines = [font.render(line, True, COLOR_FG) for line in hud.message.split("\n")]
        w = max(s.get_width() for s in lines) + 40
        h = sum(s.get_height() + 6 for s in lines) + 30
        box = pygame.Rect((screen.get_width() - w) // 2, (screen.get_height() - h) // 2, w, h)
        pygame.draw.rect(screen, COLOR_MESSAGE_BG, box, border_radius=10)
        pygame.draw.rect(screen, COLOR_OBSTACLE, box, width=2, border_radius=10)
        y = box.top + 15
        for s in lines:
            screen.blit(s, (box.centerx - s.get_width() // 2, y))
            y += s.get_height() + 6


def draw_debug(screen: pygame.Surface, snap: Snapshot, font: pygame.font.Font):
    msg = (f"tick={snap.tick}  speed={snap.game_speed:.2f}  "
           f"obstacles={len(snap.obstacles)}  particles={len(snap.particles)}  "
           f"y={snap.player.y:.1f} vy={snap.player.vy:+.1f}")
    screen.blit(font.render(msg, True, (160, 180, 210)), (12, screen.get_height() - 26))


def draw_frame(screen: pygame.Surface, snap: Snapshot, hud: Hud,
               font: Optional[pygame.font.Font] = None, debug: bool = False):
    """Paint one frame. Text is skipped when no font is given (headless use)."""
    draw_world(screen, snap)
    if font is not None:
        draw_hud(screen, hud, font)
        if debug:
            draw_debug(screen, snap, font)
