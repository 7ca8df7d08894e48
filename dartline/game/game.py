# dartline/game/game.py
import sys, argparse
import pygame
from pygame import K_ESCAPE
from .config import WIDTH, HEIGHT, FPS, DEBUG_OVERLAY
from .render import draw_frame
from .session import GameSession, Phase


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Seed for obstacle and particle randomness. Omit for a random run.")
    p.add_argument("--debug", action="store_true",
                   help="Show tick, speed and entity counts in the corner.")
    return p.parse_args()


def run():
    args = parse_args()
    debug = DEBUG_OVERLAY or args.debug

    pygame.init()
    pygame.display.set_caption("Dartline")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("jetbrainsmono", 18)

    session = GameSession(seed=args.seed)

    def on_hud(hud):
        if session.phase is Phase.GAME_OVER:
            print(f"[GAME OVER] game={session.games_played} score={session.sim.score} "
                  f"speed_lvl={session.sim.speed_level} ticks={session.sim.tick_count}")

    session.add_listener(on_hud)

    while True:
        clock.tick(FPS)

        # key events land between ticks, never inside one
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                session.key_down(event.key)
            if event.type == pygame.KEYUP:
                session.key_up(event.key)

        session.driver.pump()

        draw_frame(screen, session.snapshot(), session.hud, font, debug=debug)
        if session.phase is Phase.IDLE:
            hint = font.render("Press any key to start", True, (160, 180, 210))
            screen.blit(hint, ((WIDTH - hint.get_width()) // 2, HEIGHT // 2 + 30))
        pygame.display.flip()


if __name__ == "__main__":
    run()
