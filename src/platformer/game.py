# src/platformer/game.py
import sys, argparse
import pygame
from pygame import K_ESCAPE, K_r, K_e, K_LEFTBRACKET, K_RIGHTBRACKET
from .config import WIDTH, HEIGHT, FPS, COLOR_FG, TOTAL_LEVELS
from .entities import Difficulty
from .physics import PlayerDied, CheckpointActivated, LevelCompleted, LevelFailed
from .player import Intent
from .progress import FileProgressStore, MemoryProgressStore
from .render import draw_world
from .session import Session, SelectResult

LEFT_KEYS = (pygame.K_LEFT, pygame.K_a)
RIGHT_KEYS = (pygame.K_RIGHT, pygame.K_d)
JUMP_KEYS = (pygame.K_UP, pygame.K_w, pygame.K_SPACE)


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--level", type=int, default=0,
                   help="1-based level to start on (must already be unlocked).")
    p.add_argument("--difficulty", choices=[d.value for d in Difficulty], default=None,
                   help="Override the stored difficulty.")
    p.add_argument("--progress-file", type=str, default=None,
                   help="key=value file holding difficulty and unlocked levels. Omit to keep progress in memory.")
    p.add_argument("--fps", type=int, default=FPS)
    p.add_argument("--verbose", action="store_true", help="Print gameplay events.")
    return p.parse_args()


def read_intent() -> Intent:
    keys = pygame.key.get_pressed()
    return Intent(
        left=any(keys[k] for k in LEFT_KEYS),
        right=any(keys[k] for k in RIGHT_KEYS),
        jump=any(keys[k] for k in JUMP_KEYS),
    )


def describe(event, session: Session) -> str:
    if isinstance(event, PlayerDied):
        return f"PlayerDied cause={event.cause} deaths={session.deaths}"
    if isinstance(event, CheckpointActivated):
        return f"CheckpointActivated at=({event.position[0]:.0f},{event.position[1]:.0f})"
    if isinstance(event, LevelCompleted):
        return f"LevelCompleted next={event.next_index + 1} unlocked={session.unlocked_levels}"
    if isinstance(event, LevelFailed):
        return "LevelFailed (fake door)"
    return type(event).__name__


def run():
    args = parse_args()

    store = FileProgressStore(args.progress_file) if args.progress_file else MemoryProgressStore()
    session = Session(store)
    if args.difficulty is not None:
        session.set_difficulty(args.difficulty)
    if args.level > 0 and session.select_level(args.level - 1) is SelectResult.LOCKED:
        print(f"Level {args.level} is locked (unlocked: {session.unlocked_levels})", file=sys.stderr)

    pygame.init()
    pygame.display.set_caption("Neon Platformer")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("jetbrainsmono", 18)

    btn_w, btn_h = 200, 70
    restart_rect = pygame.Rect((WIDTH - btn_w)//2, (HEIGHT - btn_h)//2, btn_w, btn_h)

    while True:
        clock.tick(args.fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if event.key == K_r:
                    session.restart()
                if event.key == K_e:
                    other = Difficulty.EASY if session.difficulty is Difficulty.HARD else Difficulty.HARD
                    session.set_difficulty(other)
                if event.key in (K_LEFTBRACKET, K_RIGHTBRACKET):
                    delta = -1 if event.key == K_LEFTBRACKET else 1
                    target = session.level_index + delta
                    if session.select_level(target) is SelectResult.LOCKED and args.verbose:
                        print(f"[select] level {target % TOTAL_LEVELS + 1} is locked")
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and not session.player.alive:
                if restart_rect.collidepoint(event.pos):
                    session.restart()

        result = session.step(read_intent())
        if args.verbose:
            for ev in result.events:
                print(f"[event] {describe(ev, session)}")

        # --- Render ---
        draw_world(screen, session.level, session.player)

        hud = (f"Level: {session.level_index + 1} / {TOTAL_LEVELS}   Deaths: {session.deaths}   "
               f"{session.difficulty.value.upper()}   Unlocked: {session.unlocked_levels}")
        screen.blit(font.render(hud, True, COLOR_FG), (12, 10))
        screen.blit(font.render("ARROWS/WASD move | SPACE jump | R restart | E difficulty | [ ] level | ESC quit",
                                True, (160, 180, 210)), (12, 32))

        if not session.player.alive:
            pygame.draw.rect(screen, (40, 60, 90), restart_rect, border_radius=10)
            pygame.draw.rect(screen, (90, 130, 180), restart_rect, width=2, border_radius=10)

            msg = font.render("You Died!", True, (255, 120, 140))
            screen.blit(msg, (restart_rect.centerx - msg.get_width()//2,
                              restart_rect.centery - msg.get_height() - 5))
            btn_txt = font.render("Restart (R)", True, (220, 235, 255))
            screen.blit(btn_txt, (restart_rect.centerx - btn_txt.get_width()//2,
                                  restart_rect.centery + 5))

        pygame.display.flip()


if __name__ == "__main__":
    run()
