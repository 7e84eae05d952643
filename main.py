#!/usr/bin/env python3
import argparse, logging, sys

import better_exceptions as b_e
import pygame
import pygame.locals as plocals

from chip8 import CHIP8, CHIP8Error
from framebuffer import WIDTH, HEIGHT

logger = logging.getLogger(__name__)

OFF_COLOR =     ( 20, 50, 80)
FG_COLOR =      (100,255,100)
PIX_SIZE = 12
IPF = 8 # Instructions per Frame
FPS = 60 # Frames per Second
KEYMAP = {
    plocals.K_1: 0x1, plocals.K_2: 0x2, plocals.K_3: 0x3, plocals.K_4: 0xC,
    plocals.K_q: 0x4, plocals.K_w: 0x5, plocals.K_e: 0x6, plocals.K_r: 0xD,
    plocals.K_a: 0x7, plocals.K_s: 0x8, plocals.K_d: 0x9, plocals.K_f: 0xE,
    plocals.K_z: 0xA, plocals.K_x: 0x0, plocals.K_c: 0xB, plocals.K_v: 0xF,
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="chippy",
                                     description="Run a CHIP-8 ROM")
    parser.add_argument("rom", help="ROM file to run")
    parser.add_argument("--ipf", type=int, default=IPF,
                        help="Instructions executed per frame")
    parser.add_argument("--fps", type=int, default=FPS,
                        help="Frames per second")
    parser.add_argument("--scale", type=int, default=PIX_SIZE,
                        help="Size of one CHIP-8 pixel on screen")
    parser.add_argument("--xor", action="store_true",
                        help="Draw sprites with the XOR rule instead of "
                             "only turning pixels on")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def loadfile(filename):
    with open(filename, "rb") as f:
        return f.read()


def draw(chip, win, scale):
    for x, y, on in chip.screen.pixels():
        pix_rect = (x*scale, y*scale, scale, scale)
        pygame.draw.rect(win, FG_COLOR if on else OFF_COLOR, pix_rect)
    pygame.display.update()


def translate_event(chip, event):
    """Feed one pygame event to the keypad. Returns False when the user
    asked to quit."""
    if event.type == plocals.QUIT:
        return False
    if event.type == plocals.KEYDOWN:
        if event.key == plocals.K_c and event.mod & plocals.KMOD_CTRL:
            return False
        if event.key in KEYMAP:
            chip.key_down(KEYMAP[event.key])
    elif event.type == plocals.KEYUP:
        if event.key in KEYMAP:
            chip.key_up(KEYMAP[event.key])
    return True


def run(argv=None):
    sys.excepthook = b_e.excepthook
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="[%(levelname)s] %(name)s: %(message)s")

    try:
        c = CHIP8(loadfile(args.rom), xor_sprites=args.xor)
    except OSError as e:
        sys.stderr.write(f"Cannot read {args.rom}: {e.strerror}\n")
        return 1
    except CHIP8Error as e:
        sys.stderr.write("CHIP-8 Error: " + str(e) + "\n")
        return 1
    logger.info("Loaded %s", args.rom)

    pygame.init()
    win = pygame.display.set_mode((WIDTH*args.scale, HEIGHT*args.scale))
    pygame.display.set_caption("Chippy")
    clock = pygame.time.Clock()
    draw(c, win, args.scale)

    status = 0
    try:
        running = True
        while running:
            c.run_frame(args.ipf)
            for event in pygame.event.get():
                if not translate_event(c, event):
                    running = False
            if c.drawFlag:
                c.drawFlag = False
                draw(c, win, args.scale)
            clock.tick(args.fps)
    except CHIP8Error as e:
        sys.stderr.write("CHIP-8 Error: " + str(e) + "\n")
        status = 1
    except KeyboardInterrupt:
        print("Goodbye!")
    pygame.quit()
    return status


if __name__ == "__main__":
    sys.exit(run())
