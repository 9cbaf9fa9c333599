import argparse
import logging
import math
import random
import sys

import pygame

from frontend import click_to_command
from game import Command, DialogChoice, Game2048, GamePhase
from geometry import BOARD_COLS, BOARD_PIXELS, BOARD_ROWS, TILE_SIZE, pixel_pos


# the engine counts in ticks, 20 of them per second like the original map display
TICKS_PER_SECOND = 20
# window pixels per engine pixel
SCALE = 4
# gap between the window edge and the board area, in engine pixels
MINIMUM_BORDER = 1

COLORS = {
    'background': (223, 223, 223),
    'board': (158, 148, 137),
    'empty_cell': (205, 193, 181),
    'title': (229, 198, 67),
    'title_shadow': (160, 139, 47),
    'dialog': (114, 121, 175),
    'text_dark': (118, 111, 100),
    'text_light': (251, 247, 241),
    'button': (143, 149, 196),
}

# tile backgrounds for 2, 4, 8, ... 131072
TILE_COLORS = [
    (236, 228, 219), (235, 227, 207), (234, 180, 132), (233, 155, 115),
    (231, 132, 111), (230, 107, 82), (234, 214, 153), (233, 213, 142),
    (240, 213, 113), (232, 207, 122), (229, 198, 67), (244, 102, 116),
    (241, 75, 97), (235, 66, 63), (113, 179, 218), (94, 160, 230),
    (2, 125, 192),
]

KEY_COMMANDS = {
    pygame.K_UP: Command.UP,
    pygame.K_w: Command.UP,
    pygame.K_DOWN: Command.DOWN,
    pygame.K_s: Command.DOWN,
    pygame.K_LEFT: Command.LEFT,
    pygame.K_a: Command.LEFT,
    pygame.K_RIGHT: Command.RIGHT,
    pygame.K_d: Command.RIGHT,
    pygame.K_RETURN: Command.START,
    pygame.K_SPACE: Command.START,
    pygame.K_BACKSPACE: Command.BACK,
    pygame.K_c: Command.KEEP_GOING,
}

logger = logging.getLogger(__name__)


class GameGUI:
    def __init__(self, game=None, scale=SCALE, tps=TICKS_PER_SECOND):
        """initialize game GUI"""
        self.game = game or Game2048()
        self.scale = scale
        self.tps = tps

        # window size
        self.window_size = BOARD_PIXELS * scale

        # create window
        self.screen = pygame.display.set_mode((self.window_size, self.window_size))
        pygame.display.set_caption("2048 Game")

        # fonts
        self.font_large = pygame.font.Font(None, 12 * scale)
        self.font_medium = pygame.font.Font(None, 8 * scale)
        self.font_small = pygame.font.Font(None, 5 * scale)

        # game clock
        self.clock = pygame.time.Clock()

    def get_tile_color(self, value):
        """get background color for a tile value"""
        color_index = int(round(math.log2(value))) - 1
        return TILE_COLORS[min(max(color_index, 0), len(TILE_COLORS) - 1)]

    def get_text_color(self, value):
        """get text color for a tile value"""
        if value <= 4:
            return COLORS['text_dark']
        else:
            return COLORS['text_light']

    def board_rect(self):
        border = MINIMUM_BORDER * self.scale
        return pygame.Rect(border, border, self.window_size - 2 * border, self.window_size - 2 * border)

    def to_screen(self, x, y):
        """engine pixel position -> window position"""
        return x * self.scale, y * self.scale

    def render(self, game):
        """draw the whole frame for the current phase"""
        self.screen.fill(COLORS['background'])

        if game.phase is GamePhase.TITLE:
            self.draw_title()
            return

        self.draw_board()
        # absorbed tiles slide underneath their merge partner
        for tile in game.tiles_in_limbo:
            self.draw_tile(tile)
        for tile in game.tiles or []:
            if tile is not None:
                self.draw_tile(tile)

        self.draw_score(game.score)
        if game.dialog is not None:
            self.draw_dialog(game.dialog)

    def draw_title(self):
        center = self.window_size // 2
        offset = self.scale
        for text, font, y in (("2048", self.font_large, center - 4 * self.scale),
                              ("TAP TO START", self.font_small, center + 8 * self.scale)):
            shadow = font.render(text, True, COLORS['title_shadow'])
            self.screen.blit(shadow, shadow.get_rect(center=(center + offset, y + offset)))
            surface = font.render(text, True, COLORS['title'])
            self.screen.blit(surface, surface.get_rect(center=(center, y)))

    def draw_board(self):
        """draw the board background and empty cells"""
        pygame.draw.rect(self.screen, COLORS['board'], self.board_rect())

        size = TILE_SIZE * self.scale
        for row in range(BOARD_ROWS):
            for col in range(BOARD_COLS):
                x, y = self.to_screen(pixel_pos(col), pixel_pos(row))
                cell_rect = pygame.Rect(x, y, size, size)
                pygame.draw.rect(self.screen, COLORS['empty_cell'], cell_rect, border_radius=3 * self.scale)

    def draw_tile(self, tile):
        """draw a tile at its current animated position"""
        x, y = self.to_screen(tile.x, tile.y)
        size = TILE_SIZE * self.scale
        tile_rect = pygame.Rect(x, y, size, size)
        pygame.draw.rect(self.screen, self.get_tile_color(tile.value), tile_rect, border_radius=3 * self.scale)

        # choose font size based on number of digits
        font = self.font_medium if tile.value < 1000 else self.font_small
        text_surface = font.render(str(tile.value), True, self.get_text_color(tile.value))
        self.screen.blit(text_surface, text_surface.get_rect(center=tile_rect.center))

    def draw_score(self, score):
        score_text = self.font_small.render(f"Score: {score}", True, COLORS['text_light'])
        self.screen.blit(score_text, (2 * self.scale, 1 * self.scale))

    def dialog_rect(self):
        return pygame.Rect(*self.to_screen(15, 22), 95 * self.scale, 58 * self.scale)

    def dialog_buttons(self, dialog):
        """(command, label, rect) for each button the dialog offers"""
        left, top = self.dialog_rect().topleft
        if dialog.win:
            layout = [
                (DialogChoice.KEEP_GOING, Command.KEEP_GOING, "Keep going", (10, 33, 35, 20)),
                (DialogChoice.BACK_TO_TITLE, Command.BACK, "Back", (45, 33, 35, 20)),
            ]
        else:
            layout = [(DialogChoice.BACK_TO_TITLE, Command.BACK, "Back to title", (10, 40, 70, 13))]

        buttons = []
        for choice, command, label, (x, y, w, h) in layout:
            if choice in dialog.choices:
                rect = pygame.Rect(left + x * self.scale, top + y * self.scale, w * self.scale, h * self.scale)
                buttons.append((command, label, rect))
        return buttons

    def draw_dialog(self, dialog):
        """draw the win/lose window with the final score and its buttons"""
        rect = self.dialog_rect()
        pygame.draw.rect(self.screen, COLORS['dialog'], rect, border_radius=2 * self.scale)

        y = rect.top + 5 * self.scale
        for line in (dialog.title, f"Score: {dialog.score}"):
            surface = self.font_medium.render(line, True, COLORS['text_light'])
            self.screen.blit(surface, (rect.left + 5 * self.scale, y))
            y += surface.get_height() + 2 * self.scale

        for _, label, button_rect in self.dialog_buttons(dialog):
            pygame.draw.rect(self.screen, COLORS['button'], button_rect, border_radius=self.scale)
            surface = self.font_small.render(label, True, COLORS['text_light'])
            self.screen.blit(surface, surface.get_rect(center=button_rect.center))

    def translate_input(self, raw_event):
        """pygame event -> Command, None for anything the game ignores"""
        if raw_event.type == pygame.KEYDOWN:
            return KEY_COMMANDS.get(raw_event.key)

        if raw_event.type == pygame.MOUSEBUTTONDOWN and raw_event.button == 1:
            if self.game.phase is GamePhase.TITLE:
                return Command.START
            if self.game.phase is GamePhase.GAME:
                rect = self.board_rect()
                x, y = raw_event.pos
                return click_to_command(x - rect.left, y - rect.top, rect.width, rect.height)
            if self.game.dialog is not None:
                for command, _, button_rect in self.dialog_buttons(self.game.dialog):
                    if button_rect.collidepoint(raw_event.pos):
                        return command
        return None

    def run(self):
        """main loop"""
        print("2048 Game Started!")
        print("Use arrow keys or click the board edges to move tiles")
        print("Press ESC to quit")
        print()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                else:
                    command = self.translate_input(event)
                    if command is not None:
                        self.game.apply_command(command)

            self.game.tick()
            self.render(self.game)

            # update display
            pygame.display.flip()

            # one engine tick per frame
            self.clock.tick(self.tps)

        pygame.quit()


def main():
    parser = argparse.ArgumentParser(description="2048 - tick driven sliding tile puzzle")
    parser.add_argument('--scale', type=int, default=SCALE, help='Window pixels per board pixel')
    parser.add_argument('--tps', type=int, default=TICKS_PER_SECOND, help='Engine ticks per second')
    parser.add_argument('--seed', type=int, default=None, help='Seed for tile spawns')
    parser.add_argument('--verbose', action='store_true', help='Log every spawn and merge')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        pygame.init()
        game = GameGUI(Game2048(rng=random.Random(args.seed)), scale=args.scale, tps=args.tps)
        game.run()
    except Exception as e:
        print(f"Error running game: {e}")
        logger.exception("game loop crashed")
        pygame.quit()
        sys.exit(1)


if __name__ == "__main__":
    main()
