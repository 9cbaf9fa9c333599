"""
frontend collaborators: rendering and input translation for the engine

the engine never draws or reads devices itself. a frontend pairs a Renderer
with an InputTranslator and drives Game2048 with commands and ticks.
"""
from typing import Optional, Protocol

from game import Command, Game2048, GamePhase


class Renderer(Protocol):
    def render(self, game: Game2048) -> None:
        ...


class InputTranslator(Protocol):
    def translate_input(self, raw_event) -> Optional[Command]:
        ...


def click_to_command(x, y, width, height):
    """
    map a click on the board area to a direction

    the board is split in quarters: the middle half of the top strip is UP,
    of the bottom strip DOWN, of the left strip LEFT and of the right strip
    RIGHT. corners and the centre do nothing.
    """
    quarter_w, quarter_h = width // 4, height // 4
    middle_x = quarter_w <= x < quarter_w * 3
    middle_y = quarter_h <= y < quarter_h * 3

    if middle_x and 0 <= y < quarter_h:
        return Command.UP
    if middle_x and quarter_h * 3 <= y < height:
        return Command.DOWN
    if middle_y and 0 <= x < quarter_w:
        return Command.LEFT
    if middle_y and quarter_w * 3 <= x < width:
        return Command.RIGHT
    return None


class TextInputTranslator:
    """translates typed console input into commands"""

    KEYS = {
        'w': Command.UP, 'up': Command.UP,
        's': Command.DOWN, 'down': Command.DOWN,
        'a': Command.LEFT, 'left': Command.LEFT,
        'd': Command.RIGHT, 'right': Command.RIGHT,
        '': Command.START, 'start': Command.START, 'enter': Command.START,
        'q': Command.BACK, 'back': Command.BACK,
        'c': Command.KEEP_GOING, 'continue': Command.KEEP_GOING,
    }

    def translate_input(self, raw_event):
        if not isinstance(raw_event, str):
            return None
        return self.KEYS.get(raw_event.strip().lower())


class ConsoleRenderer:
    """print the board to the console"""

    def render(self, game):
        if game.phase is GamePhase.TITLE:
            print("2048")
            print("press enter to start")
            print()
            return

        print(f"Score: {game.score}")
        print("-" * 25)
        for row in game.board:
            print("|", end="")
            for cell in row:
                if cell == 0:
                    print("     |", end="")
                else:
                    print(f"{cell:5}|", end="")
            print()
        print("-" * 25)

        if game.dialog is not None:
            print(f"{game.dialog.title} Score: {game.dialog.score}")
            if game.dialog.win:
                print("c = keep going, q = back to title")
            else:
                print("q = back to title")
        print()


def run_console(game=None, renderer=None, translator=None, read=input):
    """play in the terminal, each command is resolved fully before the next prompt"""
    game = game or Game2048()
    renderer = renderer or ConsoleRenderer()
    translator = translator or TextInputTranslator()

    print("w/a/s/d to move, enter to start, q to go back, 'exit' to quit")
    renderer.render(game)
    while True:
        try:
            raw = read("> ")
        except EOFError:
            break
        if raw.strip().lower() == 'exit':
            break

        command = translator.translate_input(raw)
        if command is None:
            continue
        game.apply_command(command)
        game.settle()
        renderer.render(game)
    return game


if __name__ == "__main__":
    run_console()
