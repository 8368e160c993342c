import curses
from typing import Optional, Union

from .app import BACKSPACE, DOWN, ENTER, ESC, LEFT, RIGHT, UP, App, Mode
from .habit import DONE_VALUE

EMPTY_MARK = " ◦ "
DONE_MARK = " • "
LABEL_WIDTH = 14
CELL_WIDTH = 3

_CONTROL_KEYS = {
    "\x1b": ESC,
    "\n": ENTER,
    "\r": ENTER,
    "\x7f": BACKSPACE,
    "\x08": BACKSPACE,
}

_CURSES_KEYS = {
    curses.KEY_ENTER: ENTER,
    curses.KEY_BACKSPACE: BACKSPACE,
    curses.KEY_UP: UP,
    curses.KEY_DOWN: DOWN,
    curses.KEY_LEFT: LEFT,
    curses.KEY_RIGHT: RIGHT,
}


def translate_key(raw: Union[str, int]) -> Optional[str]:
    if isinstance(raw, str):
        return _CONTROL_KEYS.get(raw, raw)
    return _CURSES_KEYS.get(raw)


def cell_text(value: Optional[str]) -> str:
    if value is None:
        return EMPTY_MARK
    if value == DONE_VALUE:
        return DONE_MARK
    if len(value) < CELL_WIDTH:
        return f"{value:^{CELL_WIDTH}}"
    return f"{value} "


def _safe_addstr(scr, y: int, x: int, text: str, attr: int = 0) -> None:
    h, w = scr.getmaxyx()
    if y < 0 or y >= h or x < 0 or x >= w - 1:
        return
    try:
        scr.addstr(y, x, text[: w - x - 1], attr)
    except curses.error:
        pass


class GridView:
    def __init__(self, scr, app: App) -> None:
        self.scr = scr
        self.app = app
        curses.curs_set(0)
        curses.start_color()
        curses.use_default_colors()
        curses.init_pair(1, curses.COLOR_MAGENTA, -1)
        curses.init_pair(2, curses.COLOR_RED, -1)

    def run(self) -> None:
        while self.app.running:
            self.draw()
            try:
                raw = self.scr.get_wch()
            except curses.error:
                continue
            key = translate_key(raw)
            if key is not None:
                self.app.handle_key(key)

    def draw(self) -> None:
        self.scr.erase()
        h, w = self.scr.getmaxyx()
        tracker = self.app.tracker
        table_width = LABEL_WIDTH + CELL_WIDTH * 7
        top = max(0, (h - len(tracker.habits) - 6) // 2)
        left = max(0, (w - table_width) // 2)
        accent = curses.color_pair(1)

        _safe_addstr(self.scr, top, left, "My Habits".center(table_width), curses.A_BOLD)
        _safe_addstr(self.scr, top + 1, left, tracker.month_label())
        grid_left = left + LABEL_WIDTH
        today_col = tracker.today_column()
        for col, label in enumerate(tracker.header_labels()):
            attr = accent | (curses.A_BOLD if col == today_col else 0)
            _safe_addstr(self.scr, top + 2, grid_left + col * CELL_WIDTH, label, attr)

        selected = self.app.selected()
        for row, (label, values) in enumerate(zip(tracker.labels(), tracker.values())):
            y = top + 3 + row
            _safe_addstr(self.scr, y, left, f"{row} {label}"[: LABEL_WIDTH - 1], accent)
            x = grid_left
            for col, value in enumerate(values):
                attr = curses.color_pair(2) if value is None else curses.A_DIM
                if col == today_col:
                    attr |= curses.A_BOLD
                if selected == (row, col):
                    attr |= curses.A_REVERSE
                text = cell_text(value)
                _safe_addstr(self.scr, y, x, text, attr)
                x += len(text)

        bar_y = top + 4 + len(tracker.habits)
        prompt = "> " if self.app.mode is Mode.VALUE else ": "
        _safe_addstr(self.scr, bar_y, left, (prompt + self.app.input).ljust(table_width), curses.A_REVERSE)
        help_text = f"{self.app.mode.value} Mode | 'q' to quit"
        _safe_addstr(self.scr, bar_y + 1, left, help_text.center(table_width))
        self.scr.refresh()


def run(app: App) -> None:
    curses.wrapper(lambda scr: GridView(scr, app).run())
