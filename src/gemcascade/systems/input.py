from gemcascade.events.bus import EventBus, EVENT_MOUSE_PRESS, EVENT_TILE_CLICK
from gemcascade.constants import GRID_COLS, GRID_ROWS
from gemcascade.ui.layout import cell_at_point

LEFT_BUTTON = 1


class InputSystem:
    """Translates window mouse presses into board tile clicks."""
    def __init__(self, event_bus: EventBus, window, rows: int = GRID_ROWS, cols: int = GRID_COLS):
        self.event_bus = event_bus
        self.window = window
        self.rows = rows
        self.cols = cols
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        button = kwargs.get('button', LEFT_BUTTON)
        if x is None or y is None:
            return
        # Touch input arrives as a left press; other buttons are not board interactions.
        if button != LEFT_BUTTON:
            return
        cell = cell_at_point(x, y, self.window.width, self.window.height, self.rows, self.cols)
        if cell is None:
            return
        row, col = cell
        self.event_bus.emit(EVENT_TILE_CLICK, row=row, col=col)
