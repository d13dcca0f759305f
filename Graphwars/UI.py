# UI.py
""""PySide6 user interface for the Graphwars grapher.

Structure
---------
- Graph UI: main window with formula input, keypad and plot canvas
- Settings UI: modal dialog for user preferences

Responsibilities (Graph)
------------------------
- Build window, formula input, keypad and canvas
- Dispatch the formula to MathEngine in a worker thread (parse once)
- Animate the GraphEngine sweep with a QTimer (evaluate many)
- Show MathEngine errors as dialogs, evaluation stops in the status line
- Clipboard integration and optional auto-graph after paste


Responsibilities (Settings)
---------------------------

- Load Current Settings and Settings Descriptions via Config_Manager
- Validate user input (numbers, positive step sizes, parsable default formula)
- Save and apply theme changes immediately


Threading Note
--------------
Parsing is executed off the UI thread in Worker(QObject).
The result (or error) is emitted via a Qt signal and handled back in the UI.
"""""

from PySide6 import QtWidgets, QtGui
from PySide6.QtCore import Qt, QObject, Signal, QTimer, QPointF
import sys
import threading
from pynput.keyboard import Controller
import pyperclip
from . import error as E
from . import config_manager as config_manager
from . import MathEngine as MathEngine
from . import GraphEngine as GraphEngine

# Settings that must stay strictly positive
POSITIVE_SETTINGS = ["graph_res", "graphing_speed", "graph_bound", "discontinuity_threshold"]

TIMER_INTERVAL_MS = 16


def is_shift_pressed():
    """""

    Small and simple check, whether shift is pressed or not.
    Used for the "shift to copy" clipboard button.

    """""

    keyboard_controller = Controller()
    return keyboard_controller.shift_pressed


class Worker(QObject):
    """""

    Runs in a separate thread, hands the formula to MathEngine.parse
    and emits a Signal with the ParsedFunction (or the MathError) back to the UI.

    """""

    job_finished = Signal(object, str)

    def __init__(self, problem):
        super().__init__()
        self.data = problem

    def run_parse(self):

        try:
            result = MathEngine.parse(self.data)
            self.job_finished.emit(result, self.data)

        except E.MathError as e:
            # Known, handled error (e.g. "Mismatched parentheses")
            self.job_finished.emit(e, self.data)

        except Exception as e:
            # Unexpected crash we didn't plan for
            critical_error = E.MathError(
                message=f"Unexpected crash: {e}",
                code="9999",
                equation=self.data
            )
            self.job_finished.emit(critical_error, self.data)


class SettingsDialog(QtWidgets.QDialog):
    """""

    Settings window. Two kinds of settings:
    1. Checkboxes   (Managed with True or False)
    2. Input Fields (numbers and the default formula, managed as a String)

    """""

    settings_saved = Signal()  # Signal to tell the main window to update

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}

        # --- 1. Window Setup ---
        self.setWindowTitle("Graph Settings")
        self.setMinimumSize(360, 320)

        main_layout = QtWidgets.QVBoxLayout(self)

        # --- 2. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        # --- 3. Build Widgets ---
        for key_value in self.setting_value_list:
            value = self.setting_value_list[key_value]
            description = self.setting_description_list.get(key_value, key_value)

            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            else:
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                label = QtWidgets.QLabel(description + ":")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))  # Show current value as placeholder

                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

        # --- 4. OK / Cancel Buttons ---
        button_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(lambda: self.save_settings(self.setting_value_list))
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self, setting_value_list):
        for key_value, widget in self.widgets.items():

            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()
                continue

            new_value_str = widget.text().strip()
            if new_value_str == "":
                continue  # Blank keeps the old value

            try:
                if key_value == "default_function":
                    # Reject formulas the engine cannot parse
                    MathEngine.parse(new_value_str)
                    setting_value_list[key_value] = new_value_str
                    continue

                new_value = float(new_value_str)
                if key_value in POSITIVE_SETTINGS and new_value <= 0:
                    raise ValueError(f"'{new_value}' has to be greater than 0.")
                setting_value_list[key_value] = new_value

            except (ValueError, E.ParseError) as e:
                # Show an error box and STOP the save process
                QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                               f"Error in input for '{key_value}':\n\n{e}\n\nPlease correct your input.")
                return

        saved_settings = config_manager.save_setting(setting_value_list)

        if saved_settings != {}:
            self.settings_saved.emit()
            self.accept()
            self.update_darkmode()
        else:
            QtWidgets.QMessageBox.critical(self, "Error", E.ERROR_MESSAGES["5002"] + "config.json")

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class PlotCanvas(QtWidgets.QWidget):
    """Paints the grid, the start point and the traced curve in graph coordinates."""

    GRID_CELLS = 20

    def __init__(self, parent=None):
        super().__init__(parent)
        self.graph_bound = 10.0
        self.start = (0.0, 0.0)
        self.points = []
        self.failed_at = None
        self.darkmode = False
        self.setMinimumSize(420, 420)

    def to_screen(self, x, y):
        size = min(self.width(), self.height())
        scale = size / (2 * self.graph_bound)
        offset_x = (self.width() - size) / 2
        offset_y = (self.height() - size) / 2
        return QPointF(offset_x + (x + self.graph_bound) * scale,
                       offset_y + (self.graph_bound - y) * scale)

    def paintEvent(self, event):
        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.Antialiasing)

        background = QtGui.QColor("#121212") if self.darkmode else QtGui.QColor("white")
        foreground = QtGui.QColor("white") if self.darkmode else QtGui.QColor("black")
        painter.fillRect(self.rect(), background)

        # --- Grid ---
        grid_pen = QtGui.QPen(QtGui.QColor("#888888"))
        grid_pen.setWidthF(0.5)
        painter.setPen(grid_pen)
        cell = 2 * self.graph_bound / self.GRID_CELLS
        for i in range(self.GRID_CELLS + 1):
            value = -self.graph_bound + i * cell
            painter.drawLine(self.to_screen(value, -self.graph_bound), self.to_screen(value, self.graph_bound))
            painter.drawLine(self.to_screen(-self.graph_bound, value), self.to_screen(self.graph_bound, value))

        # --- Axes ---
        axis_pen = QtGui.QPen(foreground)
        axis_pen.setWidthF(1.5)
        painter.setPen(axis_pen)
        painter.drawLine(self.to_screen(0, -self.graph_bound), self.to_screen(0, self.graph_bound))
        painter.drawLine(self.to_screen(-self.graph_bound, 0), self.to_screen(self.graph_bound, 0))

        # --- Start point ---
        painter.setBrush(QtGui.QColor(0, 170, 0))
        painter.drawEllipse(self.to_screen(*self.start), 6, 6)

        # --- Curve ---
        if len(self.points) > 1:
            curve_pen = QtGui.QPen(QtGui.QColor(220, 0, 0))
            curve_pen.setWidthF(2)
            painter.setPen(curve_pen)
            painter.drawPolyline(QtGui.QPolygonF([self.to_screen(x, y) for x, y in self.points]))

        painter.end()


class GraphWindow(QtWidgets.QWidget):
    shift_is_held = False

    def __init__(self):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        MathEngine.debug = self.setting_value_list["debug"]

        # --- 2. Instance State Variables ---
        self.thread_active = False  # Is a parse running?
        self.trace = None  # Current GraphEngine.GraphTrace
        self.pending_steps = 0.0  # Fractional steps carried between timer ticks
        self.graph_timer = QTimer(self)
        self.graph_timer.setInterval(TIMER_INTERVAL_MS)
        self.graph_timer.timeout.connect(self.handle_graph_tick)

        # --- 3. Window Setup ---
        self.button_objects = {}
        self.setWindowTitle("Graphwars")
        self.resize(520, 820)
        main_v_layout = QtWidgets.QVBoxLayout(self)

        # --- 4. Canvas ---
        self.canvas = PlotCanvas(self)
        main_v_layout.addWidget(self.canvas, 4)

        # --- 5. Formula input and status ---
        self.display = QtWidgets.QLineEdit(str(self.setting_value_list["default_function"]))
        font = self.display.font()
        font.setPointSize(20)
        self.display.setFont(font)
        self.display.returnPressed.connect(lambda: self.handle_button_press('⏎'))
        main_v_layout.addWidget(self.display)

        self.status = QtWidgets.QLabel("")
        main_v_layout.addWidget(self.status)

        # --- 6. Keypad ---
        button_container = QtWidgets.QWidget()
        main_v_layout.addWidget(button_container, 2)
        button_grid = QtWidgets.QGridLayout(button_container)
        button_grid.setSpacing(0)
        button_grid.setContentsMargins(0, 0, 0, 0)

        # (text, row, column)
        self.buttons = [
            ('⚙️', 0, 0), ('📋', 0, 1), ('(', 0, 2), (')', 0, 3), ('<', 0, 4),
            ('sin(', 1, 0), ('x', 1, 1), ('π', 1, 2), ('e', 1, 3), ('/', 1, 4),
            ('exp(', 2, 0), ('7', 2, 1), ('8', 2, 2), ('9', 2, 3), ('*', 2, 4),
            ('ln(', 3, 0), ('4', 3, 1), ('5', 3, 2), ('6', 3, 3), ('-', 3, 4),
            ('log10(', 4, 0), ('1', 4, 1), ('2', 4, 2), ('3', 4, 3), ('+', 4, 4),
            ('sqrt(', 5, 0), ('C', 5, 1), ('0', 5, 2), ('.', 5, 3), ('^', 5, 4),
            ('⏎', 6, 0, 1, 5),
        ]

        expanding_policy = QtWidgets.QSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding
        )

        for text, row, col, *span in self.buttons:
            button = QtWidgets.QPushButton(text)
            button.setSizePolicy(expanding_policy)

            if text == '⚙️':
                button.clicked.connect(self.open_settings)
            else:
                button.clicked.connect(lambda checked=False, val=text: self.handle_button_press(val))

            button_grid.addWidget(button, row, col, *span)
            self.button_objects[text] = button

        self.update_start_point()
        self.update_darkmode()

    # --- Window/Key Event Handlers ---
    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = True
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = False
        super().keyReleaseEvent(event)

    def update_start_point(self):
        self.canvas.graph_bound = float(self.setting_value_list["graph_bound"])
        self.canvas.start = (float(self.setting_value_list["start_x"]), float(self.setting_value_list["start_y"]))
        self.canvas.update()

    def handle_button_press(self, value):
        display_text = self.display.text()

        if value == "<":
            self.display.setText(display_text[:-1])

        elif value == "C":
            self.display.setText("")

        elif value == '📋':
            # Shift held: copy the formula. Otherwise paste the clipboard text.
            if self.shift_is_held or is_shift_pressed():
                pyperclip.copy(display_text)
                return

            clipboard_text = QtWidgets.QApplication.clipboard().text()
            if not clipboard_text:
                self.status.setText(E.ERROR_MESSAGES["4003"])
                return
            self.display.insert(clipboard_text)

            if self.setting_value_list["after_paste_enter"] == True:
                self.start_graphing(self.display.text())

        elif value == '⏎':
            self.start_graphing(display_text)

        else:
            self.display.insert(value)

        self.display.setFocus()

    # --- Parsing (worker thread) ---
    def start_graphing(self, problem):
        if self.thread_active:
            self.status.setText(E.ERROR_MESSAGES["4002"])
            return

        self.thread_active = True
        self.graph_timer.stop()
        self.status.setText("...")

        worker_instance = Worker(problem)
        # Connect before starting so the result can never be missed
        worker_instance.job_finished.connect(self.Parse_result)
        self.worker_instance = worker_instance
        my_thread = threading.Thread(target=worker_instance.run_parse)
        my_thread.start()

    def Parse_result(self, result, equation):
        self.thread_active = False

        if isinstance(result, E.MathError):
            self.show_error(result)
            return

        try:
            self.trace = GraphEngine.GraphTrace(result, self.canvas.start, self.setting_value_list)
        except E.MathError as e:
            e.equation = equation
            self.show_error(e)
            return

        self.canvas.points = list(self.trace.points)
        self.canvas.update()
        self.pending_steps = 0.0
        if self.trace.finished:
            self.report_trace()
        else:
            self.status.setText(f"Graphing {equation}")
            self.graph_timer.start()

    # --- Sweep animation (evaluate many) ---
    def handle_graph_tick(self):
        if self.trace is None:
            self.graph_timer.stop()
            return

        self.pending_steps += GraphEngine.steps_per_second(self.setting_value_list) * TIMER_INTERVAL_MS / 1000
        due_steps = int(self.pending_steps)
        self.pending_steps -= due_steps

        self.canvas.points.extend(self.trace.advance(due_steps))
        self.canvas.update()

        if self.trace.finished:
            self.graph_timer.stop()
            self.report_trace()

    def report_trace(self):
        if self.trace.outcome == "failed":
            reason = self.trace.error.message if self.trace.error is not None else "curve broke off"
            self.status.setText(f"Stopped at x = {self.trace.failed_at:.2f}: {reason}")
            if MathEngine.debug == True:
                print(f"Func failed at {self.trace.failed_at}")
        else:
            self.status.setText(f"Done ({len(self.trace.points)} points)")

    def show_error(self, error_obj):
        error_box = QtWidgets.QMessageBox(self)
        error_code = error_obj.code
        additional_info = f"Details: {error_obj.message}\nEquation: {error_obj.equation}"

        error_box.setIcon(QtWidgets.QMessageBox.Critical)
        error_box.setWindowTitle(E.category(error_code))
        error_box.setText(f"Error {error_code}: {E.ERROR_MESSAGES.get(error_code, 'Unknown error')}")
        error_box.setInformativeText(additional_info)
        error_box.setStandardButtons(QtWidgets.QMessageBox.Ok)
        error_box.setStyleSheet(self.get_message_box_stylesheet())
        error_box.exec()

        self.status.setText("Expression rejected")
        # Put the cursor on the character the tokenizer could not read
        if isinstance(error_obj, E.TokenizerError):
            self.display.setCursorPosition(error_obj.failure_idx)
        self.display.setFocus()

    def update_darkmode(self):
        self.canvas.darkmode = self.setting_value_list["darkmode"] == True
        if self.setting_value_list["darkmode"] == True:
            for text, button in self.button_objects.items():
                if text != '⏎':
                    button.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
            self.setStyleSheet("background-color: #121212; color: white;")
            self.display.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
        else:
            for text, button in self.button_objects.items():
                if text != '⏎':
                    button.setStyleSheet("font-weight: normal;")
            self.setStyleSheet("")
            self.display.setStyleSheet("font-weight: bold;")

        self.button_objects['⏎'].setStyleSheet("background-color: #007bff; color: white; font-weight: bold;")
        self.canvas.update()

    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()  # modal

        # Reload settings after dialog closes
        self.setting_value_list = config_manager.load_setting_value("all")
        MathEngine.debug = self.setting_value_list["debug"]
        self.update_start_point()
        self.update_darkmode()

    def get_message_box_stylesheet(self):
        if self.setting_value_list["darkmode"] == True:
            return """
                QMessageBox {
                    background-color: #121212;
                    color: white;
                }
                QLabel {
                    color: white;
                }
                QPushButton {
                    background-color: #2e2e2e;
                    color: white;
                    border: 1px solid #444444;
                    padding: 5px 15px;
                }
            """
        else:
            return ""


def main():
    app = QtWidgets.QApplication()
    window = GraphWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
