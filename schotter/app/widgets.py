from __future__ import annotations

from PySide6.QtCore import QPointF, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QHBoxLayout, QLabel, QLineEdit, QPushButton, QWidget

from schotter.core.params import SLIDER_STEP, parse_seed, snap_to_step


class ScaleSlider(QWidget):
    """Horizontal track for a scale parameter, snapped to ``step``.

    Click or drag to set, mouse wheel moves one step.
    """
    valueChanged = Signal(float)

    TRACK = QColor(190, 190, 190)
    FILL = QColor(40, 40, 40)

    def __init__(self, minimum=0.0, maximum=1.0, value=0.5, step=SLIDER_STEP):
        super().__init__()
        self.minimum = minimum
        self.maximum = maximum
        self.step = step
        self._value = snap_to_step(value, minimum, maximum, step)
        self.radius = 5
        self.setFixedHeight(16)
        self.setMinimumWidth(160)
        self.setFocusPolicy(Qt.NoFocus)

    def value(self):
        return self._value

    def setValue(self, v):
        v = snap_to_step(v, self.minimum, self.maximum, self.step)
        if v != self._value:
            self._value = v
            self.update()
            self.valueChanged.emit(v)

    def _span(self):
        return self.radius, self.width() - self.radius

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        left, right = self._span()
        y = self.height() // 2
        frac = (self._value - self.minimum) / (self.maximum - self.minimum)
        x = int(left + frac * (right - left))

        painter.setPen(QPen(self.TRACK, 2))
        painter.drawLine(x, y, right, y)
        painter.setPen(QPen(self.FILL, 3))
        painter.drawLine(left, y, x, y)
        painter.setPen(Qt.NoPen)
        painter.setBrush(self.FILL)
        painter.drawEllipse(QPointF(x, y), self.radius, self.radius)

    def mousePressEvent(self, event):
        self._set_from_x(event.position().x())

    def mouseMoveEvent(self, event):
        self._set_from_x(event.position().x())

    def wheelEvent(self, event):
        steps = 1 if event.angleDelta().y() > 0 else -1
        self.setValue(self._value + steps * self.step)
        event.accept()

    def _set_from_x(self, x):
        left, right = self._span()
        frac = (min(max(x, left), right) - left) / max(1, right - left)
        self.setValue(self.minimum + frac * (self.maximum - self.minimum))


class LabeledSlider(QWidget):
    """Label, slider and the current value on one row."""
    valueChanged = Signal(float)

    def __init__(self, text, minimum, maximum, value):
        super().__init__()
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.label = QLabel(text)
        self.label.setFixedWidth(90)
        self.slider = ScaleSlider(minimum, maximum, value)
        self.readout = QLabel(f"{value:.2f}")
        self.readout.setFixedWidth(40)
        layout.addWidget(self.label)
        layout.addWidget(self.slider, 1)
        layout.addWidget(self.readout)
        self.slider.valueChanged.connect(self._on_changed)

    def _on_changed(self, v):
        self.readout.setText(f"{v:.2f}")
        self.valueChanged.emit(v)

    def sync(self, v):
        # external change (keyboard): move the handle without echoing back
        self.slider.blockSignals(True)
        self.slider.setValue(v)
        self.slider.blockSignals(False)
        self.readout.setText(f"{self.slider.value():.2f}")


class SeedInput(QWidget):
    """Seed text box + Randomize button. Text that isn't a seed becomes 0."""
    seedChanged = Signal(object)
    randomizeClicked = Signal()

    def __init__(self, seed: int):
        super().__init__()
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(QLabel("Seed"))
        self.edit = QLineEdit(str(seed))
        self.edit.setFixedWidth(100)
        self.button = QPushButton("Randomize")
        layout.addWidget(self.edit)
        layout.addWidget(self.button)
        layout.addStretch(1)
        self.edit.textEdited.connect(self._on_edited)
        self.button.clicked.connect(lambda: self.randomizeClicked.emit())

    def _on_edited(self, text):
        self.seedChanged.emit(parse_seed(text))

    def sync(self, seed: int):
        if parse_seed(self.edit.text()) != seed:
            self.edit.setText(str(seed))
