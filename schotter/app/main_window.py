from __future__ import annotations

import logging

from PIL import Image
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QApplication, QLabel, QMessageBox, QVBoxLayout, QWidget

from schotter import config
from schotter.app.widgets import LabeledSlider, SeedInput
from schotter.core.params import SLIDER_MAX
from schotter.errors import RecordingError
from schotter.sketch import Sketch

logger = logging.getLogger(__name__)

QT_KEYS = {
    Qt.Key_R: "R",
    Qt.Key_S: "S",
    Qt.Key_C: "C",
    Qt.Key_Up: "Up",
    Qt.Key_Down: "Down",
    Qt.Key_Left: "Left",
    Qt.Key_Right: "Right",
}


def qimage_from_pil(pil_img: Image.Image) -> QImage:
    rgb = pil_img.convert("RGBA")
    data = rgb.tobytes("raw", "RGBA")
    # copy() detaches the QImage from the temporary bytes buffer
    return QImage(data, rgb.width, rgb.height, QImage.Format_RGBA8888).copy()


class KeyForwarding:
    """Mixin: forwards known key presses to the owning SketchWindow."""
    sketch_window = None

    def keyPressEvent(self, e):
        key = QT_KEYS.get(e.key())
        if key is not None and self.sketch_window is not None:
            self.sketch_window.on_key(key)
        else:
            super().keyPressEvent(e)


class ControlPanel(KeyForwarding, QWidget):
    def __init__(self, sketch: Sketch, sketch_window):
        super().__init__()
        self.sketch = sketch
        self.sketch_window = sketch_window
        self.setWindowTitle(f"{sketch.app_name} Control Panel")
        self.resize(320, 200)

        p = sketch.params
        layout = QVBoxLayout(self)
        self.displacement = LabeledSlider("Displacement", 0.0, SLIDER_MAX, p.displacement)
        self.rotation = LabeledSlider("Rotation", 0.0, SLIDER_MAX, p.rotation)
        self.displacement.valueChanged.connect(p.set_displacement)
        self.rotation.valueChanged.connect(p.set_rotation)
        layout.addWidget(self.displacement)
        layout.addWidget(self.rotation)

        self.motion = None
        self.seed = None
        if sketch.variant == "animated":
            self.motion = LabeledSlider("Motion", 0.0, 1.0, p.motion)
            self.motion.valueChanged.connect(p.set_motion)
            layout.addWidget(self.motion)
        else:
            self.seed = SeedInput(p.seed)
            self.seed.seedChanged.connect(p.set_seed)
            self.seed.randomizeClicked.connect(lambda: (p.reseed(), self.sync()))
            layout.addWidget(self.seed)

        self.status = QLabel("")
        layout.addWidget(self.status)
        layout.addStretch(1)

    def sync(self):
        p = self.sketch.params
        self.displacement.sync(p.displacement)
        self.rotation.sync(p.rotation)
        if self.motion is not None:
            self.motion.sync(p.motion)
        if self.seed is not None:
            self.seed.sync(p.seed)
        cap = self.sketch.capture
        self.status.setText(f"recording {cap.session_id}  frame {cap.frame:04d}" if cap.recording else "")


class SketchWindow(KeyForwarding, QWidget):
    def __init__(self, sketch: Sketch):
        super().__init__()
        self.sketch = sketch
        self.sketch_window = self
        self.setWindowTitle(sketch.app_name)
        self.label = QLabel(alignment=Qt.AlignCenter)
        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.label)
        self.setStyleSheet("background:#fff;")
        self.setFixedSize(
            sketch.gravel.cols * config.SIZE + 2 * config.MARGIN,
            sketch.gravel.rows * config.SIZE + 2 * config.MARGIN,
        )

        self.controls = ControlPanel(sketch, self)

        self.timer = QTimer(self)
        self.timer.timeout.connect(self.on_tick)
        self.timer.start(config.TICK_MS)

    def show_all(self):
        self.show()
        self.controls.show()

    def on_tick(self):
        self.sketch.tick()
        img = self.sketch.render()
        self.label.setPixmap(QPixmap.fromImage(qimage_from_pil(img)))
        self.sketch.frame_done(img)
        self.controls.sync()

    def on_key(self, key: str):
        try:
            self.sketch.handle_key(key)
        except RecordingError as e:
            self.fatal(e)
            return
        self.controls.sync()

    def fatal(self, e: Exception):
        logger.critical("Recording cannot proceed: %s", e)
        self.timer.stop()
        QMessageBox.critical(self, "Recording error", str(e))
        QApplication.exit(1)

    def closeEvent(self, event):
        self.timer.stop()
        self.controls.close()
        if self.sketch.writer is not None:
            self.sketch.writer.close()
        super().closeEvent(event)
