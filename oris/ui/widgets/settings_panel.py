from __future__ import annotations
from typing import Optional

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, Qt
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import (
    QFileDialog, QFormLayout, QGroupBox, QHBoxLayout, QLabel, QLineEdit,
    QMessageBox, QPushButton, QVBoxLayout, QWidget
)

from oris.errors import OrisError
from oris.models.settings import CompanySettings
from oris.services.settings_service import SettingsService

LOGO_MAX_SIDE = 400

FIELDS = (
    ("name", "Raison sociale"),
    ("address", "Adresse"),
    ("zip", "Code postal"),
    ("city", "Ville"),
    ("siret", "SIRET"),
    ("vat", "TVA intracom."),
    ("phone", "Téléphone"),
    ("email", "Email"),
    ("iban", "IBAN"),
    ("bic", "BIC"),
)


def image_to_data_url(path: str, max_side: int = LOGO_MAX_SIDE) -> Optional[str]:
    """Charge une image, la réduit (côté max) et la retourne en data URL PNG."""
    img = QImage(path)
    if img.isNull():
        return None
    if img.width() > max_side or img.height() > max_side:
        img = img.scaled(max_side, max_side, Qt.AspectRatioMode.KeepAspectRatio,
                         Qt.TransformationMode.SmoothTransformation)
    raw = QByteArray()
    buf = QBuffer(raw)
    buf.open(QIODevice.OpenModeFlag.WriteOnly)
    img.save(buf, "PNG")
    buf.close()
    return "data:image/png;base64," + bytes(raw.toBase64()).decode("ascii")


class SettingsPanel(QWidget):
    """Onglet Paramètres : coordonnées société, banque et logo des documents."""

    def __init__(self, parent=None, service: Optional[SettingsService] = None):
        super().__init__(parent)
        self.service = service
        self.edits = {key: QLineEdit() for key, _ in FIELDS}

        grp = QGroupBox("Informations société")
        form = QFormLayout(grp)
        for key, label in FIELDS:
            form.addRow(label, self.edits[key])

        grp_logo = QGroupBox("Logo")
        lay_logo = QHBoxLayout(grp_logo)
        self.lab_logo = QLabel("Aucun logo")
        self.lab_logo.setFixedHeight(80)
        btn_logo = QPushButton("Choisir une image…")
        btn_clear = QPushButton("Retirer le logo")
        lay_logo.addWidget(self.lab_logo, 1)
        lay_logo.addWidget(btn_logo)
        lay_logo.addWidget(btn_clear)

        btn_save = QPushButton("Enregistrer")
        bar = QHBoxLayout()
        bar.addStretch(1)
        bar.addWidget(btn_save)

        root = QVBoxLayout(self)
        root.addWidget(grp)
        root.addWidget(grp_logo)
        root.addLayout(bar)
        root.addStretch(1)

        btn_save.clicked.connect(self._save)
        btn_logo.clicked.connect(self._choose_logo)
        btn_clear.clicked.connect(self._clear_logo)

        self.reload()

    def reload(self):
        s = self.service.load()
        for key, _ in FIELDS:
            self.edits[key].setText(str(getattr(s, key) or ""))
        self._show_logo(s)

    def _show_logo(self, s: CompanySettings):
        if s.logo_url and s.logo_url.startswith("data:image/"):
            pix = QPixmap()
            pix.loadFromData(QByteArray.fromBase64(s.logo_url.split(",", 1)[-1].encode("ascii")))
            self.lab_logo.setPixmap(pix.scaledToHeight(70, Qt.TransformationMode.SmoothTransformation))
        elif s.logo_url:
            self.lab_logo.setText(s.logo_url)
        else:
            self.lab_logo.setText("Aucun logo")

    def _save(self):
        changes = {key: self.edits[key].text().strip() for key, _ in FIELDS}
        changes["email"] = changes["email"] or None
        try:
            self.service.update(changes)
        except OrisError as e:
            QMessageBox.warning(self, "Paramètres", str(e))
            return
        QMessageBox.information(self, "Paramètres", "Paramètres enregistrés.")

    def _choose_logo(self):
        path, _ = QFileDialog.getOpenFileName(self, "Logo", "", "Images (*.png *.jpg *.jpeg *.bmp *.gif)")
        if not path:
            return
        data_url = image_to_data_url(path)
        if not data_url:
            QMessageBox.warning(self, "Logo", "Image illisible.")
            return
        try:
            self._show_logo(self.service.set_logo(data_url))
        except OrisError as e:
            QMessageBox.warning(self, "Logo", str(e))

    def _clear_logo(self):
        try:
            self._show_logo(self.service.clear_logo())
        except OrisError as e:
            QMessageBox.warning(self, "Logo", str(e))
