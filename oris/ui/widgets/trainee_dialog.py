from __future__ import annotations
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog, QDialogButtonBox, QHBoxLayout, QLabel, QLineEdit, QListWidget,
    QListWidgetItem, QMessageBox, QPushButton, QVBoxLayout
)

from oris.errors import OrisError
from oris.services.session_service import SessionService


class TraineeDialog(QDialog):
    """Liste nominative des stagiaires d'une session (enregistrée à chaque action)."""

    def __init__(self, parent=None, sessions: Optional[SessionService] = None, session_id: str = ""):
        super().__init__(parent)
        self.setWindowTitle("Stagiaires")
        self.setModal(True)
        self.sessions = sessions
        self.session_id = session_id

        self.lab_info = QLabel()
        self.lst = QListWidget()
        self.ed_name = QLineEdit()
        self.ed_name.setPlaceholderText("Prénom Nom")
        btn_add = QPushButton("Ajouter")
        btn_del = QPushButton("Retirer")
        btn_add.clicked.connect(self._add)
        btn_del.clicked.connect(self._remove)
        self.ed_name.returnPressed.connect(btn_add.click)

        bar = QHBoxLayout()
        bar.addWidget(self.ed_name, 1)
        bar.addWidget(btn_add)
        bar.addWidget(btn_del)

        btns = QDialogButtonBox(QDialogButtonBox.Close)
        btns.rejected.connect(self.reject)

        lay = QVBoxLayout(self)
        lay.addWidget(self.lab_info)
        lay.addWidget(self.lst, 1)
        lay.addLayout(bar)
        lay.addWidget(btns)

        self._refresh()

    def _refresh(self):
        s = self.sessions.get(self.session_id)
        self.lst.clear()
        for t in s.trainees:
            it = QListWidgetItem(t.name)
            it.setData(Qt.ItemDataRole.UserRole, t.id)
            self.lst.addItem(it)
        self.lab_info.setText(f"{len(s.trainees)} inscrit(s) / {s.trainees_count} prévu(s)")

    def _add(self):
        try:
            self.sessions.add_trainee(self.session_id, self.ed_name.text())
        except OrisError as e:
            QMessageBox.warning(self, "Stagiaires", str(e))
            return
        self.ed_name.clear()
        self._refresh()

    def _remove(self):
        it = self.lst.currentItem()
        if not it:
            QMessageBox.information(self, "Stagiaires", "Sélectionne un stagiaire d'abord.")
            return
        try:
            self.sessions.remove_trainee(self.session_id, it.data(Qt.ItemDataRole.UserRole))
        except OrisError as e:
            QMessageBox.warning(self, "Stagiaires", str(e))
            return
        self._refresh()
