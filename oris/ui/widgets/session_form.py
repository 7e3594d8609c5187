from __future__ import annotations
from datetime import date
from typing import Any, Dict, Optional, Sequence

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QComboBox, QDateEdit, QDialog, QDialogButtonBox, QFormLayout, QLineEdit,
    QSpinBox, QVBoxLayout
)

from oris.models.client import Client
from oris.models.session import Session
from oris.models.training import TrainingModule


def _qdate(d: date) -> QDate:
    return QDate(d.year, d.month, d.day)


class SessionForm(QDialog):
    def __init__(
        self,
        parent=None,
        trainings: Sequence[TrainingModule] = (),
        clients: Sequence[Client] = (),
        session: Optional[Session] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Session de formation")
        self.setModal(True)
        self.session = session
        self.error: Optional[str] = None

        self.cb_training = QComboBox()
        for t in trainings:
            self.cb_training.addItem(f"{t.reference} — {t.title}", t.id)
        self.cb_client = QComboBox()
        for c in clients:
            self.cb_client.addItem(c.name, c.id)

        self.ed_start = QDateEdit()
        self.ed_start.setCalendarPopup(True)
        self.ed_end = QDateEdit()
        self.ed_end.setCalendarPopup(True)
        self.ed_trainer = QLineEdit()
        self.ed_location = QLineEdit()
        self.sp_count = QSpinBox()
        self.sp_count.setRange(0, 999)
        self.sp_count.setValue(1)

        today = _qdate(date.today())
        self.ed_start.setDate(today)
        self.ed_end.setDate(today)
        if session:
            self.cb_training.setCurrentIndex(max(0, self.cb_training.findData(session.training_id)))
            self.cb_client.setCurrentIndex(max(0, self.cb_client.findData(session.client_id)))
            self.ed_start.setDate(_qdate(session.start_date))
            self.ed_end.setDate(_qdate(session.end_date))
            self.ed_trainer.setText(session.trainer)
            self.ed_location.setText(session.location)
            self.sp_count.setValue(session.trainees_count)

        form = QFormLayout()
        form.addRow("Formation", self.cb_training)
        form.addRow("Client", self.cb_client)
        form.addRow("Début", self.ed_start)
        form.addRow("Fin", self.ed_end)
        form.addRow("Formateur", self.ed_trainer)
        form.addRow("Lieu", self.ed_location)
        form.addRow("Stagiaires prévus", self.sp_count)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        lay = QVBoxLayout(self)
        lay.addLayout(form)
        lay.addWidget(btns)

    def get_values(self) -> Optional[Dict[str, Any]]:
        """Champs de planification ; None si incomplet (`self.error`)."""
        self.error = None
        values = dict(
            training_id=self.cb_training.currentData() or "",
            client_id=self.cb_client.currentData() or "",
            start_date=self.ed_start.date().toPython(),
            end_date=self.ed_end.date().toPython(),
            trainer=self.ed_trainer.text().strip(),
            location=self.ed_location.text().strip(),
            trainees_count=self.sp_count.value(),
        )
        if not values["training_id"] or not values["client_id"]:
            self.error = "Formation et client sont obligatoires."
        elif not values["trainer"] or not values["location"]:
            self.error = "Formateur et lieu sont obligatoires."
        elif values["end_date"] < values["start_date"]:
            self.error = "La date de fin précède la date de début."
        return None if self.error else values
