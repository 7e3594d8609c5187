from __future__ import annotations
from datetime import date
from typing import Optional, Sequence

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QComboBox, QDateEdit, QDialog, QDialogButtonBox, QFormLayout, QLineEdit, QVBoxLayout
)

from oris.models.certification import Certification
from oris.models.client import Client


class CertificationForm(QDialog):
    def __init__(self, parent=None, clients: Sequence[Client] = ()):
        super().__init__(parent)
        self.setWindowTitle("Habilitation")
        self.setModal(True)

        self.ed_trainee = QLineEdit()
        self.cb_company = QComboBox()
        self.cb_company.setEditable(True)
        for c in clients:
            self.cb_company.addItem(c.name)
        self.ed_level = QLineEdit()
        self.ed_level.setPlaceholderText("ex : B2V, BC, TST-BAT")
        self.ed_expiry = QDateEdit()
        self.ed_expiry.setCalendarPopup(True)
        today = date.today()
        self.ed_expiry.setDate(QDate(today.year, today.month, today.day))

        form = QFormLayout()
        form.addRow("Stagiaire*", self.ed_trainee)
        form.addRow("Entreprise", self.cb_company)
        form.addRow("Niveau*", self.ed_level)
        form.addRow("Échéance", self.ed_expiry)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        lay = QVBoxLayout(self)
        lay.addLayout(form)
        lay.addWidget(btns)

    def get_certification(self) -> Optional[Certification]:
        trainee = self.ed_trainee.text().strip()
        level = self.ed_level.text().strip()
        if not trainee or not level:
            return None
        return Certification(
            trainee_name=trainee,
            company_name=self.cb_company.currentText().strip(),
            level=level,
            expiry_date=self.ed_expiry.date().toPython(),
        )
