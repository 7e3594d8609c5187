from __future__ import annotations
from typing import Optional

from pydantic import ValidationError as ModelError
from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox, QDialog, QDialogButtonBox, QFormLayout, QLineEdit, QVBoxLayout
)

from oris.models.client import Client, ClientStatus


class ClientForm(QDialog):
    def __init__(self, parent=None, client: Optional[Client] = None):
        super().__init__(parent)
        self.setWindowTitle("Client")
        self.setModal(True)
        self.error: Optional[str] = None

        self.ed_name = QLineEdit()
        self.ed_siret = QLineEdit()
        self.ed_vat = QLineEdit()
        self.ed_address = QLineEdit()
        self.ed_zip = QLineEdit()
        self.ed_city = QLineEdit()
        self.ed_contact = QLineEdit()
        self.ed_email = QLineEdit()
        self.ed_phone = QLineEdit()
        self.cb_status = QComboBox()
        for st in ClientStatus:
            self.cb_status.addItem(st.value, st)

        form = QFormLayout()
        form.addRow("Raison sociale (obligatoire)", self.ed_name)
        form.addRow("SIRET", self.ed_siret)
        form.addRow("TVA intracom.", self.ed_vat)
        form.addRow("Adresse", self.ed_address)
        form.addRow("Code postal", self.ed_zip)
        form.addRow("Ville", self.ed_city)
        form.addRow("Contact", self.ed_contact)
        form.addRow("Email", self.ed_email)
        form.addRow("Téléphone", self.ed_phone)
        form.addRow("Statut", self.cb_status)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        lay = QVBoxLayout(self)
        lay.addLayout(form)
        lay.addWidget(btns)

        self._orig_client = client
        if client:
            self._fill_from_client(client)

    def _fill_from_client(self, c: Client):
        self.ed_name.setText(c.name)
        self.ed_siret.setText(c.siret)
        self.ed_vat.setText(c.vat_number)
        self.ed_address.setText(c.address)
        self.ed_zip.setText(c.zip)
        self.ed_city.setText(c.city)
        self.ed_contact.setText(c.contact_name)
        self.ed_email.setText(c.email or "")
        self.ed_phone.setText(c.phone)
        self.cb_status.setCurrentIndex(max(0, self.cb_status.findData(c.status)))

    def get_client(self) -> Optional[Client]:
        """Retourne un Client (nouveau ou mis à jour) ou None si invalide (`self.error`)."""
        self.error = None
        name = self.ed_name.text().strip()
        if not name:
            self.error = "La raison sociale est obligatoire."
            self.ed_name.setFocus(Qt.FocusReason.ActiveWindowFocusReason)
            return None

        fields = dict(
            name=name,
            siret=self.ed_siret.text().strip(),
            vat_number=self.ed_vat.text().strip(),
            address=self.ed_address.text().strip(),
            zip=self.ed_zip.text().strip(),
            city=self.ed_city.text().strip(),
            contact_name=self.ed_contact.text().strip(),
            email=self.ed_email.text().strip(),
            phone=self.ed_phone.text().strip(),
            status=self.cb_status.currentData(),
        )
        try:
            c = Client.model_validate(fields)
        except ModelError:
            self.error = "Adresse email invalide."
            self.ed_email.setFocus(Qt.FocusReason.ActiveWindowFocusReason)
            return None
        if self._orig_client:
            c.id = self._orig_client.id
        return c
