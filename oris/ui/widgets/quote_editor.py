from __future__ import annotations
from datetime import date
from typing import List, Optional, Sequence, Tuple

from PySide6.QtCore import QDate, Qt, QTimer
from PySide6.QtWidgets import (
    QComboBox, QDateEdit, QDialog, QDialogButtonBox, QFormLayout, QHBoxLayout,
    QHeaderView, QLabel, QMessageBox, QPushButton, QTableWidget, QTableWidgetItem,
    QTextEdit, QVBoxLayout
)

from oris.errors import OrisError
from oris.models.client import Client
from oris.models.common import in_days
from oris.models.quote import VAT_RATES, QuoteLine
from oris.models.training import TrainingModule
from oris.services.quote_service import VALIDITY_DAYS, QuoteDraft

COL_DESC, COL_QTY, COL_PRICE, COL_VAT, COL_TOTAL = range(5)
FIELD_FOR_COL = {COL_DESC: "description", COL_QTY: "quantity", COL_PRICE: "unit_price"}


def _money(v: float) -> str:
    return f"{v:,.2f} €".replace(",", " ").replace(".", ",")


class QuoteEditor(QDialog):
    """
    Saisie d'un devis : client, validité, lignes éditables.
    Les lignes vivent dans un QuoteDraft ; une désignation identique à un
    intitulé du catalogue reprend son prix HT.
    """

    def __init__(
        self,
        parent=None,
        clients: Sequence[Client] = (),
        draft: Optional[QuoteDraft] = None,
        trainings: Sequence[TrainingModule] = (),
    ):
        super().__init__(parent)
        self.setWindowTitle("Nouveau devis")
        self.setModal(True)
        self.resize(900, 600)
        self.draft = draft or QuoteDraft()
        self._loading = False

        self.cb_client = QComboBox()
        self.cb_client.addItem("— Sélectionner un client —", "")
        for c in clients:
            self.cb_client.addItem(c.name, c.id)

        self.ed_valid = QDateEdit()
        self.ed_valid.setCalendarPopup(True)
        v = in_days(date.today(), VALIDITY_DAYS)
        self.ed_valid.setDate(QDate(v.year, v.month, v.day))
        self.ed_notes = QTextEdit()
        self.ed_notes.setFixedHeight(60)

        self.cb_training = QComboBox()
        for t in trainings:
            self.cb_training.addItem(f"{t.reference} — {t.title} ({_money(t.price_ht)})", t.title)

        self.lab_totals = QLabel()

        self.tbl = QTableWidget(0, 5)
        self.tbl.setHorizontalHeaderLabels(["Désignation", "Qté", "PU HT", "TVA", "Total HT"])
        self.tbl.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.tbl.setSelectionBehavior(self.tbl.SelectionBehavior.SelectRows)
        self.tbl.itemChanged.connect(self._on_item_changed)

        btn_add = QPushButton("Ajouter une ligne")
        btn_add_training = QPushButton("Ajouter la formation")
        btn_del = QPushButton("Supprimer la ligne")
        btn_add.clicked.connect(self._add_line)
        btn_add_training.clicked.connect(self._add_training_line)
        btn_del.clicked.connect(self._del_line)

        top = QFormLayout()
        top.addRow("Client", self.cb_client)
        top.addRow("Valable jusqu'au", self.ed_valid)
        top.addRow("Notes", self.ed_notes)

        bar = QHBoxLayout()
        bar.addWidget(btn_add)
        bar.addWidget(btn_del)
        bar.addStretch(1)
        bar.addWidget(self.cb_training, 1)
        bar.addWidget(btn_add_training)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        lay = QVBoxLayout(self)
        lay.addLayout(top)
        lay.addLayout(bar)
        lay.addWidget(self.tbl, 1)
        lay.addWidget(self.lab_totals, 0, Qt.AlignmentFlag.AlignRight)
        lay.addWidget(btns)

        self._refresh_table()

    # -------- UI helpers --------
    def _refresh_table(self):
        self._loading = True
        self.tbl.setRowCount(0)
        for ln in self.draft.lines:
            r = self.tbl.rowCount()
            self.tbl.insertRow(r)
            desc = QTableWidgetItem(ln.description)
            desc.setData(Qt.ItemDataRole.UserRole, ln.id)
            self.tbl.setItem(r, COL_DESC, desc)
            self.tbl.setItem(r, COL_QTY, QTableWidgetItem(f"{ln.quantity:g}"))
            self.tbl.setItem(r, COL_PRICE, QTableWidgetItem(f"{ln.unit_price:.2f}"))

            cb = QComboBox()
            for rate in VAT_RATES:
                cb.addItem(f"{rate} %", rate)
            cb.setCurrentIndex(VAT_RATES.index(ln.vat_rate) if ln.vat_rate in VAT_RATES else 0)
            cb.currentIndexChanged.connect(
                lambda _i, lid=ln.id, box=cb: self._set_field(lid, "vat_rate", box.currentData())
            )
            self.tbl.setCellWidget(r, COL_VAT, cb)

            total = QTableWidgetItem(_money(ln.total_ht))
            total.setFlags(total.flags() & ~Qt.ItemFlag.ItemIsEditable)
            self.tbl.setItem(r, COL_TOTAL, total)
        self._loading = False
        self._update_totals()

    def _update_totals(self):
        t = self.draft.totals
        self.lab_totals.setText(
            f"Total HT : {_money(t.ht)}   TVA : {_money(t.vat)}   Total TTC : {_money(t.ttc)}"
        )

    def _line_id(self, row: int) -> Optional[str]:
        it = self.tbl.item(row, COL_DESC)
        return it.data(Qt.ItemDataRole.UserRole) if it else None

    def _on_item_changed(self, item: QTableWidgetItem):
        if self._loading or item.column() not in FIELD_FOR_COL:
            return
        lid = self._line_id(item.row())
        if not lid:
            return
        field = FIELD_FOR_COL[item.column()]
        value = item.text().strip()
        if field != "description":
            try:
                value = float(value.replace(",", ".").replace("€", "").strip() or 0)
            except ValueError:
                QMessageBox.warning(self, "Ligne", "Valeur numérique attendue.")
                QTimer.singleShot(0, self._refresh_table)
                return
        self._set_field(lid, field, value)

    def _set_field(self, line_id: str, field: str, value):
        try:
            self.draft.update_line(line_id, field, value)
        except OrisError as e:
            QMessageBox.warning(self, "Ligne", str(e))
        # rafraîchi hors du signal en cours d'émission
        QTimer.singleShot(0, self._refresh_table)

    def _add_line(self):
        self.draft.add_line()
        self._refresh_table()

    def _add_training_line(self):
        title = self.cb_training.currentData()
        if not title:
            return
        ln = self.draft.add_line()
        try:
            self.draft.update_line(ln.id, "description", title)
        except OrisError as e:
            QMessageBox.warning(self, "Ligne", str(e))
        self._refresh_table()

    def _del_line(self):
        row = self.tbl.currentRow()
        if row < 0:
            return
        lid = self._line_id(row)
        if lid:
            self.draft.remove_line(lid)
        self._refresh_table()

    # -------- Result --------
    def get_values(self) -> Optional[Tuple[str, List[QuoteLine], date, str]]:
        """(client_id, lignes, validité, notes) ; None si client absent."""
        client_id = self.cb_client.currentData()
        if not client_id:
            return None
        return (
            client_id,
            [ln.model_copy(deep=True) for ln in self.draft.lines],
            self.ed_valid.date().toPython(),
            self.ed_notes.toPlainText().strip(),
        )
